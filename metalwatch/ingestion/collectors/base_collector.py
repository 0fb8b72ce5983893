"""Abstract base class for upstream quote sources.

A quote source returns free text. It does not validate the text; that is
the parser's job. Transport failures must surface as ``FetchError`` so the
retry loop can tell them apart from formatting noise.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from metalwatch.shared.utils import setup_logger


class BaseQuoteCollector(ABC):
    """Base class for all quote sources.

    Subclasses must define:
        SOURCE_NAME (str): identifier used in log messages (e.g. "gemini").

    Subclasses must implement:
        fetch(): return the raw quote text.
        health_check(): verify the source is reachable.
    """

    SOURCE_NAME: str

    def __init__(self, log_file: Path | None = None, logger: logging.Logger | None = None) -> None:
        """Initialize the collector.

        Args:
            log_file: Optional path for file-based logging.
            logger: Pre-built logger; overrides ``log_file``.
        """
        self.logger = logger or setup_logger(self.__class__.__name__, log_file)

    @abstractmethod
    def fetch(self) -> str:
        """Request one quote from the source.

        Returns:
            The raw response text, possibly empty.

        Raises:
            FetchError: The source could not be reached.
        """
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Verify the source is reachable and responding.

        Returns:
            True if the source is available, False otherwise.
        """
        ...
