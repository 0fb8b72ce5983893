"""
Bounded fetch-and-parse loop.

The upstream model sometimes fences, misquotes or annotates its answer, so
a ParseError just means "ask again". FetchError is a transport failure and
is never retried here.
"""

import logging
from collections.abc import Callable

from metalwatch.ingestion.preprocessors.quote_parser import parse_quote
from metalwatch.shared.errors import ExhaustedError, ParseError
from metalwatch.shared.records import ParsedQuote
from metalwatch.shared.utils import setup_logger

DEFAULT_MAX_ATTEMPTS = 3


def obtain_quote(
    fetch: Callable[[], str],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    parse: Callable[[str], ParsedQuote] = parse_quote,
    logger: logging.Logger | None = None,
) -> ParsedQuote:
    """
    Call ``fetch`` then ``parse`` until a quote parses or the budget runs out.

    Attempts run back to back with no delay.

    Raises:
        ExhaustedError: every attempt raised ParseError
        FetchError: propagated unchanged from ``fetch``
        ValueError: ``max_attempts`` is below 1
    """

    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    logger = logger or setup_logger("metalwatch.retry")
    last_error: ParseError | None = None

    for attempt in range(1, max_attempts + 1):
        raw = fetch()
        try:
            quote = parse(raw)
        except ParseError as e:
            last_error = e
            logger.warning(
                "Attempt %d/%d: could not parse quote (%s): %s",
                attempt,
                max_attempts,
                type(e).__name__,
                e,
            )
            continue

        logger.info("Attempt %d/%d: gold=%s silver=%s", attempt, max_attempts, quote.gold, quote.silver)
        return quote

    raise ExhaustedError(max_attempts, last_error)
