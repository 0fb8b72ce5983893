"""
Root pytest configuration.

Shared fixtures: a throwaway SQLite price store and a quiet logger.
"""

import logging
from pathlib import Path

import pytest

from metalwatch.shared.db import PriceStore, build_engine, create_session_factory


@pytest.fixture
def quiet_logger() -> logging.Logger:
    """Logger that only records, never prints."""
    logger = logging.getLogger("metalwatch.tests")
    logger.handlers = [logging.NullHandler()]
    logger.propagate = True
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'db' / 'metal_prices.db'}"


@pytest.fixture
def store(database_url: str, quiet_logger: logging.Logger) -> PriceStore:
    """Initialised PriceStore backed by a SQLite file in tmp_path."""
    price_store = PriceStore(
        create_session_factory(build_engine(database_url)), logger=quiet_logger
    )
    price_store.initialize()
    return price_store
