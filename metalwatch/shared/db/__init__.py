"""Database engine, session factory, ORM models, and the price store."""

from .base import Base
from .engine import build_engine
from .models import MetalPrice
from .session import create_session_factory, session_scope
from .storage import PriceStore, round_price

__all__ = [
    # ORM infrastructure
    "Base",
    "build_engine",
    "create_session_factory",
    "session_scope",
    # ORM models
    "MetalPrice",
    # Storage
    "PriceStore",
    "round_price",
]
