"""
Daily price store for metalwatch.

One row per calendar date in ``metal_prices``. Writing a date that already
has a row replaces its gold and silver values, so running the tracker twice
on the same day leaves exactly one row holding the latest quote.

Example:

    from metalwatch.shared.db import PriceStore, build_engine, create_session_factory

    store = PriceStore(create_session_factory(build_engine("sqlite:///data/metal_prices.db")))
    store.initialize()
    record, diff = store.upsert_and_diff(date(2024, 1, 2), ParsedQuote(151500, 1950))
"""

import logging
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

import pandas as pd
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from metalwatch.shared.errors import StoreError
from metalwatch.shared.records import DiffResult, ParsedQuote, PriceRecord
from metalwatch.shared.utils import setup_logger

from .base import Base
from .models import MetalPrice
from .session import session_scope

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}

HISTORY_COLUMNS = ["date", "gold", "silver"]


def round_price(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class PriceStore:
    """Date-keyed gold/silver time series."""

    def __init__(self, session_factory: sessionmaker, logger: logging.Logger | None = None) -> None:
        self._session_factory = session_factory
        self.logger = logger or setup_logger(self.__class__.__name__)

    def initialize(self) -> None:
        """Create the price table if it does not exist."""
        try:
            with session_scope(self._session_factory) as session:
                Base.metadata.create_all(session.get_bind())
        except SQLAlchemyError as e:
            raise StoreError(f"Could not initialise price table: {e}") from e

    def upsert_and_diff(self, price_date: date, quote: ParsedQuote) -> tuple[PriceRecord, DiffResult]:
        """Store today's quote and diff it against the previous calendar day.

        The previous day is read before today's row is written, and both
        happen in one transaction.

        Returns:
            The stored record and its diff against ``price_date - 1 day``.

        Raises:
            StoreError: The database was unreachable or rejected the write.
        """
        try:
            record = PriceRecord(
                date=price_date,
                gold=round_price(quote.gold),
                silver=round_price(quote.silver),
            )
        except (ValueError, ArithmeticError) as e:
            raise StoreError(f"Rejected prices for {price_date}: {e}") from e

        try:
            with session_scope(self._session_factory) as session:
                yesterday = self._find(session, price_date - timedelta(days=1))
                self._upsert(session, record)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not store prices for {price_date}: {e}") from e

        if yesterday is None:
            diff = DiffResult()
        else:
            diff = DiffResult(
                gold_diff=record.gold - yesterday.gold,
                silver_diff=record.silver - yesterday.silver,
            )

        self.logger.info(
            "Stored %s gold=%d silver=%d (diff gold=%s silver=%s)",
            record.date,
            record.gold,
            record.silver,
            diff.gold_diff,
            diff.silver_diff,
        )
        return record, diff

    def get(self, price_date: date) -> PriceRecord | None:
        """Point lookup by exact date."""
        try:
            with session_scope(self._session_factory) as session:
                return self._find(session, price_date)
        except SQLAlchemyError as e:
            raise StoreError(f"Could not read prices for {price_date}: {e}") from e

    def history(self) -> pd.DataFrame:
        """All stored rows as a DataFrame ordered by date."""
        try:
            with session_scope(self._session_factory) as session:
                rows = session.query(MetalPrice).order_by(MetalPrice.price_date).all()
                data = [{"date": r.price_date, "gold": r.gold, "silver": r.silver} for r in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Could not read price history: {e}") from e
        return pd.DataFrame(data, columns=HISTORY_COLUMNS)

    def export_to_csv(self, output_path: Path) -> Path:
        """Write the full history as a ``date,gold,silver`` CSV file."""
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        df = self.history()
        df.to_csv(output_path, index=False, encoding="utf-8")
        self.logger.info("Exported %d price rows to %s", len(df), output_path)
        return output_path

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _find(session: Session, price_date: date) -> PriceRecord | None:
        row = session.query(MetalPrice).filter(MetalPrice.price_date == price_date).one_or_none()
        if row is None:
            return None
        return PriceRecord(date=row.price_date, gold=row.gold, silver=row.silver)

    @staticmethod
    def _upsert(session: Session, record: PriceRecord) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        insert = _UPSERT_INSERTS.get(session.get_bind().dialect.name)

        if insert is not None:
            stmt = insert(MetalPrice).values(
                price_date=record.date,
                gold=record.gold,
                silver=record.silver,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=["price_date"],
                set_={
                    "gold": stmt.excluded.gold,
                    "silver": stmt.excluded.silver,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            session.execute(stmt)
            return

        # No native upsert: lock the date's row for the rest of the transaction
        row = (
            session.query(MetalPrice)
            .filter(MetalPrice.price_date == record.date)
            .with_for_update()
            .one_or_none()
        )
        if row is None:
            session.add(
                MetalPrice(
                    price_date=record.date,
                    gold=record.gold,
                    silver=record.silver,
                    updated_at=now,
                )
            )
        else:
            row.gold = record.gold
            row.silver = record.silver
            row.updated_at = now
        session.flush()
