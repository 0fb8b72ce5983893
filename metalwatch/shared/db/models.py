from sqlalchemy import TIMESTAMP, Column, Date, Integer, UniqueConstraint

from .base import Base


class MetalPrice(Base):
    __tablename__ = "metal_prices"

    id = Column(Integer, primary_key=True)
    price_date = Column(Date, nullable=False)
    gold = Column(Integer, nullable=False)
    silver = Column(Integer, nullable=False)
    updated_at = Column(TIMESTAMP)

    __table_args__ = (UniqueConstraint("price_date", name="uq_metal_prices_price_date"),)
