"""Bag models - per-wallet food inventory and the purchase credits that fed it."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from frothpet.db.database import Base


class BagRecord(Base):
    __tablename__ = "bags"
    __table_args__ = (
        CheckConstraint("burger >= 0", name="ck_bags_burger_nonneg"),
        CheckConstraint("ayam >= 0", name="ck_bags_ayam_nonneg"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    wallet_address: Mapped[str] = mapped_column(String(42), unique=True)
    burger: Mapped[int] = mapped_column(Integer, default=0)
    ayam: Mapped[int] = mapped_column(Integer, default=0)  # grilled chicken

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )


class BagCredit(Base):
    """One credited on-chain purchase, keyed by its transaction hash."""
    __tablename__ = "bag_credits"

    id: Mapped[int] = mapped_column(primary_key=True)
    tx_hash: Mapped[str] = mapped_column(String(66), unique=True)
    wallet_address: Mapped[str] = mapped_column(String(42), index=True)
    food_key: Mapped[str] = mapped_column(String(20))
    quantity: Mapped[int] = mapped_column(Integer)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
