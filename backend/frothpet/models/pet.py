"""Pet model - off-chain record of a minted pet NFT."""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from frothpet.db.database import Base

MAX_ENERGY = 100
TIERS = ("common", "uncommon", "epic", "legendary")


class PetRecord(Base):
    __tablename__ = "nfts"
    __table_args__ = (
        CheckConstraint(f"energy >= 0 AND energy <= {MAX_ENERGY}", name="ck_nfts_energy_range"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    token_id: Mapped[str] = mapped_column(String(78), unique=True)
    owner: Mapped[str] = mapped_column(String(42), index=True)  # lowercase

    # Mirrored from chain
    tier: Mapped[str] = mapped_column(String(20), default="common")
    level: Mapped[int] = mapped_column(Integer, default=1)
    name: Mapped[str] = mapped_column(String(100))
    image_uri: Mapped[str] = mapped_column(String(500), default="")
    metadata_uri: Mapped[str] = mapped_column(String(500), default="")

    # Off-chain authoritative; only the energy ledger writes this
    energy: Mapped[int] = mapped_column(Integer, default=MAX_ENERGY)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
