"""Leaderboard model - one personal-best row per (wallet, game)."""

from datetime import datetime

from sqlalchemy import DateTime, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from frothpet.db.database import Base

MAX_SCORE = 2**31 - 1  # score is a 32-bit INTEGER column


class LeaderboardEntry(Base):
    __tablename__ = "leaderboard"
    __table_args__ = (
        UniqueConstraint("wallet_address", "game_id", name="uq_leaderboard_wallet_game"),
        Index("ix_leaderboard_game_score", "game_id", "score"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    wallet_address: Mapped[str] = mapped_column(String(42))
    game_id: Mapped[str] = mapped_column(String(50))
    score: Mapped[int] = mapped_column(Integer, default=0)

    # Display only; the pet may since have been sold
    pet_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pet_token_id: Mapped[str | None] = mapped_column(String(78), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    played_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
