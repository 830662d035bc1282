"""Leaderboard service - personal bests per (wallet, game) and ranked reads."""

import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.config import settings
from frothpet.core.exceptions import ConflictError, ValidationError
from frothpet.models.leaderboard import MAX_SCORE, LeaderboardEntry
from frothpet.services.inventory_service import normalize_wallet

logger = logging.getLogger(__name__)


@dataclass
class ScoreSubmission:
    entry: LeaderboardEntry
    is_new_best: bool
    previous_best: int | None = None


def coerce_score(score) -> int:
    """Scores are non-negative integers; anything else is clamped or rejected."""
    if score is None or isinstance(score, bool):
        raise ValidationError("score is required")
    try:
        value = float(score)
    except (TypeError, ValueError):
        raise ValidationError("score must be a number")
    if math.isnan(value) or math.isinf(value):
        raise ValidationError("score must be a finite number")
    return min(MAX_SCORE, max(0, int(value)))


def dedupe_by_wallet(entries: Iterable[LeaderboardEntry], limit: int) -> list[LeaderboardEntry]:
    """Keep each wallet's highest row, best first, at most ``limit`` rows.

    Rows written before the (wallet, game) uniqueness existed can repeat a
    wallet, sometimes with different address casing.
    """
    best: dict[str, LeaderboardEntry] = {}
    for entry in entries:
        key = entry.wallet_address.lower()
        if key not in best or entry.score > best[key].score:
            best[key] = entry
    return sorted(best.values(), key=lambda e: e.score, reverse=True)[:limit]


class LeaderboardService:
    @staticmethod
    async def get_best_score(
        db: AsyncSession, game_id: str, wallet_address: str
    ) -> LeaderboardEntry | None:
        wallet = normalize_wallet(wallet_address)
        result = await db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.game_id == game_id, LeaderboardEntry.wallet_address == wallet)
            .order_by(LeaderboardEntry.score.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def submit_score(
        self,
        db: AsyncSession,
        wallet_address: str,
        game_id: str,
        score,
        pet_name: str | None = None,
        pet_token_id: str | None = None,
    ) -> ScoreSubmission:
        """Record a score, only ever raising the stored personal best."""
        wallet = normalize_wallet(wallet_address)
        if not game_id:
            raise ValidationError("gameId is required")
        score = coerce_score(score)
        pet_token_id = str(pet_token_id) if pet_token_id is not None else None

        existing = await self.get_best_score(db, game_id, wallet)
        if existing is None:
            entry = LeaderboardEntry(
                wallet_address=wallet,
                game_id=game_id,
                score=score,
                pet_name=pet_name,
                pet_token_id=pet_token_id,
            )
            db.add(entry)
            try:
                await db.flush()
            except IntegrityError as exc:
                raise ConflictError("Score was submitted concurrently, please retry") from exc
            await db.refresh(entry)
            logger.info("First %s score for %s: %d", game_id, wallet, score)
            return ScoreSubmission(entry=entry, is_new_best=True, previous_best=None)

        if score <= existing.score:
            return ScoreSubmission(entry=existing, is_new_best=False)

        previous_best = existing.score
        result = await db.execute(
            update(LeaderboardEntry)
            .where(
                LeaderboardEntry.id == existing.id,
                LeaderboardEntry.score < score,
            )
            .values(
                score=score,
                pet_name=pet_name,
                pet_token_id=pet_token_id,
                played_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        await db.refresh(existing)
        if result.rowcount == 0:
            # A higher score landed between our read and write
            return ScoreSubmission(entry=existing, is_new_best=False)

        logger.info("New %s best for %s: %d -> %d", game_id, wallet, previous_best, score)
        return ScoreSubmission(entry=existing, is_new_best=True, previous_best=previous_best)

    @staticmethod
    async def get_top_scores(
        db: AsyncSession, game_id: str, limit: int | None = None
    ) -> list[LeaderboardEntry]:
        """Best score per wallet, highest first.

        Over-fetches twice the limit before collapsing duplicate wallets; if
        duplicates outnumber that margin a top entry can still be missed.
        """
        limit = limit if limit and limit > 0 else settings.LEADERBOARD_DEFAULT_LIMIT
        result = await db.execute(
            select(LeaderboardEntry)
            .where(LeaderboardEntry.game_id == game_id)
            .order_by(LeaderboardEntry.score.desc())
            .limit(limit * 2)
        )
        return dedupe_by_wallet(result.scalars().all(), limit)


leaderboard_service = LeaderboardService()
