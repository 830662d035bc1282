"""Leaderboard endpoints - submit scores, ranked and personal-best reads."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.config import settings
from frothpet.db.database import get_db
from frothpet.schemas.common import Envelope
from frothpet.schemas.leaderboard import LeaderboardEntryOut, ScoreSubmit, ScoreSubmitResponse
from frothpet.services.leaderboard_service import leaderboard_service

router = APIRouter()


@router.post("/save", response_model=ScoreSubmitResponse)
async def save_score(req: ScoreSubmit, db: AsyncSession = Depends(get_db)):
    """Submit a score; only a new personal best is written."""
    result = await leaderboard_service.submit_score(
        db, req.wallet_address, req.game_id, req.score, req.pet_name, req.pet_token_id
    )
    return ScoreSubmitResponse(
        data=LeaderboardEntryOut.model_validate(result.entry),
        is_new_best=result.is_new_best,
        previous_best=result.previous_best,
        message=None if result.is_new_best else "Score not higher than best score",
    )


@router.get("/{game_id}", response_model=Envelope[list[LeaderboardEntryOut]])
async def top_scores(
    game_id: str,
    limit: int = Query(default=settings.LEADERBOARD_DEFAULT_LIMIT, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    entries = await leaderboard_service.get_top_scores(db, game_id, limit)
    return Envelope[list[LeaderboardEntryOut]](
        data=[LeaderboardEntryOut.model_validate(e) for e in entries]
    )


@router.get("/{game_id}/{wallet_address}", response_model=Envelope[LeaderboardEntryOut | None])
async def best_score(game_id: str, wallet_address: str, db: AsyncSession = Depends(get_db)):
    entry = await leaderboard_service.get_best_score(db, game_id, wallet_address)
    return Envelope[LeaderboardEntryOut | None](
        data=LeaderboardEntryOut.model_validate(entry) if entry else None
    )
