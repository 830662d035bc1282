"""Game endpoints - catalog and game sessions."""

import redis.asyncio as aioredis
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.session_engine import SessionEngine
from frothpet.db.database import get_db
from frothpet.db.redis import get_redis
from frothpet.schemas.common import Envelope
from frothpet.schemas.game import (
    GameSummary,
    SessionEvent,
    SessionFinishRequest,
    SessionFinishResponse,
    SessionStartRequest,
    SessionStartResponse,
    SessionState,
)
from frothpet.schemas.leaderboard import LeaderboardEntryOut
from frothpet.services.game_service import game_service
from frothpet.services.game_session_service import GameSessionService

router = APIRouter()


async def get_session_service(redis: aioredis.Redis = Depends(get_redis)) -> GameSessionService:
    return GameSessionService(SessionEngine(redis))


@router.get("/", response_model=Envelope[list[GameSummary]])
async def list_games():
    return Envelope[list[GameSummary]](
        data=[GameSummary.model_validate(g.model_dump()) for g in game_service.list_games()]
    )


@router.get("/{game_id}", response_model=Envelope[GameSummary])
async def get_game(game_id: str):
    game = game_service.load_game(game_id)
    return Envelope[GameSummary](data=GameSummary.model_validate(game.model_dump()))


@router.post("/{game_id}/sessions", response_model=Envelope[SessionStartResponse], status_code=201)
async def start_session(
    game_id: str,
    req: SessionStartRequest,
    db: AsyncSession = Depends(get_db),
    sessions: GameSessionService = Depends(get_session_service),
):
    """Start a run. The energy cost is charged now and is not refunded."""
    started = await sessions.start_session(db, game_id, req.token_id, req.wallet_address)
    return Envelope[SessionStartResponse](data=SessionStartResponse(
        session=started.session,
        previous_energy=started.energy.previous_energy,
        new_energy=started.energy.new_energy,
        energy_cost=started.energy.energy_cost,
    ))


@router.post("/sessions/{session_id}/events", response_model=Envelope[SessionState])
async def session_event(
    session_id: str,
    event: SessionEvent,
    sessions: GameSessionService = Depends(get_session_service),
):
    state = await sessions.record_event(session_id, event.type)
    return Envelope[SessionState](data=state)


@router.post("/sessions/{session_id}/finish", response_model=Envelope[SessionFinishResponse])
async def finish_session(
    session_id: str,
    req: SessionFinishRequest,
    db: AsyncSession = Depends(get_db),
    sessions: GameSessionService = Depends(get_session_service),
):
    """Submit the run's score; ``exit: false`` keeps the session for a free restart."""
    submission, still_open = await sessions.finish_session(db, session_id, req.final_score, req.exit)
    return Envelope[SessionFinishResponse](data=SessionFinishResponse(
        entry=LeaderboardEntryOut.model_validate(submission.entry),
        is_new_best=submission.is_new_best,
        previous_best=submission.previous_best,
        session_open=still_open,
    ))
