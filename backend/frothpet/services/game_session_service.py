"""Game session service - bridges the client game loop and the ledgers.

The game loop itself runs on the client and reports obstacle / collision
events and a final score. Starting a run pays its energy cost immediately and
for good: abandoning or disconnecting does not refund it. Finishing a run only
submits the score; it never touches energy.
"""

import logging
import uuid
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import ForbiddenError, NotFoundError
from frothpet.core.session_engine import SessionEngine
from frothpet.schemas.game import SessionState
from frothpet.services.energy_service import EnergyChange, energy_service
from frothpet.services.game_service import game_service
from frothpet.services.inventory_service import normalize_wallet
from frothpet.services.leaderboard_service import ScoreSubmission, leaderboard_service
from frothpet.services.pet_sync_service import pet_sync_service

logger = logging.getLogger(__name__)


@dataclass
class SessionStart:
    session: SessionState
    energy: EnergyChange


class GameSessionService:
    def __init__(self, engine: SessionEngine):
        self.engine = engine

    async def _get_session(self, session_id: str) -> SessionState:
        state = await self.engine.load_state(session_id)
        if state is None:
            raise NotFoundError("Game session not found or expired")
        return state

    async def start_session(
        self, db: AsyncSession, game_id: str, token_id: str, wallet_address: str
    ) -> SessionStart:
        game = game_service.load_game(game_id)
        wallet = normalize_wallet(wallet_address)
        pet = await pet_sync_service.get_pet(db, token_id)
        if pet.owner.lower() != wallet:
            raise ForbiddenError("Not the owner of this pet")

        change = await energy_service.spend_energy(db, pet.token_id, game.energy_cost)
        state = SessionState(
            session_id=uuid.uuid4().hex,
            game_id=game.id,
            token_id=pet.token_id,
            wallet_address=wallet,
            pet_name=pet.name,
        )
        await self.engine.save_state(state)
        logger.info("Session %s started: %s with pet %s", state.session_id, game.id, pet.token_id)
        return SessionStart(session=state, energy=change)

    async def record_event(self, session_id: str, event_type: str) -> SessionState:
        """Apply one game-loop event. Events after a collision are ignored."""
        state = await self._get_session(session_id)
        if state.status == "crashed":
            return state
        if event_type == "obstacle":
            game = game_service.load_game(state.game_id)
            state.obstacles_cleared += 1
            state.score += game.points_per_obstacle
        elif event_type == "collision":
            state.status = "crashed"
        await self.engine.save_state(state)
        return state

    async def finish_session(
        self,
        db: AsyncSession,
        session_id: str,
        final_score: int | None = None,
        exit: bool = True,
    ) -> tuple[ScoreSubmission, bool]:
        """Submit the run's score. Returns ``(submission, session_still_open)``.

        ``exit=False`` keeps the session for a restart without paying again.
        """
        state = await self._get_session(session_id)
        score = final_score if final_score is not None else state.score
        submission = await leaderboard_service.submit_score(
            db,
            state.wallet_address,
            state.game_id,
            score,
            pet_name=state.pet_name,
            pet_token_id=state.token_id,
        )

        if exit:
            await self.engine.clear_state(session_id)
        else:
            state.score = 0
            state.obstacles_cleared = 0
            state.status = "running"
            await self.engine.save_state(state)
        logger.info("Session %s finished with score %d (exit=%s)", session_id, score, exit)
        return submission, not exit
