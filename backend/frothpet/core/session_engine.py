"""Session engine - holds in-progress game runs in Redis."""

import json

import redis.asyncio as aioredis

from frothpet.config import settings
from frothpet.schemas.game import SessionState


class SessionEngine:
    """Stores running game sessions; they expire after GAME_SESSION_TTL."""

    def __init__(self, redis: aioredis.Redis):
        self.redis = redis

    def _state_key(self, session_id: str) -> str:
        return f"game:session:{session_id}"

    async def save_state(self, state: SessionState) -> None:
        await self.redis.set(
            self._state_key(state.session_id),
            state.model_dump_json(),
            ex=settings.GAME_SESSION_TTL,
        )

    async def load_state(self, session_id: str) -> SessionState | None:
        """Load a running session, or None if expired/doesn't exist."""
        raw = await self.redis.get(self._state_key(session_id))
        if raw:
            return SessionState(**json.loads(raw))
        return None

    async def clear_state(self, session_id: str) -> None:
        """Forget a session (player exited)."""
        await self.redis.delete(self._state_key(session_id))
