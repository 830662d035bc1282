"""Game catalog and game session Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field

from frothpet.models.leaderboard import MAX_SCORE
from frothpet.schemas.common import CamelModel
from frothpet.schemas.leaderboard import LeaderboardEntryOut


class GameConfig(BaseModel):
    """Game definition loaded from YAML."""
    id: str
    name: str
    description: str = ""
    energy_cost: int = Field(gt=0)
    points_per_obstacle: int = Field(default=10, gt=0)


class GameSummary(CamelModel):
    id: str
    name: str
    description: str
    energy_cost: int
    points_per_obstacle: int


class SessionStartRequest(CamelModel):
    token_id: str = Field(min_length=1)
    wallet_address: str = Field(min_length=1)


class SessionState(CamelModel):
    session_id: str
    game_id: str
    token_id: str
    wallet_address: str
    pet_name: str | None = None
    score: int = 0
    obstacles_cleared: int = 0
    status: Literal["running", "crashed"] = "running"


class SessionStartResponse(CamelModel):
    session: SessionState
    previous_energy: int
    new_energy: int
    energy_cost: int


class SessionEvent(CamelModel):
    type: Literal["obstacle", "collision"]


class SessionFinishRequest(CamelModel):
    final_score: int | None = Field(default=None, ge=0, le=MAX_SCORE)
    exit: bool = True


class SessionFinishResponse(CamelModel):
    entry: LeaderboardEntryOut
    is_new_best: bool
    previous_best: int | None = None
    session_open: bool
