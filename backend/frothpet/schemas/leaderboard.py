"""Leaderboard Pydantic schemas."""

from datetime import datetime

from pydantic import Field, field_validator

from frothpet.schemas.common import CamelModel


class ScoreSubmit(CamelModel):
    wallet_address: str = Field(min_length=1)
    game_id: str = Field(min_length=1)
    score: float  # coerced to a non-negative int by the ranker
    pet_name: str | None = None
    pet_token_id: str | None = None

    @field_validator("pet_token_id", mode="before")
    @classmethod
    def _token_id_as_str(cls, v):
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v


class LeaderboardEntryOut(CamelModel):
    wallet_address: str
    game_id: str
    score: int
    pet_name: str | None
    pet_token_id: str | None
    created_at: datetime | None = None
    played_at: datetime | None = None
    updated_at: datetime | None = None


class ScoreSubmitResponse(CamelModel):
    success: bool = True
    data: LeaderboardEntryOut
    is_new_best: bool
    previous_best: int | None = None
    message: str | None = None
