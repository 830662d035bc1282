"""Pet-related Pydantic schemas."""

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from frothpet.schemas.common import CamelModel

Tier = Literal["common", "uncommon", "epic", "legendary"]


class PetSave(CamelModel):
    """Mint registration payload. ``energy`` only seeds a brand new record."""
    token_id: str = Field(min_length=1)
    owner: str = Field(min_length=1)
    tier: Tier = "common"
    image_uri: str = ""
    metadata_uri: str = ""
    level: int = Field(default=1, ge=1)
    energy: int = Field(default=100, ge=0, le=100)
    name: str | None = None

    @field_validator("token_id", mode="before")
    @classmethod
    def _token_id_as_str(cls, v):
        return str(v)

    @field_validator("tier", mode="before")
    @classmethod
    def _tier_lower(cls, v):
        return v.lower() if isinstance(v, str) else v


class PetUpdate(CamelModel):
    """Chain-mirrored descriptive fields. Energy is not writable here."""
    tier: Tier | None = None
    level: int | None = Field(default=None, ge=1)
    name: str | None = None
    image_uri: str | None = None
    metadata_uri: str | None = None


class PetState(CamelModel):
    token_id: str
    owner: str
    tier: str
    level: int
    energy: int
    name: str
    image_uri: str
    metadata_uri: str
    created_at: datetime
    updated_at: datetime


class MergedPetOut(CamelModel):
    """A pet as displayed to its owner: chain fields + off-chain energy."""
    token_id: str
    owner: str
    tier: str
    level: int
    energy: int
    name: str
    image_uri: str
    metadata_uri: str
    created_at: datetime | None = None


class SpendEnergyRequest(CamelModel):
    energy_cost: int = Field(gt=0)


class EnergyChangeOut(CamelModel):
    token_id: str
    previous_energy: int
    new_energy: int
    energy_cost: int


class FeedRequest(CamelModel):
    food_type: int
    wallet_address: str = Field(min_length=1)


class FoodCounts(CamelModel):
    burger: int = 0
    ayam: int = 0


class FeedResultOut(CamelModel):
    token_id: str
    previous_energy: int
    new_energy: int
    restore_amount: int
    food_type: str
    remaining_food: FoodCounts
