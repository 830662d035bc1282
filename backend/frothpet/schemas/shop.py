"""Bag and shop Pydantic schemas."""

from pydantic import Field

from frothpet.schemas.common import CamelModel


class SyncBagRequest(CamelModel):
    wallet_address: str = Field(min_length=1)
    food_type: int
    quantity: int
    tx_hash: str | None = None  # purchase transaction; repeats are not credited twice


class SyncBagOut(CamelModel):
    food_type: str
    quantity: int
    wallet_address: str
    credited: bool = True


class BuyFoodOut(CamelModel):
    food_type: str
    quantity: int
    total_price: int
    wallet_address: str
