"""Wallet Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from frothpet.schemas.common import CamelModel


class WalletSync(CamelModel):
    wallet_address: str = Field(min_length=1)
    has_nft: bool = False
    last_checked: datetime | None = None


class WalletState(CamelModel):
    wallet_address: str
    has_nft: bool
    last_checked: datetime
    updated_at: datetime
