"""Wallet endpoints - ownership cache."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.db.database import get_db
from frothpet.schemas.common import Envelope
from frothpet.schemas.wallet import WalletState, WalletSync
from frothpet.services.wallet_service import wallet_service

router = APIRouter()


@router.post("/sync", response_model=Envelope[WalletState])
async def sync_wallet(data: WalletSync, db: AsyncSession = Depends(get_db)):
    record = await wallet_service.sync_wallet(db, data.wallet_address, data.has_nft, data.last_checked)
    return Envelope[WalletState](data=WalletState.model_validate(record))


@router.get("/{wallet_address}", response_model=Envelope[WalletState | None])
async def get_wallet(wallet_address: str, db: AsyncSession = Depends(get_db)):
    record = await wallet_service.get_wallet(db, wallet_address)
    return Envelope[WalletState | None](
        data=WalletState.model_validate(record) if record else None
    )
