"""NFT endpoints - register mints, read/reconcile pets, spend energy."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.db.database import get_db
from frothpet.core.exceptions import NotFoundError
from frothpet.schemas.common import Envelope
from frothpet.schemas.pet import (
    EnergyChangeOut,
    MergedPetOut,
    PetSave,
    PetState,
    PetUpdate,
    SpendEnergyRequest,
)
from frothpet.services.chain_service import ChainReader, get_chain_reader
from frothpet.services.energy_service import energy_service
from frothpet.services.pet_sync_service import pet_sync_service

router = APIRouter()


@router.post("/save", response_model=Envelope[PetState])
async def save_nft(data: PetSave, db: AsyncSession = Depends(get_db)):
    """Register (or refresh) a pet after a confirmed mint."""
    pet = await pet_sync_service.register_mint(db, data)
    return Envelope[PetState](data=PetState.model_validate(pet))


@router.get("/owner/{owner}", response_model=Envelope[list[MergedPetOut]])
async def get_owner_nfts(
    owner: str,
    db: AsyncSession = Depends(get_db),
    chain: ChainReader | None = Depends(get_chain_reader),
):
    """Pets visible to a wallet, reconciled against the chain when reachable."""
    pets = await pet_sync_service.sync_wallet(db, owner, chain)
    return Envelope[list[MergedPetOut]](data=[MergedPetOut.model_validate(p) for p in pets])


@router.get("/{token_id}", response_model=Envelope[PetState])
async def get_nft(token_id: str, db: AsyncSession = Depends(get_db)):
    pet = await pet_sync_service.get_pet(db, token_id)
    return Envelope[PetState](data=PetState.model_validate(pet))


@router.patch("/{token_id}", response_model=Envelope[PetState])
async def update_nft(token_id: str, data: PetUpdate, db: AsyncSession = Depends(get_db)):
    """Update chain-mirrored fields (tier, level, name, images)."""
    pet = await pet_sync_service.update_pet(db, token_id, data)
    return Envelope[PetState](data=PetState.model_validate(pet))


@router.delete("/{token_id}", response_model=Envelope[dict])
async def delete_nft(token_id: str, db: AsyncSession = Depends(get_db)):
    """Forget a pet that was sold or transferred away."""
    if not await pet_sync_service.delete_pet(db, token_id):
        raise NotFoundError("NFT not found")
    return Envelope[dict](data={"tokenId": token_id, "deleted": True})


@router.post("/{token_id}/spend-energy", response_model=Envelope[EnergyChangeOut])
async def spend_energy(token_id: str, req: SpendEnergyRequest, db: AsyncSession = Depends(get_db)):
    """Pay energy to start a game. Off-chain, no wallet confirmation."""
    change = await energy_service.spend_energy(db, token_id, req.energy_cost)
    return Envelope[EnergyChangeOut](data=EnergyChangeOut.model_validate(change))
