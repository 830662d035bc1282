"""Pet sync service - keeps off-chain pet records in step with the NFT contract.

Chain reads are best effort: when the chain cannot be read the stored record
is served as-is, since energy and inventory must stay usable without it.
"""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import ConflictError, NotFoundError
from frothpet.core.reconciliation import (
    ChainPetView,
    DbPetView,
    MergedPet,
    clean_pet_name,
    parse_token_id,
    reconcile,
)
from frothpet.models.pet import PetRecord
from frothpet.schemas.pet import PetSave, PetUpdate
from frothpet.services.chain_service import ChainReader, TokenNotFoundError
from frothpet.services.inventory_service import normalize_wallet
from frothpet.services.wallet_service import wallet_service

logger = logging.getLogger(__name__)


class PetSyncService:
    @staticmethod
    async def get_pet(db: AsyncSession, token_id: str) -> PetRecord:
        result = await db.execute(
            select(PetRecord)
            .where(PetRecord.token_id == str(token_id))
            .execution_options(populate_existing=True)
        )
        pet = result.scalar_one_or_none()
        if pet is None:
            raise NotFoundError("NFT not found")
        return pet

    async def register_mint(self, db: AsyncSession, data: PetSave) -> PetRecord:
        """Upsert a pet after a confirmed mint.

        Descriptive fields are refreshed on every call; energy is only seeded
        when the record is new.
        """
        owner = normalize_wallet(data.owner)
        result = await db.execute(select(PetRecord).where(PetRecord.token_id == data.token_id))
        pet = result.scalar_one_or_none()
        if pet is None:
            pet = PetRecord(token_id=data.token_id, owner=owner, energy=data.energy)
            db.add(pet)
            logger.info("Registered pet %s for %s", data.token_id, owner)
        pet.owner = owner
        pet.tier = data.tier
        pet.level = data.level
        pet.name = clean_pet_name(data.name, data.token_id)
        pet.image_uri = data.image_uri
        pet.metadata_uri = data.metadata_uri
        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError(f"Pet {data.token_id} was registered concurrently, please retry") from exc

        await wallet_service.sync_wallet(db, owner, has_nft=True)
        await db.refresh(pet)
        return pet

    async def update_pet(self, db: AsyncSession, token_id: str, data: PetUpdate) -> PetRecord:
        pet = await self.get_pet(db, token_id)
        for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(pet, field, value)
        await db.flush()
        await db.refresh(pet)
        return pet

    @staticmethod
    async def delete_pet(db: AsyncSession, token_id: str) -> bool:
        """Drop the record of a sold pet. Returns False if there was none."""
        result = await db.execute(delete(PetRecord).where(PetRecord.token_id == str(token_id)))
        if result.rowcount:
            logger.info("Deleted pet %s", token_id)
        return bool(result.rowcount)

    @staticmethod
    async def _read_chain(chain: ChainReader | None, token_id: int) -> tuple[ChainPetView | None, bool]:
        """Returns ``(view, exists)``; view is None when the chain is unreadable."""
        if chain is None or not chain.has_pet_contract:
            return None, True
        try:
            return await run_in_threadpool(chain.read_pet, token_id), True
        except TokenNotFoundError:
            logger.warning("Token %s not found on chain; excluding", token_id)
            return None, False
        except Exception as e:
            logger.warning("Chain read for token %s failed, using stored view: %s", token_id, e)
            return None, True

    async def sync_wallet(
        self, db: AsyncSession, wallet_address: str, chain: ChainReader | None = None
    ) -> list[MergedPet]:
        """The wallet's visible pets: stored records reconciled against the chain.

        Records whose chain owner is someone else are moved to that owner
        (energy kept) and left out of this wallet's view.
        """
        wallet = normalize_wallet(wallet_address)
        result = await db.execute(
            select(PetRecord)
            .where(PetRecord.owner == wallet)
            .execution_options(populate_existing=True)
        )
        records = result.scalars().all()

        merged: list[MergedPet] = []
        for record in records:
            token_num = parse_token_id(record.token_id)
            if token_num is None:
                logger.warning("Skipping invalid tokenId: %r", record.token_id)
                continue

            chain_view, exists = await self._read_chain(chain, token_num)
            if not exists:
                continue
            if chain_view is not None and chain_view.owner and chain_view.owner != wallet:
                logger.info("Pet %s transferred %s -> %s", record.token_id, wallet, chain_view.owner)
                record.owner = chain_view.owner
                continue

            pet = reconcile(record.token_id, chain_view, DbPetView.from_record(record), wallet)
            if pet is None:
                continue
            if chain_view is not None and chain_view.has_pet_data:
                # Mirror the chain's descriptive fields; energy stays ours
                record.tier, record.level = pet.tier, pet.level
                record.name, record.image_uri = pet.name, pet.image_uri
            merged.append(pet)

        await db.flush()
        merged.sort(key=lambda p: int(p.token_id))
        await wallet_service.sync_wallet(db, wallet, has_nft=bool(merged))
        return merged


pet_sync_service = PetSyncService()
