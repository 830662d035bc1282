"""Feeding service - turns one food item from the bag into pet energy.

The debit and the energy restore happen together or not at all: the food is
debited first, and if the restore fails the food is credited straight back
before the error propagates. The request transaction is rolled back on error
as well, so callers never observe a half-applied feed.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import (
    AlreadyFullError,
    ForbiddenError,
    InvalidInputError,
    NotFoundError,
    ValidationError,
)
from frothpet.models.pet import MAX_ENERGY, PetRecord
from frothpet.services.energy_service import energy_service
from frothpet.services.inventory_service import (
    BagCounts,
    food_for_type,
    inventory_service,
    normalize_wallet,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedResult:
    token_id: str
    previous_energy: int
    new_energy: int
    restore_amount: int
    food_type: str
    remaining_food: BagCounts


class FeedingService:
    async def feed_pet(
        self, db: AsyncSession, token_id: str, food_type: int, wallet_address: str
    ) -> FeedResult:
        try:
            food = food_for_type(food_type)
        except ValidationError as exc:
            raise InvalidInputError(exc.message) from exc
        wallet = normalize_wallet(wallet_address)
        token_id = str(token_id)

        result = await db.execute(
            select(PetRecord)
            .where(PetRecord.token_id == token_id)
            .execution_options(populate_existing=True)
        )
        pet = result.scalar_one_or_none()
        if pet is None:
            raise NotFoundError("NFT not found")
        if pet.owner.lower() != wallet:
            raise ForbiddenError("Not the owner of this pet")
        if pet.energy >= MAX_ENERGY:
            raise AlreadyFullError("Pet already has full energy!")

        remaining = await inventory_service.debit(db, wallet, food.key, 1)
        try:
            change = await energy_service.restore_energy(db, token_id, food.restore_amount)
        except Exception:
            logger.warning("Restore failed for pet %s, returning 1 %s to %s", token_id, food.key, wallet)
            await inventory_service.credit(db, wallet, food.key, 1)
            raise

        logger.info("Pet %s fed %s by %s (%d -> %d)",
                    token_id, food.key, wallet, change.previous_energy, change.new_energy)
        return FeedResult(
            token_id=token_id,
            previous_energy=change.previous_energy,
            new_energy=change.new_energy,
            restore_amount=food.restore_amount,
            food_type=food.label,
            remaining_food=remaining,
        )


feeding_service = FeedingService()
