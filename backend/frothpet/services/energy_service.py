"""Energy service - the only writer of a pet's ``energy``.

Every mutation is a single conditional UPDATE, so concurrent requests against
the same pet are serialised by the database row lock instead of racing through
a read-check-write sequence.
"""

import logging
from dataclasses import dataclass

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import (
    AlreadyFullError,
    InsufficientEnergyError,
    NotFoundError,
    ValidationError,
)
from frothpet.models.pet import MAX_ENERGY, PetRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnergyChange:
    token_id: str
    previous_energy: int
    new_energy: int
    energy_cost: int = 0


def _require_positive_int(value, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} is required and must be a positive integer")
    return value


class EnergyService:
    @staticmethod
    async def get_energy(db: AsyncSession, token_id: str) -> int:
        """Current stored energy; raises NotFoundError for unknown pets."""
        result = await db.execute(
            select(PetRecord.energy).where(PetRecord.token_id == str(token_id))
        )
        energy = result.scalar_one_or_none()
        if energy is None:
            raise NotFoundError("NFT not found")
        return energy

    async def spend_energy(self, db: AsyncSession, token_id: str, cost: int) -> EnergyChange:
        """Deduct ``cost`` energy, failing rather than going below zero."""
        cost = _require_positive_int(cost, "energyCost")
        token_id = str(token_id)

        result = await db.execute(
            update(PetRecord)
            .where(PetRecord.token_id == token_id, PetRecord.energy >= cost)
            .values(energy=PetRecord.energy - cost)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Either the pet does not exist or it cannot afford the cost
            current = await self.get_energy(db, token_id)
            raise InsufficientEnergyError(
                f"Not enough energy. Current: {current}, Required: {cost}"
            )

        new_energy = await self.get_energy(db, token_id)
        logger.info("Pet %s spent %d energy (%d -> %d)", token_id, cost, new_energy + cost, new_energy)
        return EnergyChange(
            token_id=token_id,
            previous_energy=new_energy + cost,
            new_energy=new_energy,
            energy_cost=cost,
        )

    async def restore_energy(self, db: AsyncSession, token_id: str, amount: int) -> EnergyChange:
        """Add ``amount`` energy, capped at MAX_ENERGY.

        Only applies while the pet is below the cap; a pet that filled up
        between the caller's read and this write raises AlreadyFullError.
        """
        amount = _require_positive_int(amount, "amount")
        token_id = str(token_id)

        previous = await self.get_energy(db, token_id)
        result = await db.execute(
            update(PetRecord)
            .where(PetRecord.token_id == token_id, PetRecord.energy < MAX_ENERGY)
            .values(
                energy=case(
                    (PetRecord.energy + amount > MAX_ENERGY, MAX_ENERGY),
                    else_=PetRecord.energy + amount,
                )
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise AlreadyFullError("Pet already has full energy!")

        new_energy = await self.get_energy(db, token_id)
        logger.info("Pet %s restored energy (%d -> %d)", token_id, previous, new_energy)
        return EnergyChange(token_id=token_id, previous_energy=previous, new_energy=new_energy)


energy_service = EnergyService()
