"""Inventory service - per-wallet food bag (burger / ayam) ledger."""

import logging
from dataclasses import dataclass

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import ConflictError, InsufficientInventoryError, ValidationError
from frothpet.models.bag import BagCredit, BagRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Food:
    type_id: int
    key: str
    label: str
    restore_amount: int
    price: int  # FROTH, legacy off-chain purchases only


FOODS: dict[int, Food] = {
    1: Food(1, "burger", "Burger", restore_amount=50, price=2),
    2: Food(2, "ayam", "Grilled Chicken", restore_amount=100, price=3),
}
FOOD_KEYS = {food.key: food for food in FOODS.values()}


@dataclass(frozen=True)
class BagCounts:
    burger: int = 0
    ayam: int = 0

    def as_dict(self) -> dict[str, int]:
        return {"burger": self.burger, "ayam": self.ayam}


def normalize_wallet(wallet_address: str | None) -> str:
    """Lowercase a wallet address for use as a key."""
    if not wallet_address or not str(wallet_address).strip():
        raise ValidationError("walletAddress is required")
    return str(wallet_address).strip().lower()


def food_for_type(food_type) -> Food:
    """Resolve a numeric food type (1 burger, 2 ayam)."""
    food = FOODS.get(food_type) if isinstance(food_type, int) and not isinstance(food_type, bool) else None
    if food is None:
        raise ValidationError("Invalid foodType. Must be 1 (Burger) or 2 (Grilled Chicken)")
    return food


def _check_food_key(food_key: str) -> str:
    if food_key not in FOOD_KEYS:
        raise ValidationError(f"Unknown food: {food_key}")
    return food_key


def _check_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError("Quantity must be positive")
    return quantity


class InventoryService:
    @staticmethod
    async def get_bag(db: AsyncSession, wallet_address: str) -> BagCounts:
        """Current counts; a wallet with no bag has zero of everything."""
        wallet = normalize_wallet(wallet_address)
        result = await db.execute(
            select(BagRecord.burger, BagRecord.ayam).where(BagRecord.wallet_address == wallet)
        )
        row = result.one_or_none()
        if row is None:
            return BagCounts()
        return BagCounts(burger=row.burger or 0, ayam=row.ayam or 0)

    async def credit(
        self,
        db: AsyncSession,
        wallet_address: str,
        food_key: str,
        quantity: int,
        tx_hash: str | None = None,
    ) -> tuple[BagCounts, bool]:
        """Add food to a wallet's bag, creating the bag on first purchase.

        Returns ``(counts, credited)``. With a ``tx_hash`` the credit is
        recorded once per transaction; a repeat is a no-op with
        ``credited=False``.
        """
        wallet = normalize_wallet(wallet_address)
        _check_food_key(food_key)
        quantity = _check_quantity(quantity)

        if tx_hash:
            tx_hash = tx_hash.strip().lower()
            seen = await db.execute(select(BagCredit.id).where(BagCredit.tx_hash == tx_hash))
            if seen.scalar_one_or_none() is not None:
                logger.info("Purchase %s already credited to %s, skipping", tx_hash, wallet)
                return await self.get_bag(db, wallet), False
            db.add(BagCredit(
                tx_hash=tx_hash, wallet_address=wallet, food_key=food_key, quantity=quantity
            ))
            try:
                await db.flush()
            except IntegrityError as exc:
                raise ConflictError(f"Purchase {tx_hash} is being credited concurrently") from exc

        column = getattr(BagRecord, food_key)
        try:
            result = await db.execute(
                update(BagRecord)
                .where(BagRecord.wallet_address == wallet)
                .values({food_key: column + quantity})
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                db.add(BagRecord(wallet_address=wallet, **{food_key: quantity}))
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError("Bag was updated concurrently, please retry") from exc

        logger.info("Credited %d %s to %s", quantity, food_key, wallet)
        return await self.get_bag(db, wallet), True

    async def debit(
        self, db: AsyncSession, wallet_address: str, food_key: str, quantity: int = 1
    ) -> BagCounts:
        """Remove food from a bag; never lets a count go below zero."""
        wallet = normalize_wallet(wallet_address)
        _check_food_key(food_key)
        quantity = _check_quantity(quantity)

        column = getattr(BagRecord, food_key)
        result = await db.execute(
            update(BagRecord)
            .where(BagRecord.wallet_address == wallet, column >= quantity)
            .values({food_key: column - quantity})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise InsufficientInventoryError(
                f"Insufficient food. Food type: {FOOD_KEYS[food_key].label}"
            )

        logger.info("Debited %d %s from %s", quantity, food_key, wallet)
        return await self.get_bag(db, wallet)


inventory_service = InventoryService()
