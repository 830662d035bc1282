"""Wallet service - cached pet-ownership signal per wallet."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.core.exceptions import ConflictError
from frothpet.models.wallet import WalletRecord
from frothpet.services.inventory_service import normalize_wallet


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class WalletService:
    @staticmethod
    async def get_wallet(db: AsyncSession, wallet_address: str) -> WalletRecord | None:
        wallet = normalize_wallet(wallet_address)
        result = await db.execute(select(WalletRecord).where(WalletRecord.wallet_address == wallet))
        return result.scalar_one_or_none()

    async def sync_wallet(
        self,
        db: AsyncSession,
        wallet_address: str,
        has_nft: bool,
        last_checked: datetime | None = None,
    ) -> WalletRecord:
        """Upsert the wallet's has-a-pet flag."""
        wallet = normalize_wallet(wallet_address)
        if last_checked is not None and last_checked.tzinfo is not None:
            last_checked = last_checked.astimezone(timezone.utc).replace(tzinfo=None)
        record = await self.get_wallet(db, wallet)
        if record is None:
            record = WalletRecord(wallet_address=wallet)
            db.add(record)
        record.has_nft = bool(has_nft)
        record.last_checked = last_checked or _utcnow()
        try:
            await db.flush()
        except IntegrityError as exc:
            raise ConflictError("Wallet was registered concurrently, please retry") from exc
        await db.refresh(record)
        return record


wallet_service = WalletService()
