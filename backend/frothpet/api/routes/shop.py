"""Shop and bag endpoints - food inventory reads and purchase syncs."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.db.database import get_db
from frothpet.schemas.common import Envelope
from frothpet.schemas.pet import FoodCounts
from frothpet.schemas.shop import BuyFoodOut, SyncBagOut, SyncBagRequest
from frothpet.services.inventory_service import food_for_type, inventory_service

router = APIRouter()


@router.get("/bag/{wallet_address}", response_model=Envelope[FoodCounts])
async def get_bag(wallet_address: str, db: AsyncSession = Depends(get_db)):
    counts = await inventory_service.get_bag(db, wallet_address)
    return Envelope[FoodCounts](data=FoodCounts.model_validate(counts))


@router.post("/shop/sync-bag", response_model=Envelope[SyncBagOut])
async def sync_bag(req: SyncBagRequest, db: AsyncSession = Depends(get_db)):
    """Credit food bought on-chain (called after buyFood is confirmed)."""
    food = food_for_type(req.food_type)
    _, credited = await inventory_service.credit(
        db, req.wallet_address, food.key, req.quantity, tx_hash=req.tx_hash
    )
    return Envelope[SyncBagOut](data=SyncBagOut(
        food_type=food.label,
        quantity=req.quantity,
        wallet_address=req.wallet_address.lower(),
        credited=credited,
    ))


@router.post("/shop/buy-food", response_model=Envelope[BuyFoodOut], deprecated=True)
async def buy_food(req: SyncBagRequest, db: AsyncSession = Depends(get_db)):
    """Off-chain purchase kept for old clients; prices are recorded, not charged."""
    food = food_for_type(req.food_type)
    await inventory_service.credit(db, req.wallet_address, food.key, req.quantity)
    return Envelope[BuyFoodOut](data=BuyFoodOut(
        food_type=food.label,
        quantity=req.quantity,
        total_price=food.price * req.quantity,
        wallet_address=req.wallet_address.lower(),
    ))
