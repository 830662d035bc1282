"""Pet endpoints - feeding."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.db.database import get_db
from frothpet.schemas.common import Envelope
from frothpet.schemas.pet import FeedRequest, FeedResultOut
from frothpet.services.feeding_service import feeding_service

router = APIRouter()


@router.post("/{token_id}/feed", response_model=Envelope[FeedResultOut])
async def feed_pet(token_id: str, req: FeedRequest, db: AsyncSession = Depends(get_db)):
    """Spend one food item from the owner's bag to restore energy."""
    result = await feeding_service.feed_pet(db, token_id, req.food_type, req.wallet_address)
    return Envelope[FeedResultOut](data=FeedResultOut.model_validate(result))
