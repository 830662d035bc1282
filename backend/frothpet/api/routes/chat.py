"""Chat endpoints - global chat for FROTH holders."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.config import settings
from frothpet.db.database import get_db
from frothpet.schemas.chat import ChatMessageIn, ChatMessageOut
from frothpet.schemas.common import Envelope
from frothpet.services.chain_service import ChainReader, get_chain_reader
from frothpet.services.chat_service import chat_service

router = APIRouter()


@router.get("/messages", response_model=Envelope[list[ChatMessageOut]])
async def get_messages(
    limit: int = Query(default=settings.CHAT_HISTORY_LIMIT, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    """Recent chat messages in chronological order."""
    messages = await chat_service.list_messages(db, limit)
    return Envelope[list[ChatMessageOut]](data=[ChatMessageOut.model_validate(m) for m in messages])


@router.post("/message", response_model=Envelope[ChatMessageOut])
async def post_message(
    req: ChatMessageIn,
    db: AsyncSession = Depends(get_db),
    chain: ChainReader | None = Depends(get_chain_reader),
):
    chat = await chat_service.post_message(db, req.sender, req.message, req.wallet_address, chain)
    return Envelope[ChatMessageOut](data=ChatMessageOut.model_validate(chat))
