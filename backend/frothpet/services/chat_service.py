"""Chat service - global chat for FROTH token holders."""

import logging
import re

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from frothpet.config import settings
from frothpet.core.exceptions import ForbiddenError, ValidationError
from frothpet.models.chat_history import ChatMessage
from frothpet.services.chain_service import ChainReader

logger = logging.getLogger(__name__)

_ADDRESS = re.compile(r"^0x[0-9a-fA-F]{40}$")


class ChatService:
    @staticmethod
    async def list_messages(db: AsyncSession, limit: int | None = None) -> list[ChatMessage]:
        """Newest ``limit`` messages, oldest first."""
        limit = limit if limit and limit > 0 else settings.CHAT_HISTORY_LIMIT
        result = await db.execute(
            select(ChatMessage)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
        )
        messages = list(result.scalars().all())
        messages.reverse()  # chronological order
        return messages

    @staticmethod
    async def _holds_froth(chain: ChainReader | None, wallet: str) -> bool:
        if chain is None or not chain.has_froth_contract:
            return True
        try:
            return await run_in_threadpool(chain.froth_balance_of, wallet) > 0
        except Exception as e:
            logger.warning("FROTH balance check for %s failed, allowing message: %s", wallet, e)
            return True

    async def post_message(
        self,
        db: AsyncSession,
        sender: str,
        message: str,
        wallet_address: str,
        chain: ChainReader | None = None,
    ) -> ChatMessage:
        if not _ADDRESS.match(wallet_address or ""):
            raise ValidationError("Invalid wallet address format")
        text = (message or "").strip()
        if not text:
            raise ValidationError("message is required")
        wallet = wallet_address.lower()

        if not await self._holds_froth(chain, wallet):
            raise ForbiddenError("You need to hold FROTH tokens to chat")

        chat = ChatMessage(sender=sender.strip(), wallet_address=wallet, message=text)
        db.add(chat)
        await db.flush()
        await db.refresh(chat)
        return chat


chat_service = ChatService()
