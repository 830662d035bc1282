"""Chat-related Pydantic schemas."""

from datetime import datetime

from pydantic import Field

from frothpet.schemas.common import CamelModel


class ChatMessageIn(CamelModel):
    """Incoming chat message from a holder."""
    sender: str = Field(min_length=1, max_length=50)
    message: str = Field(min_length=1, max_length=1000)
    wallet_address: str = Field(min_length=1)


class ChatMessageOut(CamelModel):
    id: int
    sender: str
    wallet_address: str
    message: str
    created_at: datetime
