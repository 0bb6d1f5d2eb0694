"""Pydantic schemas used by the chat router."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from finpal.config import settings


class ChatMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=settings.CHAT_MAX_MESSAGE_CHARS)

    @field_validator("message")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v


class ChatMessageResponse(BaseModel):
    response: str
    message_id: int
    intent: str


class ChatHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    role: str
    message: str
    intent: Optional[str] = None
    created_at: datetime


class ChatHistoryResponse(BaseModel):
    messages: List[ChatHistoryItem]


__all__ = [
    "ChatMessageRequest",
    "ChatMessageResponse",
    "ChatHistoryItem",
    "ChatHistoryResponse",
]
