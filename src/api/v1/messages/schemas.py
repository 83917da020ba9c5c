# EduGroupManager/Backend/src/api/v1/messages/schemas.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.api.v1.users.schemas import UserBriefSchema


class MessageCreateSchema(BaseModel):
    recipient_id: int
    content: str = Field(..., min_length=1)

    class Config:
        json_schema_extra = {
            "example": {"recipient_id": 3, "content": "Когда встречаемся по проекту?"}
        }


class MessageReadSchema(BaseModel):
    id: int
    sender_id: int
    recipient_id: int
    sender: Optional[UserBriefSchema] = None
    recipient: Optional[UserBriefSchema] = None
    content: str
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True


class ConversationSchema(BaseModel):
    """Сводка переписки с одним собеседником."""

    peer_id: int
    name: str
    last_message: str
    timestamp: datetime
    unread_count: int

    class Config:
        from_attributes = True
