"""Messaging schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ..users.schemas import UserSummary


class ConversationCreate(BaseModel):
    participant_ids: list[str] = Field(..., min_length=1, max_length=10)
    project_id: Optional[str] = None


class LastMessage(BaseModel):
    content: str
    created_at: datetime


class ConversationResponse(BaseModel):
    id: str
    participant_ids: list[str]
    project_id: Optional[str] = None
    last_message_at: Optional[datetime] = None
    last_message_preview: Optional[str] = None
    created_at: datetime
    participants: list[UserSummary] = []
    last_message: Optional[LastMessage] = None
    unread_count: int = 0


class MessageCreate(BaseModel):
    content: str = Field("", max_length=5000)
    message_type: Literal["text", "image", "file"] = "text"
    file_url: Optional[str] = Field(None, max_length=500)
    file_name: Optional[str] = Field(None, max_length=255)
    attachment_urls: list[str] = Field(default_factory=list, max_length=10)


class MessageResponse(BaseModel):
    id: str
    conversation_id: str
    sender_id: str
    content: str
    attachment_urls: list[str]
    is_read: bool
    message_type: str
    file_url: Optional[str] = None
    file_name: Optional[str] = None
    created_at: datetime
    sender: Optional[UserSummary] = None

    class Config:
        from_attributes = True
