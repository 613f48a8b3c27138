"""Messaging router - conversations and messages"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from ...rate_limiter import create_rate_limiter
from .schemas import ConversationCreate, ConversationResponse, MessageCreate, MessageResponse
from .service import MessageService

router = APIRouter(prefix="/conversations", tags=["Messages"])

send_rate_limit = create_rate_limiter(limit=60, window_seconds=60, key_prefix="message_send")


def get_message_service(db: Session = Depends(get_db)) -> MessageService:
    return MessageService(db)


@router.get("", response_model=list[ConversationResponse])
async def list_conversations(
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.list_conversations(current_user)


@router.post("", response_model=ConversationResponse)
async def start_conversation(
    data: ConversationCreate,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    """Start a conversation, or return the existing one with the same participants"""
    return service.start_conversation(data, current_user)


@router.get("/{conversation_id}/messages", response_model=list[MessageResponse])
async def list_messages(
    conversation_id: str,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.list_messages(conversation_id, current_user)


@router.post(
    "/{conversation_id}/messages",
    response_model=MessageResponse,
    status_code=201,
    dependencies=[Depends(send_rate_limit)],
)
async def send_message(
    conversation_id: str,
    data: MessageCreate,
    current_user: User = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
):
    return service.send_message(conversation_id, data, current_user)
