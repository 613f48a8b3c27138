"""Messaging service - one-to-one and project conversations"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy import String, and_, cast, func
from sqlalchemy.orm import Session, joinedload

from ...constants import MESSAGE_PREVIEW_LENGTH
from ...models import Conversation, Message, Project, User, utc_now
from ...utils.formatting import truncate
from ...utils.sanitization import sanitize_string
from ..notifications import create_notification
from .schemas import ConversationCreate, MessageCreate

logger = logging.getLogger(__name__)


class MessageService:
    """Service layer for conversations and messages"""

    def __init__(self, db: Session):
        self.db = db

    def _user_conversations(self, user_id: str) -> list[Conversation]:
        # participant_ids is a JSON list; the text match narrows rows, membership is exact
        participants_text = cast(Conversation.participant_ids, String)
        candidates = (
            self.db.query(Conversation)
            .filter(participants_text.contains(f'"{user_id}"', autoescape=True))
            .all()
        )
        return [c for c in candidates if user_id in (c.participant_ids or [])]

    def _get_participant_conversation(self, conversation_id: str, user: User) -> Conversation:
        conversation = (
            self.db.query(Conversation).filter(Conversation.id == conversation_id).first()
        )
        if not conversation:
            raise HTTPException(status_code=404, detail="Conversation not found")
        if user.id not in (conversation.participant_ids or []):
            raise HTTPException(status_code=403, detail="Not a participant in this conversation")
        return conversation

    def _last_messages(self, conversation_ids: list[str]) -> dict:
        latest = (
            self.db.query(
                Message.conversation_id, func.max(Message.created_at).label("latest_at")
            )
            .filter(Message.conversation_id.in_(conversation_ids))
            .group_by(Message.conversation_id)
            .subquery()
        )
        rows = (
            self.db.query(Message)
            .join(
                latest,
                and_(
                    Message.conversation_id == latest.c.conversation_id,
                    Message.created_at == latest.c.latest_at,
                ),
            )
            .all()
        )
        last_by_conversation = {}
        for message in rows:
            last_by_conversation.setdefault(message.conversation_id, message)
        return last_by_conversation

    def _unread_counts(self, conversation_ids: list[str], user: User) -> dict:
        rows = (
            self.db.query(Message.conversation_id, func.count(Message.id))
            .filter(
                Message.conversation_id.in_(conversation_ids),
                Message.sender_id != user.id,
                Message.is_read.is_(False),
            )
            .group_by(Message.conversation_id)
            .all()
        )
        return dict(rows)

    def _summarize(self, conversations: list[Conversation], user: User) -> list[dict]:
        if not conversations:
            return []

        ids = [c.id for c in conversations]
        users_by_id = self._users_by_id(conversations)
        last_by_conversation = self._last_messages(ids)
        unread_by_conversation = self._unread_counts(ids, user)

        summaries = []
        for conversation in conversations:
            last = last_by_conversation.get(conversation.id)
            summaries.append(
                {
                    "id": conversation.id,
                    "participant_ids": conversation.participant_ids,
                    "project_id": conversation.project_id,
                    "last_message_at": conversation.last_message_at,
                    "last_message_preview": conversation.last_message_preview,
                    "created_at": conversation.created_at,
                    "participants": [
                        users_by_id[pid]
                        for pid in conversation.participant_ids
                        if pid in users_by_id
                    ],
                    "last_message": (
                        {"content": last.content, "created_at": last.created_at}
                        if last
                        else None
                    ),
                    "unread_count": unread_by_conversation.get(conversation.id, 0),
                }
            )
        return summaries

    def _users_by_id(self, conversations: list[Conversation]) -> dict:
        ids = {pid for c in conversations for pid in (c.participant_ids or [])}
        if not ids:
            return {}
        return {u.id: u for u in self.db.query(User).filter(User.id.in_(ids)).all()}

    def list_conversations(self, user: User) -> list[dict]:
        conversations = self._user_conversations(user.id)
        # Most recent activity first, conversations without messages last
        conversations.sort(
            key=lambda c: (c.last_message_at is not None, c.last_message_at or c.created_at),
            reverse=True,
        )
        return self._summarize(conversations, user)

    def start_conversation(self, data: ConversationCreate, user: User) -> dict:
        participant_ids = list(dict.fromkeys([user.id, *data.participant_ids]))
        if len(participant_ids) < 2:
            raise HTTPException(status_code=400, detail="A conversation needs another participant")

        found = self.db.query(User.id).filter(User.id.in_(participant_ids)).count()
        if found != len(participant_ids):
            raise HTTPException(status_code=404, detail="Participant not found")

        if data.project_id:
            project = self.db.query(Project).filter(Project.id == data.project_id).first()
            if not project:
                raise HTTPException(status_code=404, detail="Project not found")

        wanted = set(participant_ids)
        for conversation in self._user_conversations(user.id):
            if set(conversation.participant_ids) == wanted:
                logger.debug(f"Reusing conversation {conversation.id}")
                return self._summarize([conversation], user)[0]

        conversation = Conversation(participant_ids=participant_ids, project_id=data.project_id)
        self.db.add(conversation)
        self.db.commit()
        self.db.refresh(conversation)
        logger.info(f"💬 Conversation {conversation.id} started by {user.id}")
        return self._summarize([conversation], user)[0]

    def list_messages(self, conversation_id: str, user: User) -> list[Message]:
        """Messages oldest first; opening them marks the others' messages read"""
        conversation = self._get_participant_conversation(conversation_id, user)

        updated = (
            self.db.query(Message)
            .filter(
                Message.conversation_id == conversation.id,
                Message.sender_id != user.id,
                Message.is_read.is_(False),
            )
            .update({Message.is_read: True}, synchronize_session=False)
        )
        if updated:
            self.db.commit()

        return (
            self.db.query(Message)
            .options(joinedload(Message.sender))
            .filter(Message.conversation_id == conversation.id)
            .order_by(Message.created_at.asc())
            .all()
        )

    def send_message(self, conversation_id: str, data: MessageCreate, user: User) -> Message:
        conversation = self._get_participant_conversation(conversation_id, user)

        content = (data.content or "").strip()
        if data.message_type == "text" and not content:
            raise HTTPException(status_code=400, detail="Message content cannot be empty")

        message = Message(
            conversation_id=conversation.id,
            sender_id=user.id,
            content=sanitize_string(content),
            attachment_urls=data.attachment_urls,
            message_type=data.message_type,
            file_url=data.file_url,
            file_name=sanitize_string(data.file_name),
            is_read=False,
        )
        self.db.add(message)
        self.db.flush()

        conversation.last_message_at = message.created_at or utc_now()
        conversation.last_message_preview = self._preview(message.content, message.file_name)

        for participant_id in conversation.participant_ids:
            if participant_id == user.id:
                continue
            create_notification(
                self.db,
                participant_id,
                "message",
                f"{user.name or '사용자'}님의 새 메시지",
                content=conversation.last_message_preview,
                link=f"/messages/{conversation.id}",
                related_id=conversation.id,
                commit=False,
            )

        self.db.commit()
        self.db.refresh(message)
        return message

    @staticmethod
    def _preview(content: str, file_name: Optional[str]) -> str:
        if not content and file_name:
            content = file_name
        return truncate(content, MESSAGE_PREVIEW_LENGTH)
