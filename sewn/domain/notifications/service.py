"""Notification service - in-app notifications for marketplace events"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...constants import NOTIFICATION_LIST_LIMIT, NOTIFICATION_TYPES
from ...models import Notification, User

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    user_id: str,
    type: str,
    title: str,
    content: Optional[str] = None,
    link: Optional[str] = None,
    related_id: Optional[str] = None,
    commit: bool = True,
) -> Notification:
    """
    Add an unread notification for a user.

    With commit=False the row is only added to the session so it lands in the
    caller's transaction.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        content=content,
        link=link,
        related_id=related_id,
        is_read=False,
    )
    db.add(notification)
    if commit:
        db.commit()
        db.refresh(notification)
    logger.debug(f"🔔 Notification '{type}' queued for user {user_id}")
    return notification


class NotificationService:
    """Service layer for reading and managing a user's notifications"""

    def __init__(self, db: Session):
        self.db = db

    def list_notifications(self, user: User) -> dict:
        notifications = (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id)
            .order_by(Notification.created_at.desc())
            .limit(NOTIFICATION_LIST_LIMIT)
            .all()
        )
        unread_count = (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id, Notification.is_read.is_(False))
            .count()
        )
        return {"notifications": notifications, "unreadCount": unread_count}

    def _get_owned(self, notification_id: str, user: User) -> Notification:
        notification = (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user.id)
            .first()
        )
        if not notification:
            raise HTTPException(status_code=404, detail="Notification not found")
        return notification

    def mark_as_read(self, notification_id: str, user: User) -> Notification:
        notification = self._get_owned(notification_id, user)
        notification.is_read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user: User) -> int:
        updated = (
            self.db.query(Notification)
            .filter(Notification.user_id == user.id, Notification.is_read.is_(False))
            .update({Notification.is_read: True}, synchronize_session=False)
        )
        self.db.commit()
        logger.info(f"📭 Marked {updated} notifications read for user {user.id}")
        return updated

    def delete_notification(self, notification_id: str, user: User) -> None:
        notification = self._get_owned(notification_id, user)
        self.db.delete(notification)
        self.db.commit()
