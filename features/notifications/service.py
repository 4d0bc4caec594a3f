"""Notification log operations."""

import logging
from typing import Any, Dict, List, Optional

from core.exceptions import NotFoundError
from core.models import Notification

logger = logging.getLogger(__name__)


def create_notification(
    user_id: int,
    title: str,
    message: str,
    notification_type: str = Notification.Type.INFO,
    target_type: Optional[str] = None,
    target_id: Optional[Any] = None,
) -> Notification:
    """Append a notification for ``user_id``."""
    notification = Notification.objects.create(
        user_id=user_id,
        title=title,
        message=message,
        notification_type=notification_type,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
    )
    logger.info(
        "Created %s notification '%s' for user %s", notification_type, title, user_id
    )
    return notification


def format_notification(notification: Notification) -> Dict[str, Any]:
    return {
        "id": notification.id,
        "user_id": notification.user_id,
        "title": notification.title,
        "message": notification.message,
        "notification_type": notification.notification_type,
        "is_read": notification.is_read,
        "target_type": notification.target_type,
        "target_id": notification.target_id,
        "created_at": notification.created_at,
    }


def get_user_notifications(user_id: int) -> List[Notification]:
    """All notifications for the user, newest first."""
    return list(Notification.objects.filter(user_id=user_id).order_by("-created_at", "-id"))


def get_unread_notifications_count(user_id: int) -> int:
    return Notification.objects.filter(user_id=user_id, is_read=False).count()


def mark_notification_as_read(user_id: int, notification_id: int) -> Notification:
    notification = Notification.objects.filter(id=notification_id, user_id=user_id).first()
    if notification is None:
        raise NotFoundError("Notification not found")
    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return notification


def clear_notifications(user_id: int) -> int:
    """Mark every notification of the user as read. Nothing is deleted."""
    updated = Notification.objects.filter(user_id=user_id, is_read=False).update(
        is_read=True
    )
    logger.info("Cleared %s notifications for user %s", updated, user_id)
    return updated
