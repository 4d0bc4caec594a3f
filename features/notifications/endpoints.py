from ninja import Router

from core.utils.responses import service_response
from features.auth.api import AuthBearer
from . import service
from .schemas import (
    NotificationListResponse,
    NotificationResponse,
    UnreadCountResponse,
)

router = Router(auth=AuthBearer())


@router.get("/", response=NotificationListResponse)
async def list_notifications(request):
    """List all notifications for the user, ordered by newest first."""
    user_id = request.user.id
    return await service_response(
        lambda: [
            service.format_notification(n)
            for n in service.get_user_notifications(user_id)
        ],
        with_count=True,
    )


@router.get("/unread-count", response=UnreadCountResponse)
async def unread_count(request):
    user_id = request.user.id
    return await service_response(
        lambda: {"unread": service.get_unread_notifications_count(user_id)}
    )


@router.put("/{notification_id}/read", response=NotificationResponse)
async def mark_as_read(request, notification_id: int):
    """Mark a notification as read."""
    user_id = request.user.id
    return await service_response(
        lambda: service.format_notification(
            service.mark_notification_as_read(user_id, notification_id)
        ),
        "Marked as read",
    )


@router.put("/read-all", response=UnreadCountResponse)
async def clear_notifications(request):
    """Mark every notification as read. Nothing is deleted."""
    user_id = request.user.id

    def _clear():
        service.clear_notifications(user_id)
        return {"unread": 0}

    return await service_response(_clear, "Notifications cleared")
