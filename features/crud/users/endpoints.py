"""User roster endpoints."""

import logging

from ninja import Router

from core.utils.responses import service_response
from features.auth.api import AuthBearer
from . import service
from .schemas import ManagerUpdateSchema, UserResponse, UserListResponse

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


@router.get("/me", response=UserResponse)
async def get_current_user(request):
    """Get the logged-in user with role and team."""
    user = request.user
    return await service_response(lambda: service.format_user(user))


@router.get("/", response=UserListResponse)
async def list_users(request):
    """The full roster with reporting lines."""
    return await service_response(service.get_all_users, with_count=True)


@router.put("/{user_id}/manager", response=UserResponse)
async def update_user_manager(request, user_id: int, payload: ManagerUpdateSchema):
    """Move a user under another manager (admin only)."""
    user = request.user
    return await service_response(
        lambda: service.format_user(
            service.update_user_manager(user, user_id, payload.manager_id)
        ),
        "Manager updated successfully",
    )
