"""Goal space endpoints."""

import logging
from typing import Optional

from ninja import Router, Query

from core.utils.responses import error_response, service_response
from features.auth.api import AuthBearer
from features.crud.users.service import is_admin
from . import service
from .schemas import (
    GoalSpaceCreateSchema,
    GoalSpaceUpdateSchema,
    GoalSpaceResponse,
    GoalSpaceListResponse,
    SpaceAccessResponse,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())

SPACE_FILTERS = {
    "all": service.get_all_spaces,
    "available": service.get_available_spaces,
    "review": service.get_spaces_for_review,
}


@router.get("/", response=GoalSpaceListResponse)
async def list_spaces(request, scope: Optional[str] = Query("all")):
    """
    List goal spaces.
    scope: "all" (active first), "available" (open for goal edits)
    or "review" (submission closed, review open).
    """
    fetch = SPACE_FILTERS.get(scope or "all")
    if fetch is None:
        return error_response(f"Unknown scope: {scope}")
    return await service_response(
        lambda: [service.format_space(s) for s in fetch()], with_count=True
    )


@router.get("/active", response=GoalSpaceResponse)
async def get_active_space(request):
    def _active():
        space = service.get_active_space()
        return service.format_space(space) if space else None

    return await service_response(_active)


@router.get("/{space_id}", response=GoalSpaceResponse)
async def get_space(request, space_id: int):
    return await service_response(
        lambda: service.format_space(service.get_space(space_id))
    )


@router.get("/{space_id}/access", response=SpaceAccessResponse)
async def get_space_access(request, space_id: int):
    """What the current user may do in the space today."""
    user = request.user

    def _access():
        return {
            "space_id": space_id,
            "can_create_or_edit_goals": service.can_create_or_edit_goals(space_id),
            "can_review_goals": service.can_review_goals(space_id),
            "is_read_only": service.is_space_read_only(space_id, is_admin=is_admin(user)),
        }

    return await service_response(_access)


@router.post("/", response=GoalSpaceResponse)
async def create_space(request, payload: GoalSpaceCreateSchema):
    user = request.user
    data = payload.dict()
    return await service_response(
        lambda: service.format_space(service.create_goal_space(user, **data)),
        "Goal space created successfully",
    )


@router.put("/{space_id}", response=GoalSpaceResponse)
async def update_space(request, space_id: int, payload: GoalSpaceUpdateSchema):
    user = request.user
    updates = payload.dict(exclude_unset=True)
    return await service_response(
        lambda: service.format_space(service.update_goal_space(user, space_id, updates)),
        "Goal space updated successfully",
    )


@router.delete("/{space_id}", response=GoalSpaceResponse)
async def delete_space(request, space_id: int):
    user = request.user
    return await service_response(
        lambda: service.delete_goal_space(user, space_id),
        "Goal space deleted successfully",
    )
