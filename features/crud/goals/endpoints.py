"""Goal CRUD endpoints."""

import logging
from typing import Optional

from ninja import Router, Query

from core.utils.responses import service_response
from features.auth.api import AuthBearer
from . import service
from .schemas import (
    GoalCreateSchema,
    GoalFromTemplateSchema,
    GoalUpdateSchema,
    GoalResponse,
    GoalListResponse,
    MilestoneResponse,
    MilestoneUpdateSchema,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


def _format_goals(goals):
    return [service.format_goal(g) for g in goals]


@router.get("/", response=GoalListResponse)
async def get_goals(
    request, status: Optional[str] = Query(None), space_id: Optional[int] = Query(None)
):
    """Retrieve the current user's goals, optionally by status or space."""
    user = request.user

    def _list():
        if status is not None:
            goals = service.get_goals_by_status(user, status)
            if space_id is not None:
                goals = [g for g in goals if g.space_id == space_id]
        elif space_id is not None:
            goals = service.get_goals_by_space(user, space_id)
        else:
            goals = service.get_user_goals(user)
        return _format_goals(goals)

    return await service_response(_list, with_count=True)


@router.get("/team", response=GoalListResponse)
async def get_team_goals(request, space_id: Optional[int] = Query(None)):
    """Goals of the manager's team (all goals for admins)."""
    user = request.user
    return await service_response(
        lambda: _format_goals(service.get_team_goals(user, space_id)), with_count=True
    )


@router.get("/review", response=GoalListResponse)
async def get_goals_for_review(request, space_id: Optional[int] = Query(None)):
    """Team goals waiting for approval or final review."""
    user = request.user
    return await service_response(
        lambda: _format_goals(service.get_goals_for_review(user, space_id)),
        with_count=True,
    )


@router.get("/{goal_id}", response=GoalResponse)
async def get_goal(request, goal_id: int):
    user = request.user
    return await service_response(
        lambda: service.format_goal(service.get_visible_goal(user, goal_id))
    )


@router.post("/", response=GoalResponse)
async def create_goal(request, payload: GoalCreateSchema):
    """Create a new draft goal."""
    user = request.user
    data = payload.dict()
    return await service_response(
        lambda: service.format_goal(service.create_goal(user, **data)),
        "Goal created successfully",
    )


@router.post("/from-template", response=GoalResponse)
async def create_goal_from_template(request, payload: GoalFromTemplateSchema):
    """Create a draft goal from a goal bank template."""
    user = request.user
    data = payload.dict()
    template_id = data.pop("template_id")
    space_id = data.pop("space_id")
    return await service_response(
        lambda: service.format_goal(
            service.create_goal_from_template(user, template_id, space_id, **data)
        ),
        "Goal created from template",
    )


@router.put("/{goal_id}", response=GoalResponse)
async def update_goal(request, goal_id: int, payload: GoalUpdateSchema):
    """Update an existing goal."""
    user = request.user
    updates = payload.dict(exclude_unset=True)
    milestones = updates.pop("milestones", None)
    return await service_response(
        lambda: service.format_goal(
            service.update_goal(user, goal_id, updates, milestones=milestones)
        ),
        "Goal updated successfully",
    )


@router.delete("/{goal_id}", response=GoalResponse)
async def delete_goal(request, goal_id: int):
    """Delete a draft goal."""
    user = request.user
    return await service_response(
        lambda: service.delete_goal(user, goal_id), "Goal deleted successfully"
    )


@router.patch("/{goal_id}/milestones/{milestone_id}", response=MilestoneResponse)
async def update_milestone(
    request, goal_id: int, milestone_id: int, payload: MilestoneUpdateSchema
):
    """Mark a milestone complete (or not) with an optional comment."""
    user = request.user
    data = payload.dict(exclude_unset=True)
    return await service_response(
        lambda: service.format_milestone(
            service.update_milestone(user, goal_id, milestone_id, **data)
        ),
        "Milestone updated",
    )
