"""Goal approval workflow endpoints."""

import logging

from ninja import Router

from core.utils.responses import service_response
from features.auth.api import AuthBearer
from features.crud.goals.schemas import (
    GoalIdsSchema,
    GoalListResponse,
    GoalResponse,
    ReviewSchema,
)
from features.crud.goals.service import format_goal
from . import service

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


# --- Owner actions ---


@router.post("/goals/{goal_id}/send-for-approval", response=GoalResponse)
async def send_for_approval(request, goal_id: int):
    """Send a draft, rejected or returned goal to the manager for approval."""
    user = request.user
    return await service_response(
        lambda: format_goal(service.send_for_approval(user, goal_id)),
        "Goal sent for approval",
    )


@router.post("/goals/send-for-approval", response=GoalListResponse)
async def send_goals_for_approval(request, payload: GoalIdsSchema):
    user = request.user
    return await service_response(
        lambda: [format_goal(g) for g in service.send_goals_for_approval(user, payload.goal_ids)],
        "Goals sent for approval",
        with_count=True,
    )


@router.post("/goals/{goal_id}/submit", response=GoalResponse)
async def submit_goal(request, goal_id: int):
    """Submit an approved goal for final review."""
    user = request.user
    return await service_response(
        lambda: format_goal(service.submit_goal(user, goal_id)),
        "Goal submitted for review",
    )


@router.post("/goals/submit", response=GoalListResponse)
async def submit_goals(request, payload: GoalIdsSchema):
    """Submit several approved goals at once (all or nothing)."""
    user = request.user
    return await service_response(
        lambda: [format_goal(g) for g in service.submit_goals(user, payload.goal_ids)],
        "Goals submitted for review",
        with_count=True,
    )


# --- Reviewer actions ---


@router.post("/goals/{goal_id}/approve", response=GoalResponse)
async def approve_goal(request, goal_id: int, payload: ReviewSchema):
    user = request.user
    return await service_response(
        lambda: format_goal(
            service.approve_goal(
                user,
                goal_id,
                payload.feedback,
                rating=payload.rating,
                rating_comment=payload.rating_comment,
            )
        ),
        "Goal approved",
    )


@router.post("/goals/{goal_id}/reject", response=GoalResponse)
async def reject_goal(request, goal_id: int, payload: ReviewSchema):
    user = request.user
    return await service_response(
        lambda: format_goal(service.reject_goal(user, goal_id, payload.feedback)),
        "Goal rejected",
    )


@router.post("/goals/{goal_id}/return", response=GoalResponse)
async def return_goal_for_revision(request, goal_id: int, payload: ReviewSchema):
    user = request.user
    return await service_response(
        lambda: format_goal(
            service.return_goal_for_revision(user, goal_id, payload.feedback)
        ),
        "Goal returned for revision",
    )
