"""
Goal approval workflow.

draft -> pending_approval -> approved -> submitted -> final_approved

Reviewers can reject a goal or return it for revision (under_review).
Returned and rejected goals go back through approval.

Every check runs before anything is written, so a blocked call leaves all
goals untouched. Deadline blocks still leave an error notification for the
actor.
"""

import logging
from typing import List, Optional, Sequence

from django.contrib.auth.models import User
from django.db import transaction
from django.db.models import Sum

from core.exceptions import (
    InvalidTransitionError,
    ValidationError,
    WeightageError,
)
from core.models import Goal
from core.utils.config import get_setting
from features.crud.goal_spaces.service import require_edit_window, require_review_window
from features.crud.goals.service import get_goal, get_owned_goal, in_revision_window
from features.crud.users.service import require_reviewer
from .signals import goal_transitioned

logger = logging.getLogger(__name__)

Status = Goal.Status

SENDABLE_STATUSES = (Status.DRAFT, Status.REJECTED, Status.UNDER_REVIEW)
REJECTABLE_STATUSES = (
    Status.DRAFT,
    Status.PENDING_APPROVAL,
    Status.APPROVED,
    Status.UNDER_REVIEW,
    Status.SUBMITTED,
)
RETURNABLE_STATUSES = (Status.PENDING_APPROVAL, Status.APPROVED, Status.SUBMITTED)


def _load_owned_goals(actor: User, goal_ids: Sequence[int]) -> List[Goal]:
    if not goal_ids:
        raise ValidationError("No goals selected")
    return [get_owned_goal(actor, goal_id) for goal_id in dict.fromkeys(goal_ids)]


def _set_status(goals: List[Goal], status: str, **fields) -> None:
    with transaction.atomic():
        for goal in goals:
            goal.status = status
            for field, value in fields.items():
                setattr(goal, field, value)
            goal.save()


def approved_weightage_total(user_id: int, space_id: Optional[int]) -> int:
    total = Goal.objects.filter(
        user_id=user_id, space_id=space_id, status=Status.APPROVED
    ).aggregate(total=Sum("weightage"))["total"]
    return total or 0


# =============================================================================
# Owner transitions
# =============================================================================


def send_goals_for_approval(actor: User, goal_ids: Sequence[int]) -> List[Goal]:
    """Move the actor's draft, rejected or returned goals to pending_approval."""
    goals = _load_owned_goals(actor, goal_ids)
    for space_id in {g.space_id for g in goals if not in_revision_window(g)}:
        require_edit_window(actor, space_id, "Goal Submission Failed", "submit")
    for goal in goals:
        if goal.status not in SENDABLE_STATUSES:
            raise InvalidTransitionError(
                f"Goal '{goal.title}' cannot be sent for approval from status '{goal.status}'"
            )

    _set_status(goals, Status.PENDING_APPROVAL)
    for goal in goals:
        logger.info("Goal %s sent for approval by %s", goal.id, actor.id)
        goal_transitioned.send(
            sender=Goal, goal=goal, actor=actor, transition="sent_for_approval"
        )
    return goals


def send_for_approval(actor: User, goal_id: int) -> Goal:
    return send_goals_for_approval(actor, [goal_id])[0]


def submit_goals(actor: User, goal_ids: Sequence[int]) -> List[Goal]:
    """
    Submit approved goals for final review.

    The weightages of the owner's approved goals in each space must add up
    to the required total (100 by default) or nothing is submitted.
    """
    goals = _load_owned_goals(actor, goal_ids)
    space_ids = {g.space_id for g in goals}
    for space_id in space_ids:
        require_edit_window(actor, space_id, "Goal Submission Failed", "submit")
    for goal in goals:
        if goal.status != Status.APPROVED:
            raise InvalidTransitionError(
                f"Only approved goals can be submitted; '{goal.title}' is '{goal.status}'"
            )

    required = get_setting().EZPMS_REQUIRED_WEIGHTAGE
    for space_id in space_ids:
        total = approved_weightage_total(actor.id, space_id)
        if total != required:
            logger.warning(
                "User %s blocked from submitting in space %s: weightage %s%%",
                actor.id,
                space_id,
                total,
            )
            raise WeightageError(total, required)

    _set_status(goals, Status.SUBMITTED)
    for goal in goals:
        logger.info("Goal %s submitted by %s", goal.id, actor.id)
        goal_transitioned.send(sender=Goal, goal=goal, actor=actor, transition="submitted")
    return goals


def submit_goal(actor: User, goal_id: int) -> Goal:
    return submit_goals(actor, [goal_id])[0]


# =============================================================================
# Reviewer transitions
# =============================================================================


def _load_for_review(actor: User, goal_id: int, action: str) -> Goal:
    require_reviewer(actor, action)
    goal = get_goal(goal_id)
    require_review_window(actor, goal.space_id)
    return goal


def approve_goal(
    actor: User,
    goal_id: int,
    feedback: str = "",
    rating: Optional[int] = None,
    rating_comment: Optional[str] = None,
) -> Goal:
    """
    Approve a goal.

    pending_approval goals become approved. Submitted goals become
    final_approved and may carry a rating.
    """
    goal = _load_for_review(actor, goal_id, "approve goals")
    feedback = feedback or ""

    if goal.status == Status.PENDING_APPROVAL:
        _set_status([goal], Status.APPROVED, feedback=feedback, reviewer=actor)
        transition = "approved"
    elif goal.status == Status.SUBMITTED:
        if rating is not None and not 1 <= rating <= 5:
            raise ValidationError("Rating must be between 1 and 5")
        _set_status(
            [goal],
            Status.FINAL_APPROVED,
            feedback=feedback,
            reviewer=actor,
            rating=rating,
            rating_comment=rating_comment,
        )
        transition = "final_approved"
    else:
        raise InvalidTransitionError(
            f"A goal in status '{goal.status}' cannot be approved"
        )

    logger.info("Goal %s %s by %s", goal.id, transition, actor.id)
    goal_transitioned.send(
        sender=Goal, goal=goal, actor=actor, transition=transition, feedback=feedback
    )
    return goal


def reject_goal(actor: User, goal_id: int, feedback: str) -> Goal:
    goal = _load_for_review(actor, goal_id, "reject goals")
    if goal.status not in REJECTABLE_STATUSES:
        raise InvalidTransitionError(f"A goal in status '{goal.status}' cannot be rejected")

    _set_status([goal], Status.REJECTED, feedback=feedback or "", reviewer=actor)
    logger.info("Goal %s rejected by %s", goal.id, actor.id)
    goal_transitioned.send(
        sender=Goal, goal=goal, actor=actor, transition="rejected", feedback=feedback
    )
    return goal


def return_goal_for_revision(actor: User, goal_id: int, feedback: str) -> Goal:
    goal = _load_for_review(actor, goal_id, "return goals for revision")
    if goal.status not in RETURNABLE_STATUSES:
        raise InvalidTransitionError(
            f"A goal in status '{goal.status}' cannot be returned for revision"
        )

    _set_status([goal], Status.UNDER_REVIEW, feedback=feedback or "", reviewer=actor)
    logger.info("Goal %s returned for revision by %s", goal.id, actor.id)
    goal_transitioned.send(
        sender=Goal, goal=goal, actor=actor, transition="returned", feedback=feedback
    )
    return goal
