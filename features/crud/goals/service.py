"""Goal CRUD, milestone and query operations."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from django.contrib.auth.models import User
from django.db import transaction

from core.exceptions import (
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from core.models import Goal, GoalTemplate, Milestone, Profile
from features.crud.goal_spaces.service import can_review_goals, require_edit_window
from features.crud.users.service import get_role
from features.workflow.signals import goal_transitioned

logger = logging.getLogger(__name__)

Status = Goal.Status

# Fields the owner may change through update_goal
GOAL_CONTENT_FIELDS = (
    "title",
    "description",
    "category",
    "priority",
    "weightage",
    "target_date",
)

# Statuses in which the owner may edit goal content
EDITABLE_STATUSES = (Status.DRAFT, Status.REJECTED, Status.UNDER_REVIEW)

LOCKED_STATUSES = (Status.PENDING_APPROVAL, Status.SUBMITTED, Status.FINAL_APPROVED)


def get_goal(goal_id: int) -> Goal:
    goal = Goal.objects.filter(id=goal_id).select_related("user", "space").first()
    if goal is None:
        raise NotFoundError("Goal not found")
    return goal


def get_owned_goal(actor: User, goal_id: int) -> Goal:
    goal = get_goal(goal_id)
    if goal.user_id != actor.id:
        raise PermissionDeniedError("Only the goal owner can do this")
    return goal


def in_revision_window(goal: Goal) -> bool:
    """Returned goals stay open to their owner until the review deadline."""
    return goal.status == Status.UNDER_REVIEW and can_review_goals(goal.space_id)


def get_visible_goal(actor: User, goal_id: int) -> Goal:
    """A goal is visible to its owner, the owner's manager and admins."""
    goal = get_goal(goal_id)
    if goal.user_id == actor.id:
        return goal
    role = get_role(actor)
    if role == Profile.Role.ADMIN:
        return goal
    if role == Profile.Role.MANAGER and Profile.objects.filter(
        user_id=goal.user_id, manager=actor
    ).exists():
        return goal
    raise PermissionDeniedError("You cannot view this goal")


def format_milestone(milestone: Milestone) -> Dict[str, Any]:
    return {
        "id": milestone.id,
        "title": milestone.title,
        "description": milestone.description,
        "completed": milestone.completed,
        "target_date": milestone.target_date,
        "completion_comment": milestone.completion_comment,
    }


def format_goal(goal: Goal) -> Dict[str, Any]:
    """Format goal with its milestones for JSON response."""
    return {
        "id": goal.id,
        "user_id": goal.user_id,
        "space_id": goal.space_id,
        "title": goal.title,
        "description": goal.description,
        "category": goal.category,
        "priority": goal.priority,
        "weightage": goal.weightage,
        "target_date": goal.target_date,
        "status": goal.status,
        "feedback": goal.feedback,
        "reviewer_id": goal.reviewer_id,
        "rating": goal.rating,
        "rating_comment": goal.rating_comment,
        "milestones": [format_milestone(m) for m in goal.milestones.all()],
        "created_at": goal.created_at,
        "updated_at": goal.updated_at,
    }


def _validate_content(data: Dict[str, Any]) -> None:
    if "title" in data and not (data["title"] or "").strip():
        raise ValidationError("Goal title cannot be empty")
    if "weightage" in data:
        weightage = data["weightage"]
        if weightage is None or not 0 <= int(weightage) <= 100:
            raise ValidationError("Weightage must be between 0 and 100")
    if "priority" in data and data["priority"] not in Goal.Priority.values:
        raise ValidationError(f"Invalid priority: {data['priority']}")


def _replace_milestones(goal: Goal, milestones: Iterable[Dict[str, Any]]) -> None:
    goal.milestones.all().delete()
    rows = []
    for position, data in enumerate(milestones):
        title = (data.get("title") or "").strip()
        if not title:
            raise ValidationError("Milestone title cannot be empty")
        rows.append(
            Milestone(
                goal=goal,
                title=title,
                description=data.get("description"),
                completed=bool(data.get("completed", False)),
                target_date=data.get("target_date"),
                completion_comment=data.get("completion_comment"),
                position=position,
            )
        )
    Milestone.objects.bulk_create(rows)


# =============================================================================
# Mutations
# =============================================================================


def create_goal(
    actor: User,
    space_id: int,
    title: str,
    description: str = "",
    category: str = "",
    priority: str = Goal.Priority.MEDIUM,
    weightage: int = 0,
    target_date=None,
    milestones: Optional[List[Dict[str, Any]]] = None,
) -> Goal:
    """Create a draft goal owned by ``actor`` in an open goal space."""
    require_edit_window(actor, space_id, "Goal Creation Failed", "create")
    data = {
        "title": title,
        "description": description or "",
        "category": category or "",
        "priority": priority,
        "weightage": weightage,
        "target_date": target_date,
    }
    _validate_content(data)
    data["title"] = title.strip()

    with transaction.atomic():
        goal = Goal.objects.create(
            user=actor, space_id=space_id, status=Status.DRAFT, **data
        )
        _replace_milestones(goal, milestones or [])

    logger.info("Goal %s created by user %s in space %s", goal.id, actor.id, space_id)
    goal_transitioned.send(sender=Goal, goal=goal, actor=actor, transition="created")
    return goal


def create_goal_from_template(
    actor: User, template_id: int, space_id: int, **overrides
) -> Goal:
    """Create a draft goal by copying a goal bank template, milestones included."""
    template = GoalTemplate.objects.filter(id=template_id, is_active=True).first()
    if template is None:
        raise NotFoundError("Goal template not found")

    milestones = overrides.pop("milestones", None)
    if milestones is None:
        milestones = [
            {"title": m.get("title"), "description": m.get("description")}
            for m in template.milestones or []
        ]
    fields = {
        "title": template.title,
        "description": template.description,
        "category": template.category,
    }
    fields.update({k: v for k, v in overrides.items() if v is not None})
    return create_goal(actor, space_id, milestones=milestones, **fields)


def update_goal(
    actor: User,
    goal_id: int,
    changes: Dict[str, Any],
    milestones: Optional[List[Dict[str, Any]]] = None,
) -> Goal:
    """
    Update goal content as its owner.

    Draft, rejected and returned goals are fully editable while the space
    accepts edits. Returned goals also stay editable during the review
    window. Approved goals only accept a new weightage.
    """
    goal = get_owned_goal(actor, goal_id)

    unknown = set(changes) - set(GOAL_CONTENT_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown goal fields: {', '.join(sorted(unknown))}")

    if goal.status in LOCKED_STATUSES:
        raise InvalidTransitionError(f"A goal in status '{goal.status}' cannot be edited")
    if goal.status == Status.APPROVED and (set(changes) - {"weightage"} or milestones is not None):
        raise InvalidTransitionError("Only the weightage of an approved goal can be changed")

    if not in_revision_window(goal):
        require_edit_window(actor, goal.space_id, "Goal Update Failed", "update")

    _validate_content(changes)
    with transaction.atomic():
        for field, value in changes.items():
            setattr(goal, field, value.strip() if field == "title" else value)
        goal.save()
        if milestones is not None:
            _replace_milestones(goal, milestones)

    logger.info("Goal %s updated by user %s: %s", goal.id, actor.id, sorted(changes))
    return goal


def delete_goal(actor: User, goal_id: int) -> None:
    """Hard-delete a goal. Only the owner may delete, and only while it is a draft."""
    goal = get_owned_goal(actor, goal_id)
    if goal.status != Status.DRAFT:
        raise InvalidTransitionError("Only draft goals can be deleted")

    title = goal.title
    goal.delete()
    logger.info("Goal %s deleted by user %s", goal_id, actor.id)
    goal_transitioned.send(
        sender=Goal,
        goal=goal,
        actor=actor,
        transition="deleted",
        title=title,
    )


def update_milestone(
    actor: User,
    goal_id: int,
    milestone_id: int,
    completed: Optional[bool] = None,
    completion_comment: Optional[str] = None,
) -> Milestone:
    """Record progress on a milestone of one of the actor's goals."""
    goal = get_owned_goal(actor, goal_id)
    if goal.status == Status.FINAL_APPROVED:
        raise InvalidTransitionError("Milestones of a final-approved goal are frozen")

    milestone = goal.milestones.filter(id=milestone_id).first()
    if milestone is None:
        raise NotFoundError("Milestone not found")

    if completed is not None:
        milestone.completed = completed
    if completion_comment is not None:
        milestone.completion_comment = completion_comment
    milestone.save()
    goal.save(update_fields=["updated_at"])
    return milestone


# =============================================================================
# Queries
# =============================================================================


def get_user_goals(actor: User) -> List[Goal]:
    return list(Goal.objects.filter(user=actor).prefetch_related("milestones"))


def get_goals_by_status(actor: User, status: str) -> List[Goal]:
    if status not in Status.values:
        raise ValidationError(f"Invalid status: {status}")
    return list(
        Goal.objects.filter(user=actor, status=status).prefetch_related("milestones")
    )


def get_goals_by_space(actor: User, space_id: int) -> List[Goal]:
    return list(
        Goal.objects.filter(user=actor, space_id=space_id).prefetch_related("milestones")
    )


def get_team_goals(actor: User, space_id: Optional[int] = None) -> List[Goal]:
    """Admins see every goal, managers their direct reports' goals, members nothing."""
    role = get_role(actor)
    if role == Profile.Role.ADMIN:
        queryset = Goal.objects.all()
    elif role == Profile.Role.MANAGER:
        queryset = Goal.objects.filter(user__profile__manager=actor)
    else:
        return []
    if space_id is not None:
        queryset = queryset.filter(space_id=space_id)
    return list(queryset.prefetch_related("milestones"))


def get_goals_for_review(actor: User, space_id: Optional[int] = None) -> List[Goal]:
    """Team goals waiting on the reviewer (approval or final review)."""
    return [
        goal
        for goal in get_team_goals(actor, space_id)
        if goal.status in (Status.PENDING_APPROVAL, Status.SUBMITTED)
    ]
