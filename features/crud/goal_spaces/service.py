"""Goal space operations and the deadline-window predicates."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from django.contrib.auth.models import User
from django.utils import timezone

from core.exceptions import DeadlineError, NotFoundError, ValidationError
from core.models import GoalSpace, Notification
from features.crud.users.service import require_admin
from features.notifications.service import create_notification

logger = logging.getLogger(__name__)

SPACE_FIELDS = ("name", "description", "start_date", "submission_deadline", "review_deadline", "is_active")


def _today(today: Optional[date] = None) -> date:
    return today or timezone.localdate()


def get_space(space_id: int) -> GoalSpace:
    space = GoalSpace.objects.filter(id=space_id).first()
    if space is None:
        raise NotFoundError("Goal space not found")
    return space


def format_space(space: GoalSpace) -> Dict[str, Any]:
    return {
        "id": space.id,
        "name": space.name,
        "description": space.description,
        "start_date": space.start_date,
        "submission_deadline": space.submission_deadline,
        "review_deadline": space.review_deadline,
        "is_active": space.is_active,
        "created_at": space.created_at,
    }


def validate_space_dates(
    start_date: date, submission_deadline: date, review_deadline: date
) -> None:
    if submission_deadline < start_date:
        raise ValidationError("Submission deadline must be after or equal to start date")
    if review_deadline < submission_deadline:
        raise ValidationError(
            "Review deadline must be after or equal to submission deadline"
        )


# =============================================================================
# Window predicates (recomputed from the local date on every call)
# =============================================================================


def _window_open(space: Optional[GoalSpace], last_day: str, today: date) -> bool:
    if space is None:
        return False
    return space.is_active and space.start_date <= today <= getattr(space, last_day)


def can_create_or_edit_goals(space_id: Optional[int], today: Optional[date] = None) -> bool:
    if not space_id:
        return False
    space = GoalSpace.objects.filter(id=space_id).first()
    return _window_open(space, "submission_deadline", _today(today))


def can_review_goals(space_id: Optional[int], today: Optional[date] = None) -> bool:
    if not space_id:
        return False
    space = GoalSpace.objects.filter(id=space_id).first()
    return _window_open(space, "review_deadline", _today(today))


def is_space_read_only(
    space_id: Optional[int], is_admin: bool = False, today: Optional[date] = None
) -> bool:
    """Admins can always edit. Otherwise read-only once inactive or past submission."""
    if is_admin:
        return False
    if not space_id:
        return True
    space = GoalSpace.objects.filter(id=space_id).first()
    if space is None:
        return True
    return not space.is_active or space.submission_deadline < _today(today)


def require_edit_window(actor: User, space_id: Optional[int], title: str, verb: str) -> None:
    """Raise DeadlineError and notify the actor if goals cannot be edited in the space."""
    if can_create_or_edit_goals(space_id):
        return
    create_notification(
        actor.id,
        title,
        f"You cannot {verb} goals in this space right now due to submission deadline.",
        Notification.Type.ERROR,
    )
    logger.warning("User %s blocked from %s in space %s", actor.id, verb, space_id)
    raise DeadlineError("The submission window for this goal space is closed")


def require_review_window(actor: User, space_id: Optional[int]) -> None:
    if can_review_goals(space_id):
        return
    create_notification(
        actor.id,
        "Goal Review Failed",
        "You cannot review goals in this space right now due to review deadline.",
        Notification.Type.ERROR,
    )
    logger.warning("User %s blocked from reviewing in space %s", actor.id, space_id)
    raise DeadlineError("The review window for this goal space is closed")


# =============================================================================
# Queries
# =============================================================================


def get_active_space(today: Optional[date] = None) -> Optional[GoalSpace]:
    today = _today(today)
    return (
        GoalSpace.objects.filter(
            is_active=True, start_date__lte=today, review_deadline__gte=today
        )
        .order_by("start_date", "id")
        .first()
    )


def get_available_spaces(today: Optional[date] = None) -> List[GoalSpace]:
    """Spaces currently open for goal creation and editing."""
    today = _today(today)
    return list(
        GoalSpace.objects.filter(
            is_active=True, start_date__lte=today, submission_deadline__gte=today
        ).order_by("start_date", "id")
    )


def get_spaces_for_review(today: Optional[date] = None) -> List[GoalSpace]:
    """Spaces whose submission period is over but review is still open."""
    today = _today(today)
    return list(
        GoalSpace.objects.filter(
            is_active=True, submission_deadline__lt=today, review_deadline__gte=today
        ).order_by("review_deadline", "id")
    )


def get_all_spaces() -> List[GoalSpace]:
    """Active spaces first, then most recent start date."""
    return list(GoalSpace.objects.order_by("-is_active", "-start_date", "-id"))


# =============================================================================
# Admin mutations
# =============================================================================


def create_goal_space(
    actor: User,
    name: str,
    start_date: date,
    submission_deadline: date,
    review_deadline: date,
    description: Optional[str] = None,
) -> GoalSpace:
    require_admin(actor, "create goal spaces")
    if not name or not name.strip():
        raise ValidationError("Goal space name cannot be empty")
    validate_space_dates(start_date, submission_deadline, review_deadline)

    space = GoalSpace.objects.create(
        name=name.strip(),
        description=description,
        start_date=start_date,
        submission_deadline=submission_deadline,
        review_deadline=review_deadline,
        created_by=actor,
    )
    create_notification(
        actor.id,
        "Goal Space Created",
        f"You created a new goal space: {space.name}",
        Notification.Type.SUCCESS,
        target_type="goal_space",
        target_id=space.id,
    )
    logger.info("Goal space %s created by %s", space.id, actor.id)
    return space


def update_goal_space(actor: User, space_id: int, changes: Dict[str, Any]) -> GoalSpace:
    """Partially update a space. Date ordering is checked against the merged values."""
    require_admin(actor, "update goal spaces")
    space = get_space(space_id)

    unknown = set(changes) - set(SPACE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown goal space fields: {', '.join(sorted(unknown))}")

    for field, value in changes.items():
        setattr(space, field, value)
    if not space.name or not space.name.strip():
        raise ValidationError("Goal space name cannot be empty")
    validate_space_dates(space.start_date, space.submission_deadline, space.review_deadline)

    space.save()
    logger.info("Goal space %s updated by %s: %s", space.id, actor.id, sorted(changes))
    return space


def delete_goal_space(actor: User, space_id: int) -> None:
    """Delete a space. Its goals are kept and detached from it."""
    require_admin(actor, "delete goal spaces")
    space = get_space(space_id)
    space.delete()
    logger.info("Goal space %s deleted by %s", space_id, actor.id)
