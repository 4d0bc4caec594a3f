"""
JSON snapshot of the goal data.

A snapshot is one JSON object keyed by section:

    ezpms_user            roster (name, email, role, managerId)
    ezpms_goal_spaces     goal spaces
    ezpms_goal_bank       goal templates
    ezpms_goals           goals with their milestones
    ezpms_notifications   notifications

Records use camelCase keys. Ids are opaque strings and are remapped to
fresh database ids on import. A malformed or missing section falls back to
the seed data for that section. A record with invalid values is skipped
with a warning.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from django.contrib.auth.models import User
from django.db import transaction
from django.utils.dateparse import parse_date, parse_datetime

from core.exceptions import ValidationError
from core.models import Goal, GoalSpace, GoalTemplate, Milestone, Notification, Profile
from features.crud.goal_spaces.service import validate_space_dates
from . import seed

logger = logging.getLogger(__name__)

USERS_KEY = "ezpms_user"
SPACES_KEY = "ezpms_goal_spaces"
GOAL_BANK_KEY = "ezpms_goal_bank"
GOALS_KEY = "ezpms_goals"
NOTIFICATIONS_KEY = "ezpms_notifications"

SECTIONS = (USERS_KEY, SPACES_KEY, GOAL_BANK_KEY, GOALS_KEY, NOTIFICATIONS_KEY)


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


def _str_id(value) -> Optional[str]:
    return str(value) if value is not None else None


# =============================================================================
# Export
# =============================================================================


def export_user(user: User) -> Dict[str, Any]:
    profile = getattr(user, "profile", None)
    return {
        "id": str(user.id),
        "name": user.get_full_name() or user.username,
        "email": user.email,
        "role": profile.role if profile else Profile.Role.MEMBER,
        "managerId": _str_id(profile.manager_id) if profile else None,
        "photoUrl": profile.photo_url if profile else None,
    }


def export_space(space: GoalSpace) -> Dict[str, Any]:
    return {
        "id": str(space.id),
        "name": space.name,
        "description": space.description,
        "startDate": _iso(space.start_date),
        "submissionDeadline": _iso(space.submission_deadline),
        "reviewDeadline": _iso(space.review_deadline),
        "isActive": space.is_active,
        "createdAt": _iso(space.created_at),
    }


def export_template(template: GoalTemplate) -> Dict[str, Any]:
    return {
        "id": str(template.id),
        "title": template.title,
        "description": template.description,
        "category": template.category,
        "targetAudience": template.target_audience,
        "createdBy": _str_id(template.created_by_id),
        "isActive": template.is_active,
        "milestones": template.milestones or [],
    }


def export_goal(goal: Goal) -> Dict[str, Any]:
    return {
        "id": str(goal.id),
        "userId": str(goal.user_id),
        "title": goal.title,
        "description": goal.description,
        "category": goal.category,
        "priority": goal.priority,
        "weightage": goal.weightage,
        "targetDate": _iso(goal.target_date),
        "status": goal.status,
        "feedback": goal.feedback,
        "reviewerId": _str_id(goal.reviewer_id),
        "spaceId": _str_id(goal.space_id),
        "rating": goal.rating,
        "ratingComment": goal.rating_comment,
        "createdAt": _iso(goal.created_at),
        "updatedAt": _iso(goal.updated_at),
        "milestones": [
            {
                "id": str(m.id),
                "title": m.title,
                "description": m.description,
                "completed": m.completed,
                "targetDate": _iso(m.target_date),
                "completionComment": m.completion_comment,
            }
            for m in goal.milestones.all()
        ],
    }


def export_notification(notification: Notification) -> Dict[str, Any]:
    return {
        "id": str(notification.id),
        "userId": str(notification.user_id),
        "title": notification.title,
        "message": notification.message,
        "type": notification.notification_type,
        "timestamp": _iso(notification.created_at),
        "isRead": notification.is_read,
        "targetType": notification.target_type,
        "targetId": notification.target_id,
    }


def build_snapshot() -> Dict[str, List[Dict[str, Any]]]:
    users = User.objects.select_related("profile").order_by("id")
    return {
        USERS_KEY: [export_user(u) for u in users],
        SPACES_KEY: [export_space(s) for s in GoalSpace.objects.order_by("id")],
        GOAL_BANK_KEY: [export_template(t) for t in GoalTemplate.objects.order_by("id")],
        GOALS_KEY: [
            export_goal(g)
            for g in Goal.objects.order_by("id").prefetch_related("milestones")
        ],
        NOTIFICATIONS_KEY: [
            export_notification(n) for n in Notification.objects.order_by("id")
        ],
    }


def export_snapshot(path: Path) -> Dict[str, int]:
    snapshot = build_snapshot()
    path = Path(path)
    path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
    counts = {key: len(records) for key, records in snapshot.items()}
    logger.info("Exported snapshot to %s: %s", path, counts)
    return counts


# =============================================================================
# Import
# =============================================================================


def _section(data: Dict[str, Any], key: str) -> Optional[List[Dict[str, Any]]]:
    """Return a section's records, or None when it is missing or malformed."""
    records = data.get(key)
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        logger.warning("Snapshot section '%s' is missing or malformed, using seed data", key)
        return None
    return records


def _restore(model, pk: int, **fields) -> None:
    """Write back timestamps that auto_now fields overwrote on create."""
    fields = {k: v for k, v in fields.items() if v is not None}
    if fields:
        model.objects.filter(pk=pk).update(**fields)


def _import_users(records: Optional[List[Dict[str, Any]]]) -> Dict[str, User]:
    if records is None:
        return seed.seed_users()

    users: Dict[str, User] = {}
    for record in records:
        email = (record.get("email") or "").strip()
        if not email:
            logger.warning("Skipping snapshot user without email: %s", record.get("id"))
            continue
        role = record.get("role")
        if role not in Profile.Role.values:
            role = Profile.Role.MEMBER
        users[str(record.get("id"))] = seed.upsert_user(
            email, record.get("name") or email, role
        )

    # Second pass once every user exists
    for record in records:
        user = users.get(str(record.get("id")))
        if user is None:
            continue
        profile = user.profile
        profile.manager = users.get(_str_id(record.get("managerId")))
        profile.photo_url = record.get("photoUrl")
        profile.save()
    return users


def _weightage(value) -> int:
    weightage = int(value or 0)
    if not 0 <= weightage <= 100:
        raise ValueError(f"weightage {weightage} is outside 0-100")
    return weightage


def _rating(value) -> Optional[int]:
    if value is None:
        return None
    rating = int(value)
    if not 1 <= rating <= 5:
        raise ValueError(f"rating {rating} is outside 1-5")
    return rating


def _import_spaces(records, admin: Optional[User]) -> Dict[str, GoalSpace]:
    if records is None:
        space = seed.seed_goal_space(admin)
        return {str(space.id): space}

    spaces: Dict[str, GoalSpace] = {}
    for record in records:
        try:
            start = parse_date(record.get("startDate") or "")
            submission = parse_date(record.get("submissionDeadline") or "")
            review = parse_date(record.get("reviewDeadline") or "")
            if not (start and submission and review):
                raise ValueError("missing dates")
            validate_space_dates(start, submission, review)
            created_at = parse_datetime(record.get("createdAt") or "")
        except (ValueError, TypeError, ValidationError) as exc:
            logger.warning("Skipping goal space %s: %s", record.get("id"), exc)
            continue

        space = GoalSpace.objects.create(
            name=record.get("name") or "Goal Space",
            description=record.get("description"),
            start_date=start,
            submission_deadline=submission,
            review_deadline=review,
            is_active=bool(record.get("isActive", True)),
            created_by=admin,
        )
        _restore(GoalSpace, space.id, created_at=created_at)
        spaces[str(record.get("id"))] = space
    return spaces


def _import_templates(records, users: Dict[str, User], admin: Optional[User]) -> int:
    if records is None:
        return len(seed.seed_goal_templates(admin))

    for record in records:
        GoalTemplate.objects.create(
            title=record.get("title") or "Untitled",
            description=record.get("description") or "",
            category=record.get("category") or "",
            target_audience=record.get("targetAudience") or "all",
            created_by=users.get(_str_id(record.get("createdBy"))) or admin,
            is_active=bool(record.get("isActive", True)),
            milestones=[
                {"title": m.get("title"), "description": m.get("description")}
                for m in record.get("milestones") or []
                if isinstance(m, dict) and m.get("title")
            ],
        )
    return len(records)


def _parse_milestones(record) -> List[Dict[str, Any]]:
    return [
        {
            "title": m.get("title") or "Untitled",
            "description": m.get("description"),
            "completed": bool(m.get("completed", False)),
            "target_date": parse_date(m.get("targetDate") or ""),
            "completion_comment": m.get("completionComment"),
            "position": position,
        }
        for position, m in enumerate(record.get("milestones") or [])
        if isinstance(m, dict)
    ]


def _import_goals(records, users, spaces) -> Dict[str, Goal]:
    goals: Dict[str, Goal] = {}
    for record in records or []:
        owner = users.get(_str_id(record.get("userId")))
        if owner is None:
            logger.warning("Skipping goal %s with unknown owner", record.get("id"))
            continue
        try:
            weightage = _weightage(record.get("weightage"))
            rating = _rating(record.get("rating"))
            target_date = parse_date(record.get("targetDate") or "")
            milestones = _parse_milestones(record)
            created_at = parse_datetime(record.get("createdAt") or "")
            updated_at = parse_datetime(record.get("updatedAt") or "")
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping goal %s: %s", record.get("id"), exc)
            continue

        status = record.get("status")
        priority = record.get("priority")
        goal = Goal.objects.create(
            user=owner,
            space=spaces.get(_str_id(record.get("spaceId"))),
            title=record.get("title") or "Untitled",
            description=record.get("description") or "",
            category=record.get("category") or "",
            priority=priority if priority in Goal.Priority.values else Goal.Priority.MEDIUM,
            weightage=weightage,
            target_date=target_date,
            status=status if status in Goal.Status.values else Goal.Status.DRAFT,
            feedback=record.get("feedback") or "",
            reviewer=users.get(_str_id(record.get("reviewerId"))),
            rating=rating,
            rating_comment=record.get("ratingComment"),
        )
        Milestone.objects.bulk_create(Milestone(goal=goal, **m) for m in milestones)
        _restore(Goal, goal.id, created_at=created_at, updated_at=updated_at)
        goals[str(record.get("id"))] = goal
    return goals


def _import_notifications(records, users, goals) -> int:
    count = 0
    for record in records or []:
        recipient = users.get(_str_id(record.get("userId")))
        if recipient is None:
            continue
        target_type = record.get("targetType")
        target_id = _str_id(record.get("targetId"))
        if target_type == "goal" and target_id in goals:
            target_id = str(goals[target_id].id)
        notification_type = record.get("type")
        if notification_type not in Notification.Type.values:
            notification_type = Notification.Type.INFO
        notification = Notification.objects.create(
            user=recipient,
            title=record.get("title") or "",
            message=record.get("message") or "",
            notification_type=notification_type,
            is_read=bool(record.get("isRead", False)),
            target_type=target_type,
            target_id=target_id,
        )
        try:
            created_at = parse_datetime(record.get("timestamp") or "")
        except (ValueError, TypeError):
            logger.warning("Bad timestamp on notification %s, keeping import time", record.get("id"))
            created_at = None
        _restore(Notification, notification.id, created_at=created_at)
        count += 1
    return count


def import_snapshot_data(data: Any) -> Dict[str, int]:
    """
    Replace goal data with the snapshot contents.

    Users are matched by email and updated in place. Spaces, templates,
    goals and notifications are replaced.
    """
    if not isinstance(data, dict):
        logger.warning("Snapshot is not a JSON object, loading seed data")
        data = {}

    with transaction.atomic():
        Notification.objects.all().delete()
        Goal.objects.all().delete()
        GoalTemplate.objects.all().delete()
        GoalSpace.objects.all().delete()

        users = _import_users(_section(data, USERS_KEY))
        admin = next(
            (u for u in users.values() if u.profile.role == Profile.Role.ADMIN), None
        )
        spaces = _import_spaces(_section(data, SPACES_KEY), admin)
        templates = _import_templates(_section(data, GOAL_BANK_KEY), users, admin)
        goals = _import_goals(_section(data, GOALS_KEY), users, spaces)
        notifications = _import_notifications(
            _section(data, NOTIFICATIONS_KEY), users, goals
        )

    counts = {
        USERS_KEY: len(users),
        SPACES_KEY: len(spaces),
        GOAL_BANK_KEY: templates,
        GOALS_KEY: len(goals),
        NOTIFICATIONS_KEY: notifications,
    }
    logger.info("Imported snapshot: %s", counts)
    return counts


def import_snapshot(path: Path) -> Dict[str, int]:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Snapshot %s not found, loading seed data", path)
        data = {}
    except json.JSONDecodeError as exc:
        logger.warning("Failed to parse snapshot %s: %s", path, exc)
        data = {}
    return import_snapshot_data(data)
