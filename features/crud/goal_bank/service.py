import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth.models import User
from django.db.models import Q
from django.utils import timezone

from core.exceptions import NotFoundError, ValidationError
from core.models import GoalTemplate
from features.crud.users.service import require_admin

logger = logging.getLogger(__name__)

TEMPLATE_FIELDS = (
    "title",
    "description",
    "category",
    "target_audience",
    "is_active",
    "milestones",
)


def format_template(template: GoalTemplate) -> Dict[str, Any]:
    return {
        "id": template.id,
        "title": template.title,
        "description": template.description,
        "category": template.category,
        "target_audience": template.target_audience,
        "created_by": template.created_by_id,
        "is_active": template.is_active,
        "milestones": template.milestones or [],
    }


def _clean_milestones(milestones: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Template milestones carry only title and description; ids are assigned on copy."""
    cleaned = []
    for item in milestones or []:
        title = (item.get("title") or "").strip()
        if not title:
            raise ValidationError("Milestone title cannot be empty")
        cleaned.append({"title": title, "description": item.get("description")})
    return cleaned


def get_template(template_id: int) -> GoalTemplate:
    template = GoalTemplate.objects.filter(id=template_id).first()
    if template is None:
        raise NotFoundError("Goal template not found")
    return template


def get_goal_templates(
    audience: Optional[str] = None, include_inactive: bool = False
) -> List[GoalTemplate]:
    queryset = GoalTemplate.objects.all()
    if not include_inactive:
        queryset = queryset.filter(is_active=True)
    if audience:
        queryset = queryset.filter(Q(target_audience=audience) | Q(target_audience="all"))
    return list(queryset.order_by("category", "title"))


def add_goal_template(actor: User, data: Dict[str, Any]) -> GoalTemplate:
    require_admin(actor, "manage the goal bank")
    title = (data.get("title") or "").strip()
    if not title:
        raise ValidationError("Template title cannot be empty")

    template = GoalTemplate.objects.create(
        title=title,
        description=data.get("description") or "",
        category=data.get("category") or "",
        target_audience=data.get("target_audience") or "all",
        is_active=data.get("is_active", True),
        milestones=_clean_milestones(data.get("milestones")),
        created_by=actor,
    )
    logger.info("Goal template %s added by %s", template.id, actor.id)
    return template


def update_goal_template(
    actor: User, template_id: int, changes: Dict[str, Any]
) -> GoalTemplate:
    require_admin(actor, "manage the goal bank")
    template = get_template(template_id)

    unknown = set(changes) - set(TEMPLATE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown template fields: {', '.join(sorted(unknown))}")
    if "title" in changes and not (changes["title"] or "").strip():
        raise ValidationError("Template title cannot be empty")
    if "milestones" in changes:
        changes = {**changes, "milestones": _clean_milestones(changes["milestones"])}

    for field, value in changes.items():
        setattr(template, field, value)
    template.updated_at = timezone.now()
    template.save()
    logger.info("Goal template %s updated by %s", template.id, actor.id)
    return template


def delete_goal_template(actor: User, template_id: int) -> None:
    """Goals created from the template keep their copied content."""
    require_admin(actor, "manage the goal bank")
    template = get_template(template_id)
    template.delete()
    logger.info("Goal template %s deleted by %s", template_id, actor.id)
