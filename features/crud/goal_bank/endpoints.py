"""Goal bank (template library) endpoints."""

import logging
from typing import Optional

from ninja import Router, Query

from core.utils.responses import service_response
from features.auth.api import AuthBearer
from . import service
from .schemas import (
    GoalTemplateCreateSchema,
    GoalTemplateUpdateSchema,
    GoalTemplateResponse,
    GoalTemplateListResponse,
)

logger = logging.getLogger(__name__)
router = Router(auth=AuthBearer())


@router.get("/", response=GoalTemplateListResponse)
async def list_templates(
    request,
    audience: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
):
    """Active templates, optionally narrowed to a target audience."""
    return await service_response(
        lambda: [
            service.format_template(t)
            for t in service.get_goal_templates(audience, include_inactive)
        ],
        with_count=True,
    )


@router.get("/{template_id}", response=GoalTemplateResponse)
async def get_template(request, template_id: int):
    return await service_response(
        lambda: service.format_template(service.get_template(template_id))
    )


@router.post("/", response=GoalTemplateResponse)
async def add_template(request, payload: GoalTemplateCreateSchema):
    user = request.user
    data = payload.dict()
    return await service_response(
        lambda: service.format_template(service.add_goal_template(user, data)),
        "Goal template added",
    )


@router.put("/{template_id}", response=GoalTemplateResponse)
async def update_template(request, template_id: int, payload: GoalTemplateUpdateSchema):
    user = request.user
    updates = payload.dict(exclude_unset=True)
    return await service_response(
        lambda: service.format_template(
            service.update_goal_template(user, template_id, updates)
        ),
        "Goal template updated",
    )


@router.delete("/{template_id}", response=GoalTemplateResponse)
async def delete_template(request, template_id: int):
    user = request.user
    return await service_response(
        lambda: service.delete_goal_template(user, template_id),
        "Goal template deleted",
    )
