from typing import Any, List, Optional
from datetime import date
from ninja import Schema
from pydantic import model_validator


class GoalSpaceCreateSchema(Schema):
    name: str
    description: Optional[str] = None
    start_date: date
    submission_deadline: date
    review_deadline: date


class GoalSpaceUpdateSchema(Schema):
    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    submission_deadline: Optional[date] = None
    review_deadline: Optional[date] = None
    is_active: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values


class GoalSpaceOutSchema(Schema):
    id: int
    name: str
    description: Optional[str] = None
    start_date: date
    submission_deadline: date
    review_deadline: date
    is_active: bool
    created_at: Any


class SpaceAccessSchema(Schema):
    space_id: int
    can_create_or_edit_goals: bool
    can_review_goals: bool
    is_read_only: bool


class GoalSpaceResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[GoalSpaceOutSchema] = None


class GoalSpaceListResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[List[GoalSpaceOutSchema]] = None
    count: Optional[int] = None


class SpaceAccessResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[SpaceAccessSchema] = None
