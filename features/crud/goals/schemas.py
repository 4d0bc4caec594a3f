from typing import Any, List, Optional
from datetime import date
from ninja import Schema
from pydantic import Field, model_validator


class MilestoneInSchema(Schema):
    title: str
    description: Optional[str] = None
    completed: bool = False
    target_date: Optional[date] = None
    completion_comment: Optional[str] = None


class MilestoneOutSchema(Schema):
    id: int
    title: str
    description: Optional[str] = None
    completed: bool
    target_date: Optional[date] = None
    completion_comment: Optional[str] = None


class MilestoneUpdateSchema(Schema):
    completed: Optional[bool] = None
    completion_comment: Optional[str] = None


class GoalCreateSchema(Schema):
    space_id: int
    title: str
    description: str = ""
    category: str = ""
    priority: str = "medium"
    weightage: int = Field(default=0, ge=0, le=100)
    target_date: Optional[date] = None
    milestones: List[MilestoneInSchema] = []


class GoalFromTemplateSchema(Schema):
    template_id: int
    space_id: int
    title: Optional[str] = None
    priority: Optional[str] = None
    weightage: Optional[int] = Field(default=None, ge=0, le=100)
    target_date: Optional[date] = None


class GoalUpdateSchema(Schema):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    weightage: Optional[int] = Field(default=None, ge=0, le=100)
    target_date: Optional[date] = None
    milestones: Optional[List[MilestoneInSchema]] = None

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values


class GoalIdsSchema(Schema):
    goal_ids: List[int]


class ReviewSchema(Schema):
    feedback: str = ""
    rating: Optional[int] = None
    rating_comment: Optional[str] = None


class GoalOutSchema(Schema):
    id: int
    user_id: int
    space_id: Optional[int] = None
    title: str
    description: str
    category: str
    priority: str
    weightage: int
    target_date: Optional[date] = None
    status: str
    feedback: str
    reviewer_id: Optional[int] = None
    rating: Optional[int] = None
    rating_comment: Optional[str] = None
    milestones: List[MilestoneOutSchema] = []
    created_at: Any
    updated_at: Any


class GoalResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[GoalOutSchema] = None


class GoalListResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[List[GoalOutSchema]] = None
    count: Optional[int] = None


class MilestoneResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[MilestoneOutSchema] = None
