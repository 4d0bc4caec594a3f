from typing import List, Optional
from ninja import Schema
from pydantic import model_validator


class MilestoneTemplateSchema(Schema):
    title: str
    description: Optional[str] = None


class GoalTemplateCreateSchema(Schema):
    title: str
    description: str = ""
    category: str = ""
    target_audience: str = "all"
    is_active: bool = True
    milestones: List[MilestoneTemplateSchema] = []


class GoalTemplateUpdateSchema(Schema):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    target_audience: Optional[str] = None
    is_active: Optional[bool] = None
    milestones: Optional[List[MilestoneTemplateSchema]] = None

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values


class GoalTemplateOutSchema(Schema):
    id: int
    title: str
    description: str
    category: str
    target_audience: str
    created_by: Optional[int] = None
    is_active: bool
    milestones: List[MilestoneTemplateSchema] = []


class GoalTemplateResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[GoalTemplateOutSchema] = None


class GoalTemplateListResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[List[GoalTemplateOutSchema]] = None
    count: Optional[int] = None
