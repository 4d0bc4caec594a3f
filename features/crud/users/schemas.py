from typing import List, Optional

from ninja import Schema


class UserOutSchema(Schema):
    id: int
    name: str
    email: Optional[str] = None
    role: str
    manager_id: Optional[int] = None
    photo_url: Optional[str] = None
    team_members: List[int] = []


class ManagerUpdateSchema(Schema):
    manager_id: Optional[int] = None


class UserResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[UserOutSchema] = None


class UserListResponse(Schema):
    status: str
    message: str
    code: Optional[int] = None
    data: Optional[List[UserOutSchema]] = None
    count: Optional[int] = None
