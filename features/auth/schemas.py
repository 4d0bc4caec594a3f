from typing import Optional

from ninja import Schema


class LoginSchema(Schema):
    email: str
    password: str


class TokenSchema(Schema):
    access: str
    refresh: str
    user_id: int
    email: str
    name: str
    role: str


class RefreshSchema(Schema):
    refresh: str


class ErrorSchema(Schema):
    status: str
    message: str
    code: Optional[int] = None
