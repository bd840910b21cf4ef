"""Auth request/response schemas."""

from typing import Optional

from pydantic import BaseModel

from familyhome.models.user import Avatar, User


class SignUpRequest(BaseModel):
    name: str
    email: str
    password: str = ""
    avatar: Optional[Avatar] = None


class SignInRequest(BaseModel):
    email: str
    password: str = ""


class AuthResponse(BaseModel):
    user: User
    offline_fallback: bool = False
