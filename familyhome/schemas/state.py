"""Session state and shared response schemas."""

from typing import Optional

from pydantic import BaseModel

from familyhome.models.family import Family
from familyhome.models.user import User


class SessionStateResponse(BaseModel):
    phase: str
    is_authenticated: bool
    is_onboarding: bool
    is_loading: bool
    error_message: Optional[str]
    user: Optional[User]
    family: Optional[Family]
    message_count: int
    unread_notifications: int
