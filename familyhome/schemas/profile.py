"""Profile, avatar and messaging request schemas."""

from typing import Optional

from pydantic import BaseModel

from familyhome.models.message import MessageType, NotificationType
from familyhome.services.app_state import AvatarAnimation


class AvatarStyleRequest(BaseModel):
    pose: Optional[str] = None
    expression: Optional[str] = None
    outfit: Optional[str] = None


class AnimationRequest(BaseModel):
    animation: AvatarAnimation


class AvatarUploadResponse(BaseModel):
    url: str


class MessageSendRequest(BaseModel):
    content: str
    type: MessageType = MessageType.TEXT


class NotificationCreateRequest(BaseModel):
    title: str
    body: str
    type: NotificationType
    action_required: bool = False
