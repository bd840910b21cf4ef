"""Message and notification models."""

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from familyhome.models.user import Activity, Location, User


class MessageType(str, Enum):
    TEXT = "Text"
    LOCATION = "Location"
    ACTIVITY = "Activity"
    NOTIFICATION = "Notification"
    ARRIVAL = "Arrival"
    DEPARTURE = "Departure"


class NotificationType(str, Enum):
    LOCATION_UPDATE = "Location Update"
    ACTIVITY_UPDATE = "Activity Update"
    FAMILY_INVITE = "Family Invite"
    PET_CARE = "Pet Care"
    FAMILY_ACTIVITY = "Family Activity"
    ARRIVAL = "Arrival"
    DEPARTURE = "Departure"


class Message(BaseModel):
    id: str = Field(default_factory=lambda: f"msg_{secrets.token_hex(4)}")
    sender: User
    content: str
    type: MessageType = MessageType.TEXT
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_read: bool = False
    location: Optional[Location] = None
    activity: Optional[Activity] = None


class Notification(BaseModel):
    id: str = Field(default_factory=lambda: f"ntf_{secrets.token_hex(4)}")
    title: str
    body: str
    type: NotificationType
    sender: User
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    is_read: bool = False
    action_required: bool = False
