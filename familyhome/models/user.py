"""User, avatar and location models."""

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocationType(str, Enum):
    HOME = "Home"
    WORK = "Work"
    GYM = "Gym"
    STORE = "Store"
    RESTAURANT = "Restaurant"
    OTHER = "Other"


class ActivityType(str, Enum):
    WATCHING = "Watching"
    SHOPPING = "Shopping"
    WORKING = "Working"
    EXERCISING = "Exercising"
    EATING = "Eating"
    RELAXING = "Relaxing"
    OTHER = "Other"


class Location(BaseModel):
    latitude: float
    longitude: float
    name: str
    timestamp: datetime = Field(default_factory=_utcnow)


class KeyLocation(BaseModel):
    id: str = Field(default_factory=lambda: f"loc_{secrets.token_hex(4)}")
    name: str
    type: LocationType
    latitude: float
    longitude: float
    radius: float = 100.0  # meters


class Activity(BaseModel):
    type: ActivityType
    title: str
    details: Optional[str] = None
    timestamp: datetime = Field(default_factory=_utcnow)


class Avatar(BaseModel):
    name: str = ""
    skin_tone: str = "light"
    hair_style: str = "short"
    hair_color: str = "brown"
    eye_color: str = "brown"
    clothing: str = "casual"
    accessories: list[str] = Field(default_factory=list)

    # Third-party avatar linkage
    use_bitmoji: bool = False
    bitmoji_avatar_id: Optional[str] = None
    bitmoji_avatar_url: Optional[str] = None
    photo_url: Optional[str] = None  # uploaded image

    # Full body
    body_type: str = "average"
    height: str = "average"
    pose: str = "standing"
    expression: str = "happy"
    outfit: str = "casual"
    shoes: str = "sneakers"

    # Transient animation flags
    is_walking: bool = False
    is_sitting: bool = False
    is_waving: bool = False
    is_pointing: bool = False


class User(BaseModel):
    id: str = Field(default_factory=lambda: f"usr_{secrets.token_hex(4)}")
    name: str
    email: str
    avatar: Avatar = Field(default_factory=Avatar)
    current_location: Optional[Location] = None
    key_locations: list[KeyLocation] = Field(default_factory=list)
    current_activity: Optional[Activity] = None
    family_id: Optional[str] = None
    is_online: bool = False
    last_seen: datetime = Field(default_factory=_utcnow)

    # Privacy
    share_location: bool = True
    share_browsing: bool = False
    share_activity: bool = True
