"""Family Home domain models."""

from familyhome.models.user import (
    Activity,
    ActivityType,
    Avatar,
    KeyLocation,
    Location,
    LocationType,
    User,
)
from familyhome.models.family import (
    Family,
    FamilyActivity,
    FamilyActivityType,
    Furniture,
    FurnitureType,
    House,
    HouseTheme,
    PetPersonality,
    PetType,
    Point,
    Room,
    RoomType,
    Size,
    VirtualPet,
)
from familyhome.models.message import Message, MessageType, Notification, NotificationType
from familyhome.models.kv import KeyValueEntry

__all__ = [
    "Activity",
    "ActivityType",
    "Avatar",
    "KeyLocation",
    "Location",
    "LocationType",
    "User",
    "Family",
    "FamilyActivity",
    "FamilyActivityType",
    "Furniture",
    "FurnitureType",
    "House",
    "HouseTheme",
    "PetPersonality",
    "PetType",
    "Point",
    "Room",
    "RoomType",
    "Size",
    "VirtualPet",
    "Message",
    "MessageType",
    "Notification",
    "NotificationType",
    "KeyValueEntry",
]
