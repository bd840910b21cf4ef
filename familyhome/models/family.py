"""Family, house and virtual pet models."""

import secrets
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from familyhome.models.user import Activity, User


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoomType(str, Enum):
    LIVING_ROOM = "Living Room"
    KITCHEN = "Kitchen"
    BEDROOM = "Bedroom"
    BATHROOM = "Bathroom"
    DINING_ROOM = "Dining Room"
    OFFICE = "Office"
    PLAYROOM = "Playroom"


class FurnitureType(str, Enum):
    COUCH = "Couch"
    TV = "TV"
    DINING_TABLE = "Dining Table"
    BED = "Bed"
    DESK = "Desk"
    CHAIR = "Chair"
    BOOKSHELF = "Bookshelf"
    KITCHEN_COUNTER = "Kitchen Counter"


class HouseTheme(str, Enum):
    MODERN = "Modern"
    COZY = "Cozy"
    MINIMALIST = "Minimalist"
    RUSTIC = "Rustic"
    COLORFUL = "Colorful"


class PetType(str, Enum):
    DOG = "Dog"
    CAT = "Cat"
    BIRD = "Bird"
    FISH = "Fish"
    RABBIT = "Rabbit"
    HAMSTER = "Hamster"
    TURTLE = "Turtle"


class PetPersonality(str, Enum):
    FRIENDLY = "Friendly"
    SHY = "Shy"
    ENERGETIC = "Energetic"
    LAZY = "Lazy"
    CURIOUS = "Curious"
    PROTECTIVE = "Protective"


class FamilyActivityType(str, Enum):
    DINNER = "Dinner Together"
    PUZZLE = "Puzzle"
    MOVIE = "Movie Night"
    GAME = "Game Night"
    PET_CARE = "Pet Care"
    OTHER = "Other"


class Point(BaseModel):
    x: float = 0.0
    y: float = 0.0


class Size(BaseModel):
    width: float = 0.0
    height: float = 0.0


class Furniture(BaseModel):
    id: str = Field(default_factory=lambda: f"fur_{secrets.token_hex(4)}")
    name: str
    type: FurnitureType
    position: Point = Field(default_factory=Point)
    is_occupied: bool = False
    occupied_by: Optional[User] = None
    activity: Optional[Activity] = None


class Room(BaseModel):
    id: str = Field(default_factory=lambda: f"room_{secrets.token_hex(4)}")
    name: str
    type: RoomType
    position: Point = Field(default_factory=Point)
    size: Size = Field(default_factory=Size)
    furniture: list[Furniture] = Field(default_factory=list)


class House(BaseModel):
    rooms: list[Room] = Field(default_factory=list)
    furniture: list[Furniture] = Field(default_factory=list)
    theme: HouseTheme = HouseTheme.MODERN
    name: str = "Family Home"


class VirtualPet(BaseModel):
    id: str = Field(default_factory=lambda: f"pet_{secrets.token_hex(4)}")
    name: str
    type: PetType

    # Stats, all in [0.0, 1.0]
    happiness: float = 0.5
    hunger: float = 0.5
    energy: float = 1.0
    health: float = 1.0
    training: float = 0.0

    age: int = 0  # days
    personality: PetPersonality = PetPersonality.FRIENDLY
    last_fed: datetime = Field(default_factory=_utcnow)
    last_played: datetime = Field(default_factory=_utcnow)
    last_trained: datetime = Field(default_factory=_utcnow)
    created_at: datetime = Field(default_factory=_utcnow)
    last_decay_at: Optional[datetime] = None
    favorite_toy: str = "Ball"
    favorite_food: str = "Pet Food"


class FamilyActivity(BaseModel):
    id: str = Field(default_factory=lambda: f"act_{secrets.token_hex(4)}")
    type: FamilyActivityType
    title: str
    description: str = ""
    participants: list[User] = Field(default_factory=list)
    start_time: datetime = Field(default_factory=_utcnow)
    end_time: Optional[datetime] = None
    is_completed: bool = False


class Family(BaseModel):
    id: str = Field(default_factory=lambda: f"fam_{secrets.token_hex(4)}")
    name: str
    members: list[User] = Field(default_factory=list)
    house: House = Field(default_factory=House)
    virtual_pet: Optional[VirtualPet] = None
    activities: list[FamilyActivity] = Field(default_factory=list)
    invite_code: str = ""
    created_by: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)
