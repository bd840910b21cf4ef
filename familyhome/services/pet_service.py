"""Virtual pet care and decay rules.

All functions are pure: they take a pet and return an updated copy.
Every stat is clamped to [0.0, 1.0] after each change.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from familyhome.models.family import PetPersonality, PetType, VirtualPet

STAT_MIN = 0.0
STAT_MAX = 1.0

# Decay thresholds (seconds since last care action)
HUNGER_DECAY_AFTER = 3600
HAPPINESS_DECAY_AFTER = 7200
HUNGER_DECAY = 0.05
HAPPINESS_DECAY = 0.03
ENERGY_DECAY = 0.02
HEALTH_DECAY = 0.01
LOW_STAT_THRESHOLD = 0.3

# Fraction of the decay interval a tick may arrive early and still count,
# so a scheduler waking slightly early does not skip every other tick.
DECAY_SLACK = 0.05


class PetAction(str, Enum):
    FEED = "feed"
    PLAY = "play"
    TRAIN = "train"
    REST = "rest"


# action -> (stat deltas, timestamp field touched)
CARE_EFFECTS: dict[PetAction, tuple[dict[str, float], Optional[str]]] = {
    PetAction.FEED: ({"hunger": 0.3, "happiness": 0.1, "health": 0.05}, "last_fed"),
    PetAction.PLAY: ({"happiness": 0.2, "energy": -0.1}, "last_played"),
    PetAction.TRAIN: ({"training": 0.1, "happiness": 0.15, "energy": -0.15}, "last_trained"),
    PetAction.REST: ({"energy": 0.4, "health": 0.1}, None),
}

CARE_NOTIFICATIONS: dict[PetAction, tuple[str, str]] = {
    PetAction.FEED: ("Pet Fed!", "{name} is feeling better now!"),
    PetAction.PLAY: ("Play Time!", "{name} had a great time playing!"),
    PetAction.TRAIN: ("Training Progress!", "{name} learned something new!"),
    PetAction.REST: ("Pet Rested!", "{name} is feeling refreshed!"),
}

FAVORITE_FOODS: dict[PetType, str] = {
    PetType.DOG: "Dog Treats",
    PetType.CAT: "Cat Food",
    PetType.BIRD: "Seeds",
    PetType.FISH: "Fish Flakes",
    PetType.RABBIT: "Carrots",
    PetType.HAMSTER: "Hamster Pellets",
    PetType.TURTLE: "Turtle Food",
}

FAVORITE_TOYS: dict[PetType, str] = {
    PetType.DOG: "Ball",
    PetType.CAT: "Laser Pointer",
    PetType.BIRD: "Mirror",
    PetType.FISH: "Bubble Maker",
    PetType.RABBIT: "Tunnel",
    PetType.HAMSTER: "Wheel",
    PetType.TURTLE: "Rock",
}


def clamp(value: float) -> float:
    return max(STAT_MIN, min(STAT_MAX, value))


def create_pet(name: str, pet_type: PetType, personality: PetPersonality = PetPersonality.FRIENDLY) -> VirtualPet:
    return VirtualPet(
        name=name,
        type=pet_type,
        personality=personality,
        favorite_food=FAVORITE_FOODS[pet_type],
        favorite_toy=FAVORITE_TOYS[pet_type],
    )


def apply_care(pet: VirtualPet, action: PetAction, now: Optional[datetime] = None) -> VirtualPet:
    """Apply a care action's stat deltas and stamp its last-action time."""
    now = now or datetime.now(timezone.utc)
    deltas, stamp_field = CARE_EFFECTS[action]

    updates: dict = {stat: clamp(getattr(pet, stat) + delta) for stat, delta in deltas.items()}
    if stamp_field:
        updates[stamp_field] = now
    return pet.model_copy(update=updates)


def decay_due(pet: VirtualPet, now: datetime, interval_seconds: float) -> bool:
    """True if enough time has passed since the previous decay tick."""
    if pet.last_decay_at is None:
        return True
    elapsed = (now - pet.last_decay_at).total_seconds()
    return elapsed >= interval_seconds * (1 - DECAY_SLACK)


def apply_decay(pet: VirtualPet, now: Optional[datetime] = None) -> VirtualPet:
    """Run one decay tick based on time elapsed since the last care actions."""
    now = now or datetime.now(timezone.utc)
    since_fed = (now - pet.last_fed).total_seconds()
    since_played = (now - pet.last_played).total_seconds()

    hunger = pet.hunger
    happiness = pet.happiness
    health = pet.health

    if since_fed > HUNGER_DECAY_AFTER:
        hunger = clamp(hunger - HUNGER_DECAY)
    if since_played > HAPPINESS_DECAY_AFTER:
        happiness = clamp(happiness - HAPPINESS_DECAY)
    energy = clamp(pet.energy - ENERGY_DECAY)

    # health reacts to the post-decay values
    if hunger < LOW_STAT_THRESHOLD or happiness < LOW_STAT_THRESHOLD:
        health = clamp(health - HEALTH_DECAY)

    return pet.model_copy(update={
        "hunger": hunger,
        "happiness": happiness,
        "energy": energy,
        "health": health,
        "last_decay_at": now,
    })


def age_one_day(pet: VirtualPet) -> VirtualPet:
    return pet.model_copy(update={"age": pet.age + 1})
