"""Application state manager.

Holds the signed-in session (user, family, messages, notifications and
status flags) and exposes every mutating operation the UI can trigger.
Remote calls go through the injected facade; the current user and family
are written through the injected persistence adapter after each change.

All state lives on one asyncio event loop. Operations never hold a lock
across an ``await``, so a remote call that completes after a later state
change (for example a sign-in finishing after sign-out) still writes its
result: last write wins.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from familyhome.config import Settings
from familyhome.exceptions import RemoteOperationError
from familyhome.models.family import (
    Family,
    FamilyActivity,
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
from familyhome.models.user import Activity, Avatar, KeyLocation, Location, User
from familyhome.services import pet_service
from familyhome.services.pet_service import PetAction
from familyhome.services.persistence import PersistenceAdapter
from familyhome.services.remote_facade import RemoteFacade
from familyhome.utils.security import generate_invite_code

logger = logging.getLogger(__name__)


class ActionStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class ActionResult:
    """Outcome of a state manager operation.

    ``skipped`` means a precondition was missing (no user, family or pet)
    and nothing changed. ``failed`` means a remote call failed and no
    fallback was applied.
    """

    status: ActionStatus
    reason: Optional[str] = None
    value: Any = None

    @classmethod
    def ok(cls, value: Any = None, reason: Optional[str] = None) -> "ActionResult":
        return cls(ActionStatus.APPLIED, reason, value)

    @classmethod
    def skipped(cls, reason: str) -> "ActionResult":
        return cls(ActionStatus.SKIPPED, reason)

    @classmethod
    def failed(cls, reason: str) -> "ActionResult":
        return cls(ActionStatus.FAILED, reason)

    @property
    def is_applied(self) -> bool:
        return self.status == ActionStatus.APPLIED

    @property
    def is_skipped(self) -> bool:
        return self.status == ActionStatus.SKIPPED


class AppPhase(str, Enum):
    LOADING = "loading"
    # also the signed-out phase: sign-out returns to onboarding
    ONBOARDING = "onboarding"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED_NO_FAMILY = "authenticated_no_family"
    AUTHENTICATED_WITH_FAMILY = "authenticated_with_family"


class AvatarAnimation(str, Enum):
    WAVE = "wave"
    POINT = "point"

    @property
    def flag(self) -> str:
        return "is_waving" if self is AvatarAnimation.WAVE else "is_pointing"


NO_USER = "no signed-in user"
NO_FAMILY = "no current family"
NO_PET = "family has no pet"


def default_house() -> House:
    """Starter house: a living room with a couch and a TV."""
    living_room = Room(
        name="Living Room",
        type=RoomType.LIVING_ROOM,
        position=Point(x=0, y=0),
        size=Size(width=300, height=200),
    )
    couch = Furniture(name="Couch", type=FurnitureType.COUCH, position=Point(x=50, y=100))
    tv = Furniture(name="TV", type=FurnitureType.TV, position=Point(x=200, y=50))
    return House(rooms=[living_room], furniture=[couch, tv], theme=HouseTheme.MODERN)


class AppStateManager:
    def __init__(self, settings: Settings, facade: RemoteFacade, persistence: PersistenceAdapter):
        self.settings = settings
        self.facade = facade
        self.persistence = persistence

        self.current_user: Optional[User] = None
        self.current_family: Optional[Family] = None
        self.is_authenticated = False
        self.is_onboarding = True
        self.is_loading = False
        self.error_message: Optional[str] = None
        self.messages: list[Message] = []
        self.notifications: list[Notification] = []

        self._loaded = False
        self._animation_timers: dict[AvatarAnimation, asyncio.TimerHandle] = {}

    # --- State ---

    @property
    def phase(self) -> AppPhase:
        if not self._loaded:
            return AppPhase.LOADING
        if self.is_authenticated:
            if self.current_family:
                return AppPhase.AUTHENTICATED_WITH_FAMILY
            return AppPhase.AUTHENTICATED_NO_FAMILY
        if self.is_loading:
            return AppPhase.AUTHENTICATING
        return AppPhase.ONBOARDING

    def load(self) -> AppPhase:
        """Restore the saved user and family. A saved user skips onboarding."""
        user = self.persistence.load_user()
        if user:
            # animation flags are transient
            user.avatar.is_waving = False
            user.avatar.is_pointing = False
            self.current_user = user
            self.is_authenticated = True
            self.is_onboarding = False
        family = self.persistence.load_family()
        if family:
            self.current_family = family
        self._loaded = True
        logger.info("State restored: phase=%s", self.phase.value)
        return self.phase

    def clear_error(self) -> None:
        self.error_message = None

    def _skip(self, operation: str, reason: str) -> ActionResult:
        logger.debug("%s skipped: %s", operation, reason)
        return ActionResult.skipped(reason)

    def _record_error(self, context: str, error: RemoteOperationError) -> None:
        self.error_message = str(error)
        logger.warning("%s: %s", context, error)

    def _save_user(self) -> None:
        if self.current_user:
            self.persistence.save_user(self.current_user)

    def _save_family(self) -> None:
        if self.current_family:
            self.persistence.save_family(self.current_family)

    def _authenticate(self, user: User) -> None:
        self.current_user = user
        self.is_authenticated = True
        self.is_onboarding = False
        self._save_user()

    def _set_family(self, family: Family) -> None:
        self.current_family = family
        self._save_family()
        if self.current_user:
            self.current_user.family_id = family.id
            self._save_user()

    def _snapshot(self) -> User:
        return self.current_user.model_copy(deep=True)

    # --- Authentication ---

    async def create_account(
        self,
        name: str,
        email: str,
        password: str = "",
        avatar: Optional[Avatar] = None,
    ) -> ActionResult:
        self.is_loading = True
        self.error_message = None
        try:
            user = await self.facade.sign_up(name, email, password, avatar or Avatar())
        except RemoteOperationError as e:
            self.is_loading = False
            self._record_error("Sign up failed", e)
            return ActionResult.failed(self.error_message)

        self.is_loading = False
        self._authenticate(user)
        logger.info("Account created for %s", email)
        return ActionResult.ok(user)

    async def sign_in(self, email: str, password: str = "") -> ActionResult:
        self.is_loading = True
        self.error_message = None
        try:
            user = await self.facade.sign_in(email, password)
        except RemoteOperationError as e:
            self.is_loading = False
            self._record_error("Sign in failed", e)
            if not self.settings.offline_fallback:
                return ActionResult.failed(self.error_message)
            self._authenticate(User(name="Demo User", email=email))
            return ActionResult.ok(self.current_user, reason="offline fallback")

        self.is_loading = False
        self._authenticate(user)
        return ActionResult.ok(user)

    async def sign_out(self) -> ActionResult:
        """Clear the session. Saved records stay in local storage."""
        try:
            await self.facade.sign_out()
        except RemoteOperationError as e:
            logger.warning("Remote sign out failed, clearing local session anyway: %s", e)

        self._cancel_animation_timers()
        self.current_user = None
        self.current_family = None
        self.is_authenticated = False
        self.is_onboarding = True
        self.is_loading = False
        self.error_message = None
        self.messages = []
        self.notifications = []
        return ActionResult.ok()

    # --- Family ---

    async def create_family(self, name: str) -> ActionResult:
        user = self.current_user
        if not user:
            return self._skip("create_family", NO_USER)

        self.is_loading = True
        self.error_message = None
        reason = None
        try:
            family = await self.facade.create_family(name, user.model_copy(deep=True))
        except RemoteOperationError as e:
            self._record_error("Could not create family", e)
            if not self.settings.offline_fallback:
                self.is_loading = False
                return ActionResult.failed(self.error_message)
            family = Family(
                name=name,
                members=[user.model_copy(deep=True)],
                house=default_house(),
                invite_code=generate_invite_code(),
                created_by=user.id,
            )
            reason = "offline fallback"

        self.is_loading = False
        self._set_family(family)
        logger.info("Family %s created (invite code %s)", family.name, family.invite_code)
        return ActionResult.ok(family, reason=reason)

    async def join_family(self, invite_code: str) -> ActionResult:
        user = self.current_user
        if not user:
            return self._skip("join_family", NO_USER)

        self.is_loading = True
        self.error_message = None
        reason = None
        try:
            family = await self.facade.join_family(invite_code, user.model_copy(deep=True))
        except RemoteOperationError as e:
            self._record_error("Could not join family", e)
            if not self.settings.offline_fallback:
                self.is_loading = False
                return ActionResult.failed(self.error_message)
            family = Family(
                name="Sample Family",
                members=[user.model_copy(deep=True)],
                house=default_house(),
                invite_code=invite_code,
            )
            reason = "offline fallback"

        self.is_loading = False
        self._set_family(family)
        return ActionResult.ok(family, reason=reason)

    async def refresh_family(self) -> ActionResult:
        """Pull name, members and invite code from the backend.

        House, pet and activities are kept from the local copy.
        """
        family = self.current_family
        if not family:
            return self._skip("refresh_family", NO_FAMILY)

        try:
            remote = await self.facade.fetch_family(family.id)
        except RemoteOperationError as e:
            self._record_error("Could not refresh family", e)
            return ActionResult.failed(self.error_message)

        updated = family.model_copy(update={
            "name": remote.name or family.name,
            "members": remote.members or family.members,
            "invite_code": remote.invite_code or family.invite_code,
        })
        self.current_family = updated
        self._save_family()
        return ActionResult.ok(updated)

    def invite_to_family(self, email: str) -> ActionResult:
        if not self.current_user:
            return self._skip("invite_to_family", NO_USER)
        logger.info("Inviting %s to the family", email)
        return self.add_notification(
            title="Family Invitation",
            body=f"{self.current_user.name} invited you to join their family",
            type=NotificationType.FAMILY_INVITE,
        )

    # --- Location & activity ---

    def update_location(self, location: Location) -> ActionResult:
        if not self.current_user:
            return self._skip("update_location", NO_USER)
        self.current_user.current_location = location
        self.messages.append(Message(
            sender=self._snapshot(),
            content=f"I'm at {location.name}",
            type=MessageType.LOCATION,
            location=location,
        ))
        self._save_user()
        return ActionResult.ok(location)

    def update_activity(self, activity: Activity) -> ActionResult:
        if not self.current_user:
            return self._skip("update_activity", NO_USER)
        self.current_user.current_activity = activity
        self.messages.append(Message(
            sender=self._snapshot(),
            content=f"I'm {activity.title.lower()}",
            type=MessageType.ACTIVITY,
            activity=activity,
        ))
        self._save_user()
        return ActionResult.ok(activity)

    def add_key_location(self, key_location: KeyLocation) -> ActionResult:
        if not self.current_user:
            return self._skip("add_key_location", NO_USER)
        self.current_user.key_locations.append(key_location)
        self._save_user()
        return ActionResult.ok(key_location)

    # --- Messages ---

    async def send_message(self, content: str, type: MessageType = MessageType.TEXT) -> ActionResult:
        if not self.current_user:
            return self._skip("send_message", NO_USER)

        message = Message(sender=self._snapshot(), content=content, type=type)
        self.messages.append(message)
        family_id = self.current_family.id if self.current_family else None
        try:
            await self.facade.send_message(family_id, message)
        except RemoteOperationError as e:
            self._record_error("Message not delivered", e)
            return ActionResult.failed(self.error_message)
        return ActionResult.ok(message)

    # --- House ---

    def update_house(self, house: House) -> ActionResult:
        if not self.current_family:
            return self._skip("update_house", NO_FAMILY)
        self.current_family.house = house
        self._save_family()
        return ActionResult.ok(house)

    def add_room(self, room: Room) -> ActionResult:
        if not self.current_family:
            return self._skip("add_room", NO_FAMILY)
        self.current_family.house.rooms.append(room)
        self._save_family()
        return ActionResult.ok(room)

    def add_furniture(self, furniture: Furniture) -> ActionResult:
        if not self.current_family:
            return self._skip("add_furniture", NO_FAMILY)
        self.current_family.house.furniture.append(furniture)
        self._save_family()
        return ActionResult.ok(furniture)

    def create_family_activity(self, activity: FamilyActivity) -> ActionResult:
        if not self.current_family:
            return self._skip("create_family_activity", NO_FAMILY)
        self.current_family.activities.append(activity)
        self._save_family()
        return ActionResult.ok(activity)

    # --- Virtual pet ---

    def _pet_or_skip(self, operation: str) -> tuple[Optional[VirtualPet], Optional[ActionResult]]:
        if not self.current_family:
            return None, self._skip(operation, NO_FAMILY)
        if not self.current_family.virtual_pet:
            return None, self._skip(operation, NO_PET)
        return self.current_family.virtual_pet, None

    def _store_pet(self, pet: VirtualPet) -> None:
        self.current_family.virtual_pet = pet
        self._save_family()

    def create_pet(
        self,
        name: str,
        pet_type: PetType,
        personality: PetPersonality = PetPersonality.FRIENDLY,
    ) -> ActionResult:
        if not self.current_family:
            return self._skip("create_pet", NO_FAMILY)
        pet = pet_service.create_pet(name, pet_type, personality)
        self._store_pet(pet)
        return ActionResult.ok(pet)

    def _care(self, action: PetAction) -> ActionResult:
        pet, skipped = self._pet_or_skip(f"{action.value}_pet")
        if skipped:
            return skipped

        pet = pet_service.apply_care(pet, action)
        self._store_pet(pet)

        title, body = pet_service.CARE_NOTIFICATIONS[action]
        self.add_notification(title, body.format(name=pet.name), NotificationType.PET_CARE)
        return ActionResult.ok(pet)

    def feed_pet(self) -> ActionResult:
        return self._care(PetAction.FEED)

    def play_with_pet(self) -> ActionResult:
        return self._care(PetAction.PLAY)

    def train_pet(self) -> ActionResult:
        return self._care(PetAction.TRAIN)

    def rest_pet(self) -> ActionResult:
        return self._care(PetAction.REST)

    def age_pet(self) -> ActionResult:
        pet, skipped = self._pet_or_skip("age_pet")
        if skipped:
            return skipped
        pet = pet_service.age_one_day(pet)
        self._store_pet(pet)
        return ActionResult.ok(pet)

    def update_pet_status(self, now: Optional[datetime] = None) -> ActionResult:
        """Periodic decay tick, driven by an external scheduler.

        A second tick inside ``settings.pet_decay_interval`` is skipped.
        """
        pet, skipped = self._pet_or_skip("update_pet_status")
        if skipped:
            return skipped

        now = now or datetime.now(timezone.utc)
        if not pet_service.decay_due(pet, now, self.settings.pet_decay_interval):
            return self._skip("update_pet_status", "decay already applied in this window")

        pet = pet_service.apply_decay(pet, now)
        self._store_pet(pet)
        return ActionResult.ok(pet)

    # --- Notifications ---

    def add_notification(
        self,
        title: str,
        body: str,
        type: NotificationType,
        action_required: bool = False,
    ) -> ActionResult:
        if not self.current_user:
            return self._skip("add_notification", NO_USER)
        notification = Notification(
            title=title,
            body=body,
            type=type,
            sender=self._snapshot(),
            action_required=action_required,
        )
        self.notifications.append(notification)
        return ActionResult.ok(notification)

    def mark_notification_as_read(self, notification_id: str) -> ActionResult:
        for notification in self.notifications:
            if notification.id == notification_id:
                notification.is_read = True
                return ActionResult.ok(notification)
        return self._skip("mark_notification_as_read", "notification not found")

    # --- Avatar ---

    def _edit_avatar(self, operation: str, **fields) -> ActionResult:
        if not self.current_user:
            return self._skip(operation, NO_USER)
        avatar = self.current_user.avatar
        for name, value in fields.items():
            setattr(avatar, name, value)
        self._save_user()
        return ActionResult.ok(avatar)

    def update_avatar(self, avatar: Avatar) -> ActionResult:
        if not self.current_user:
            return self._skip("update_avatar", NO_USER)
        self.current_user.avatar = avatar
        self._save_user()
        return ActionResult.ok(avatar)

    def set_avatar_pose(self, pose: str) -> ActionResult:
        return self._edit_avatar("set_avatar_pose", pose=pose)

    def set_avatar_expression(self, expression: str) -> ActionResult:
        return self._edit_avatar("set_avatar_expression", expression=expression)

    def set_avatar_outfit(self, outfit: str) -> ActionResult:
        return self._edit_avatar("set_avatar_outfit", outfit=outfit)

    async def upload_avatar_image(self, image_data: bytes) -> ActionResult:
        user = self.current_user
        if not user:
            return self._skip("upload_avatar_image", NO_USER)
        try:
            url = await self.facade.upload_avatar(user.id, image_data)
        except RemoteOperationError as e:
            self._record_error("Avatar upload failed", e)
            return ActionResult.failed(self.error_message)

        user.avatar.photo_url = url
        if user is self.current_user:
            self._save_user()
        return ActionResult.ok(url)

    def trigger_avatar_animation(self, animation: AvatarAnimation) -> ActionResult:
        """Raise a one-shot animation flag and schedule its reset.

        Re-triggering while active restarts the reset timer. Must be called
        from the running event loop. The flag is not persisted.
        """
        if not self.current_user:
            return self._skip("trigger_avatar_animation", NO_USER)

        setattr(self.current_user.avatar, animation.flag, True)
        previous = self._animation_timers.pop(animation, None)
        if previous:
            previous.cancel()

        loop = asyncio.get_running_loop()
        self._animation_timers[animation] = loop.call_later(
            self.settings.animation_reset_seconds, self._end_animation, animation,
        )
        return ActionResult.ok(animation)

    def _end_animation(self, animation: AvatarAnimation) -> None:
        self._animation_timers.pop(animation, None)
        if self.current_user:
            setattr(self.current_user.avatar, animation.flag, False)

    def _cancel_animation_timers(self) -> None:
        for handle in self._animation_timers.values():
            handle.cancel()
        self._animation_timers.clear()

    def shutdown(self) -> None:
        self._cancel_animation_timers()
