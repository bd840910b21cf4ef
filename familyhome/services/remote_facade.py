"""Remote access facade: auth, family, messaging and avatar storage.

Two implementations share one interface. ``SimulatedFacade`` resolves every
call after a fixed artificial delay with a locally fabricated value and is
used when no backend is configured. ``DelegatingFacade`` forwards calls to
the remote backend through ``BackendClient``. Both raise
``RemoteOperationError`` on failure.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import httpx
import jwt
from pydantic import ValidationError

from familyhome.config import Settings
from familyhome.exceptions import RemoteOperationError
from familyhome.models.family import Family, House
from familyhome.models.message import Message
from familyhome.models.user import Avatar, User
from familyhome.schemas.documents import FamilyDocument, MessageDocument, UserDocument
from familyhome.services.backend_client import BackendClient
from familyhome.utils.security import create_session_token, decode_session_token, generate_invite_code

logger = logging.getLogger(__name__)

USERS = "users"
FAMILIES = "families"


@dataclass
class RemoteIdentity:
    uid: str
    email: str
    token: str = ""


class RemoteFacade(Protocol):
    async def sign_up(self, name: str, email: str, password: str, avatar: Avatar) -> User: ...

    async def sign_in(self, email: str, password: str) -> User: ...

    async def sign_out(self) -> None: ...

    async def get_current_user(self) -> Optional[RemoteIdentity]: ...

    async def create_family(self, name: str, created_by: User) -> Family: ...

    async def join_family(self, invite_code: str, user: User) -> Family: ...

    async def fetch_family(self, family_id: str) -> Family: ...

    async def send_message(self, family_id: Optional[str], message: Message) -> None: ...

    async def upload_avatar(self, user_id: str, image_data: bytes) -> str: ...

    async def close(self) -> None: ...


class SimulatedFacade:
    """Local stand-in for the backend. Every call succeeds after a delay."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._identity: Optional[RemoteIdentity] = None
        self._families: dict[str, Family] = {}

    async def _delay(self, seconds: Optional[float] = None) -> None:
        await asyncio.sleep(self.settings.simulated_delay if seconds is None else seconds)

    def _start_session(self, user: User) -> None:
        token = create_session_token(user.id, user.email, self.settings)
        self._identity = RemoteIdentity(uid=user.id, email=user.email, token=token)

    async def sign_up(self, name: str, email: str, password: str, avatar: Avatar) -> User:
        await self._delay()
        user = User(name=name, email=email, avatar=avatar)
        self._start_session(user)
        return user

    async def sign_in(self, email: str, password: str) -> User:
        await self._delay()
        user = User(name="Demo User", email=email)
        self._start_session(user)
        return user

    async def sign_out(self) -> None:
        self._identity = None

    async def get_current_user(self) -> Optional[RemoteIdentity]:
        if not self._identity:
            return None
        try:
            decode_session_token(self._identity.token, self.settings)
        except jwt.PyJWTError:
            logger.info("Simulated session for %s expired", self._identity.email)
            self._identity = None
            return None
        return self._identity

    async def create_family(self, name: str, created_by: User) -> Family:
        await self._delay()
        family = Family(
            name=name,
            members=[created_by],
            house=House(),
            invite_code=generate_invite_code(),
            created_by=created_by.id,
        )
        self._families[family.id] = family
        return family

    async def join_family(self, invite_code: str, user: User) -> Family:
        await self._delay()
        family = Family(name="Demo Family", members=[user], house=House(), invite_code=invite_code)
        self._families[family.id] = family
        return family

    async def fetch_family(self, family_id: str) -> Family:
        await self._delay()
        family = self._families.get(family_id)
        if not family:
            raise RemoteOperationError("Family not found", status_code=404)
        return family.model_copy(deep=True)

    async def send_message(self, family_id: Optional[str], message: Message) -> None:
        await self._delay(self.settings.message_delay)

    async def upload_avatar(self, user_id: str, image_data: bytes) -> str:
        await self._delay()
        return self.settings.placeholder_avatar_url

    async def close(self) -> None:
        self._identity = None


class DelegatingFacade:
    """Maps facade calls onto the remote auth provider and document store."""

    def __init__(self, settings: Settings, client: Optional[BackendClient] = None):
        self.settings = settings
        self.client = client or BackendClient(settings.backend_url or "", timeout=settings.backend_timeout)

    # --- Auth ---

    async def sign_up(self, name: str, email: str, password: str, avatar: Avatar) -> User:
        session = await self.client.sign_up(email, password, name)
        doc = UserDocument(id=session.uid, name=name, email=email, avatar=avatar.model_dump(mode="json"))
        await self.client.create_document(USERS, doc.to_fields(), doc_id=session.uid)
        logger.info("Signed up %s as %s", email, session.uid)
        return User(id=session.uid, name=name, email=email, avatar=avatar, is_online=True)

    async def sign_in(self, email: str, password: str) -> User:
        session = await self.client.sign_in(email, password)
        data = await self.client.get_document(USERS, session.uid)
        user = self._user_from_document(data, session.uid)
        if not user.email:
            user.email = email
        logger.info("Signed in %s", email)
        return user

    async def sign_out(self) -> None:
        await self.client.sign_out()

    async def get_current_user(self) -> Optional[RemoteIdentity]:
        session = self.client.session
        if not session:
            return None
        return RemoteIdentity(uid=session.uid, email=session.email, token=session.id_token)

    # --- Family ---

    async def create_family(self, name: str, created_by: User) -> Family:
        doc = FamilyDocument(
            name=name,
            created_by=created_by.id,
            members=[created_by.id],
            invite_code=generate_invite_code(),
        )
        data = await self.client.create_document(FAMILIES, doc.to_fields())
        return self._family_from_document(data, [created_by])

    async def join_family(self, invite_code: str, user: User) -> Family:
        matches = await self.client.query_documents(FAMILIES, "inviteCode", invite_code)
        if not matches:
            raise RemoteOperationError("Invalid invite code", status_code=404)

        data = matches[0]
        doc = self._parse_family(data)
        if user.id not in doc.members:
            doc.members.append(user.id)
            await self.client.update_document(FAMILIES, doc.id, {"members": doc.members})

        others = [uid for uid in doc.members if uid != user.id]
        members = await self._fetch_members(others)
        members.append(user)
        return self._family_from_document(data, members)

    async def fetch_family(self, family_id: str) -> Family:
        data = await self.client.get_document(FAMILIES, family_id)
        doc = self._parse_family(data)
        members = await self._fetch_members(doc.members)
        return self._family_from_document(data, members)

    # --- Messaging / storage ---

    async def send_message(self, family_id: Optional[str], message: Message) -> None:
        if not family_id:
            raise RemoteOperationError("No family to send the message to")
        doc = MessageDocument(
            sender_id=message.sender.id,
            content=message.content,
            type=message.type.value,
            timestamp=message.timestamp,
            is_read=message.is_read,
        )
        await self.client.create_document(f"{FAMILIES}/{family_id}/messages", doc.to_fields(), doc_id=message.id)

    async def upload_avatar(self, user_id: str, image_data: bytes) -> str:
        return await self.client.upload_blob(f"avatars/{user_id}.jpg", image_data)

    async def close(self) -> None:
        await self.client.close()

    # --- Document mapping ---

    async def _fetch_members(self, user_ids: list[str]) -> list[User]:
        members = []
        for uid in user_ids:
            try:
                data = await self.client.get_document(USERS, uid)
            except RemoteOperationError as e:
                logger.warning("Skipping family member %s: %s", uid, e)
                continue
            members.append(self._user_from_document(data, uid))
        return members

    @staticmethod
    def _fields(data: Any, kind: str) -> dict:
        """The field map of a raw document; a missing body counts as empty."""
        if data is None:
            return {}
        fields = data.get("fields", {}) if isinstance(data, dict) else None
        if not isinstance(fields, dict):
            raise RemoteOperationError(f"Malformed {kind} document from backend")
        return fields

    @classmethod
    def _user_from_document(cls, data: Any, uid: str) -> User:
        fields = cls._fields(data, "user")
        try:
            doc = UserDocument.model_validate({**fields, "id": uid})
            avatar = Avatar.model_validate(doc.avatar) if doc.avatar else Avatar()
        except ValidationError as e:
            logger.warning("Malformed user document %s: %s", uid, e)
            raise RemoteOperationError(f"Malformed user document {uid}") from e
        return User(id=doc.id, name=doc.name, email=doc.email, avatar=avatar, is_online=doc.is_online)

    @classmethod
    def _parse_family(cls, data: Any) -> FamilyDocument:
        if data is None:
            raise RemoteOperationError("Backend returned no family document")
        fields = cls._fields(data, "family")
        try:
            doc = FamilyDocument.model_validate({**fields, "id": data.get("id") or fields.get("id")})
        except ValidationError as e:
            logger.warning("Malformed family document: %s", e)
            raise RemoteOperationError("Malformed family document from backend") from e
        if not doc.id:
            raise RemoteOperationError("Family document has no id")
        return doc

    def _family_from_document(self, data: dict, members: list[User]) -> Family:
        doc = self._parse_family(data)
        family = Family(
            id=doc.id,
            name=doc.name,
            members=members,
            house=House(),
            invite_code=doc.invite_code,
            created_by=doc.created_by,
        )
        if doc.created_at:
            family.created_at = doc.created_at
        return family


def create_facade(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> RemoteFacade:
    """Pick the facade for this process: delegating when a backend is configured."""
    if settings.backend_url:
        logger.info("Using remote backend at %s", settings.backend_url)
        client = BackendClient(settings.backend_url, timeout=settings.backend_timeout, transport=transport)
        return DelegatingFacade(settings, client)
    logger.info("No backend configured, running in simulation mode")
    return SimulatedFacade(settings)
