"""Remote document schemas.

Field names follow the remote document store's camelCase layout and must
stay byte-identical for compatibility with existing deployments.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RemoteDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_fields(self) -> dict:
        """Serialize to the string-keyed field map sent over the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class UserDocument(RemoteDocument):
    id: str
    name: str = ""
    email: str = ""
    avatar: Optional[dict] = None
    is_online: bool = Field(default=True, alias="isOnline")


class FamilyDocument(RemoteDocument):
    id: Optional[str] = None
    name: str = ""
    created_by: Optional[str] = Field(default=None, alias="createdBy")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    members: list[str] = Field(default_factory=list)
    invite_code: str = Field(default="", alias="inviteCode")


class MessageDocument(RemoteDocument):
    id: Optional[str] = None
    sender_id: str = Field(alias="senderId")
    content: str
    type: str
    timestamp: datetime
    is_read: bool = Field(default=False, alias="isRead")


class AuthSession(BaseModel):
    """Auth provider response for sign-up / sign-in."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str
    email: str = ""
    id_token: str = Field(default="", alias="idToken")
