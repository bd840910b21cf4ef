"""Family, house and pet request schemas."""

from pydantic import BaseModel

from familyhome.models.family import PetPersonality, PetType


class FamilyCreateRequest(BaseModel):
    name: str


class FamilyJoinRequest(BaseModel):
    invite_code: str


class InviteRequest(BaseModel):
    email: str


class PetCreateRequest(BaseModel):
    name: str
    type: PetType
    personality: PetPersonality = PetPersonality.FRIENDLY
