"""Virtual pet API endpoints."""

from fastapi import APIRouter, Depends

from familyhome.api.deps import get_manager, unwrap
from familyhome.models.family import VirtualPet
from familyhome.schemas.family import PetCreateRequest
from familyhome.services.app_state import AppStateManager
from familyhome.services.pet_service import PetAction

router = APIRouter(tags=["pet"])


@router.post("/family/pet", response_model=VirtualPet)
async def create_pet(request: PetCreateRequest, manager: AppStateManager = Depends(get_manager)):
    """Adopt a pet for the current family, replacing any existing one."""
    return unwrap(manager.create_pet(request.name, request.type, request.personality))


@router.post("/family/pet/age", response_model=VirtualPet)
async def age_pet(manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.age_pet())


@router.post("/family/pet/tick", response_model=VirtualPet)
async def tick_pet(manager: AppStateManager = Depends(get_manager)):
    """Run one decay tick. 409 if a tick already ran in this window."""
    return unwrap(manager.update_pet_status())


@router.post("/family/pet/{action}", response_model=VirtualPet)
async def care_for_pet(action: PetAction, manager: AppStateManager = Depends(get_manager)):
    """Feed, play with, train or rest the pet."""
    handlers = {
        PetAction.FEED: manager.feed_pet,
        PetAction.PLAY: manager.play_with_pet,
        PetAction.TRAIN: manager.train_pet,
        PetAction.REST: manager.rest_pet,
    }
    return unwrap(handlers[action]())
