"""Family, house & family activity API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from familyhome.api.deps import get_manager, unwrap
from familyhome.models.family import Family, FamilyActivity, Furniture, House, Room
from familyhome.models.message import Notification
from familyhome.schemas.family import FamilyCreateRequest, FamilyJoinRequest, InviteRequest
from familyhome.services.app_state import AppStateManager

router = APIRouter(tags=["family"])


@router.get("/family", response_model=Family)
async def get_family(manager: AppStateManager = Depends(get_manager)):
    if not manager.current_family:
        raise HTTPException(status_code=404, detail="Family not found")
    return manager.current_family


@router.post("/family", response_model=Family)
async def create_family(request: FamilyCreateRequest, manager: AppStateManager = Depends(get_manager)):
    """Create a family with the current user as its first member."""
    return unwrap(await manager.create_family(request.name))


@router.post("/family/join", response_model=Family)
async def join_family(request: FamilyJoinRequest, manager: AppStateManager = Depends(get_manager)):
    """Join a family using an invite code."""
    return unwrap(await manager.join_family(request.invite_code))


@router.post("/family/refresh", response_model=Family)
async def refresh_family(manager: AppStateManager = Depends(get_manager)):
    return unwrap(await manager.refresh_family())


@router.post("/family/invite", response_model=Notification)
async def invite(request: InviteRequest, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.invite_to_family(request.email))


@router.put("/family/house", response_model=House)
async def update_house(house: House, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.update_house(house))


@router.post("/family/house/rooms", response_model=Room)
async def add_room(room: Room, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.add_room(room))


@router.post("/family/house/furniture", response_model=Furniture)
async def add_furniture(furniture: Furniture, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.add_furniture(furniture))


@router.post("/family/activities", response_model=FamilyActivity)
async def create_activity(activity: FamilyActivity, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.create_family_activity(activity))
