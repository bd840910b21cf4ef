"""Current user profile: location, activity & avatar endpoints."""

from fastapi import APIRouter, Depends, HTTPException, Request

from familyhome.api.deps import get_manager, unwrap
from familyhome.models.user import Activity, Avatar, KeyLocation, Location, User
from familyhome.schemas.profile import AnimationRequest, AvatarStyleRequest, AvatarUploadResponse
from familyhome.services.app_state import AppStateManager

router = APIRouter(prefix="/me", tags=["profile"])


@router.get("", response_model=User)
async def get_me(manager: AppStateManager = Depends(get_manager)):
    if not manager.current_user:
        raise HTTPException(status_code=404, detail="Not signed in")
    return manager.current_user


@router.put("/location", response_model=Location)
async def update_location(location: Location, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.update_location(location))


@router.put("/activity", response_model=Activity)
async def update_activity(activity: Activity, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.update_activity(activity))


@router.post("/key-locations", response_model=KeyLocation)
async def add_key_location(key_location: KeyLocation, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.add_key_location(key_location))


@router.put("/avatar", response_model=Avatar)
async def replace_avatar(avatar: Avatar, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.update_avatar(avatar))


@router.patch("/avatar", response_model=Avatar)
async def style_avatar(request: AvatarStyleRequest, manager: AppStateManager = Depends(get_manager)):
    """Change pose, expression and/or outfit."""
    if not manager.current_user:
        raise HTTPException(status_code=409, detail="no signed-in user")
    if request.pose is not None:
        unwrap(manager.set_avatar_pose(request.pose))
    if request.expression is not None:
        unwrap(manager.set_avatar_expression(request.expression))
    if request.outfit is not None:
        unwrap(manager.set_avatar_outfit(request.outfit))
    return manager.current_user.avatar


@router.post("/avatar/animation", response_model=Avatar)
async def animate_avatar(request: AnimationRequest, manager: AppStateManager = Depends(get_manager)):
    unwrap(manager.trigger_avatar_animation(request.animation))
    return manager.current_user.avatar


@router.post("/avatar/image", response_model=AvatarUploadResponse)
async def upload_avatar_image(request: Request, manager: AppStateManager = Depends(get_manager)):
    """Upload raw image bytes as the avatar photo."""
    data = await request.body()
    if not data:
        raise HTTPException(status_code=400, detail="Empty image")
    return AvatarUploadResponse(url=unwrap(await manager.upload_avatar_image(data)))
