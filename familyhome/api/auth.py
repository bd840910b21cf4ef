"""Session & auth API endpoints."""

from fastapi import APIRouter, Depends, status

from familyhome.api.deps import get_manager, unwrap
from familyhome.schemas.auth import AuthResponse, SignInRequest, SignUpRequest
from familyhome.schemas.state import SessionStateResponse
from familyhome.services.app_state import AppStateManager

router = APIRouter(tags=["auth"])


@router.get("/session", response_model=SessionStateResponse)
async def get_session_state(manager: AppStateManager = Depends(get_manager)):
    """Current session flags plus the signed-in user and family."""
    return SessionStateResponse(
        phase=manager.phase.value,
        is_authenticated=manager.is_authenticated,
        is_onboarding=manager.is_onboarding,
        is_loading=manager.is_loading,
        error_message=manager.error_message,
        user=manager.current_user,
        family=manager.current_family,
        message_count=len(manager.messages),
        unread_notifications=sum(1 for n in manager.notifications if not n.is_read),
    )


@router.delete("/session/error", status_code=status.HTTP_204_NO_CONTENT)
async def clear_error(manager: AppStateManager = Depends(get_manager)):
    manager.clear_error()


@router.post("/auth/signup", response_model=AuthResponse)
async def sign_up(request: SignUpRequest, manager: AppStateManager = Depends(get_manager)):
    """Create an account and sign in."""
    result = await manager.create_account(request.name, request.email, request.password, request.avatar)
    return AuthResponse(user=unwrap(result))


@router.post("/auth/signin", response_model=AuthResponse)
async def sign_in(request: SignInRequest, manager: AppStateManager = Depends(get_manager)):
    result = await manager.sign_in(request.email, request.password)
    user = unwrap(result)
    return AuthResponse(user=user, offline_fallback=result.reason == "offline fallback")


@router.post("/auth/signout", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(manager: AppStateManager = Depends(get_manager)):
    await manager.sign_out()
