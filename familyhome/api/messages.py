"""Messages & notifications API endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from familyhome.api.deps import get_manager, unwrap
from familyhome.models.message import Message, Notification
from familyhome.schemas.profile import MessageSendRequest, NotificationCreateRequest
from familyhome.services.app_state import AppStateManager

router = APIRouter(tags=["messages"])


@router.get("/messages", response_model=list[Message])
async def list_messages(manager: AppStateManager = Depends(get_manager)):
    """Session messages in the order they were added."""
    return manager.messages


@router.post("/messages", response_model=Message)
async def send_message(request: MessageSendRequest, manager: AppStateManager = Depends(get_manager)):
    return unwrap(await manager.send_message(request.content, request.type))


@router.get("/notifications", response_model=list[Notification])
async def list_notifications(manager: AppStateManager = Depends(get_manager)):
    return manager.notifications


@router.post("/notifications", response_model=Notification)
async def add_notification(request: NotificationCreateRequest, manager: AppStateManager = Depends(get_manager)):
    return unwrap(manager.add_notification(request.title, request.body, request.type, request.action_required))


@router.post("/notifications/{notification_id}/read", response_model=Notification)
async def mark_read(notification_id: str, manager: AppStateManager = Depends(get_manager)):
    result = manager.mark_notification_as_read(notification_id)
    if result.is_skipped:
        raise HTTPException(status_code=404, detail="Notification not found")
    return result.value
