"""Common API dependencies: state manager lookup, result unwrapping."""

from typing import Any

from fastapi import HTTPException, Request, status

from familyhome.services.app_state import ActionResult, ActionStatus, AppStateManager


def get_manager(request: Request) -> AppStateManager:
    """FastAPI dependency: the process-wide state manager built at startup."""
    return request.app.state.manager


def unwrap(result: ActionResult) -> Any:
    """Return the result value, or raise for skipped / failed operations."""
    if result.status == ActionStatus.SKIPPED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.reason)
    if result.status == ActionStatus.FAILED:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=result.reason)
    return result.value
