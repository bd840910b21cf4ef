"""Error types shared by the Family Home services."""

from typing import Optional


class FamilyHomeError(Exception):
    """Base class for Family Home errors."""


class RemoteOperationError(FamilyHomeError):
    """A call into the remote backend failed (network, auth or validation)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"{self.message} (status {self.status_code})"
        return self.message
