# src/campus_forum/core/errors.py
"""Error taxonomy shared by services and the HTTP layer.

Services raise the subclasses of :class:`ForumError` before any write takes
place. The API layer turns them into the ``{"success": false, "error": ...}``
envelope through the handlers registered in :mod:`campus_forum.main`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Stable machine-readable error codes returned to clients."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    ALREADY_ACTIVE = "ALREADY_ACTIVE"
    NOT_ACTIVE = "NOT_ACTIVE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ForumError(Exception):
    """Base class for every error that is reported to the caller."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, details: Any = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        """Return the ``error`` object of the response envelope."""
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(ForumError):
    code = ErrorCode.VALIDATION_ERROR
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class UnauthorizedError(ForumError):
    code = ErrorCode.UNAUTHORIZED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class ForbiddenError(ForumError):
    code = ErrorCode.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Permission denied"


class NotFoundError(ForumError):
    code = ErrorCode.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class AlreadyExistsError(ForumError):
    code = ErrorCode.ALREADY_EXISTS
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class AlreadyActiveError(ForumError):
    code = ErrorCode.ALREADY_ACTIVE
    status_code = status.HTTP_409_CONFLICT
    default_message = "Already active"


class NotActiveError(ForumError):
    code = ErrorCode.NOT_ACTIVE
    status_code = status.HTTP_409_CONFLICT
    default_message = "Not active"


class InternalError(ForumError):
    code = ErrorCode.INTERNAL_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class CounterWriteError(InternalError):
    """Raised when a denormalized counter update matches no row.

    The fact write and the counter write share one transaction, so raising
    this rolls both back. The drift is also reported on the operator logger.
    """

    default_message = "Counter update failed"
