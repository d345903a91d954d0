"""
Typed application errors.

Services raise these; the handlers registered in ``app.main`` map each one to
its status code and the ``{"success": false, "error": ...}`` envelope.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base exception class for application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class ValidationError(AppError):
    """Required field missing/empty or a length constraint violated"""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"


class AuthRequired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFound(AppError):
    """Target record absent, or present but not visible to the caller"""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class StoreError(AppError):
    """Underlying persistence failure; detail goes to the log, not the client"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database operation failed"
