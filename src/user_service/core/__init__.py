"""Core utilities and shared functionality."""

from user_service.core.timezone import now_utc, today_utc, to_utc, UTC
from user_service.core.exceptions import (
    AppError,
    ValidationError,
    AuthenticationError,
    ForbiddenError,
    NotFoundError,
    ConflictError,
    StorageError,
)

__all__ = [
    "now_utc",
    "today_utc",
    "to_utc",
    "UTC",
    "AppError",
    "ValidationError",
    "AuthenticationError",
    "ForbiddenError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
]
