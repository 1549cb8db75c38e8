"""Application-level exceptions."""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for application errors."""

    status_code = 400

    def __init__(
        self,
        message: str,
        code: str = "APP_ERROR",
        details: Optional[Any] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class ValidationError(AppError):
    """Raised when input validation fails.

    ``errors`` keeps every rule violation; ``message`` joins them for display.
    """

    status_code = 400

    def __init__(self, errors: list[str] | str, code: str = "VALIDATION_ERROR"):
        if isinstance(errors, str):
            errors = [errors]
        self.errors = list(errors)
        super().__init__("; ".join(self.errors), code=code, details=self.errors)


class AuthenticationError(AppError):
    """Raised when the caller identity is missing."""

    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message, code="UNAUTHORIZED")


class ForbiddenError(AppError):
    """Raised when the caller lacks a required role."""

    status_code = 403

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, code="FORBIDDEN")


class NotFoundError(AppError):
    """Raised when a requested resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str, code: str = "NOT_FOUND"):
        super().__init__(f"{resource} not found: {identifier}", code=code)


class ConflictError(AppError):
    """Raised when a write collides with existing state (duplicate key, concurrent default)."""

    status_code = 409

    def __init__(self, message: str, code: str = "CONFLICT"):
        super().__init__(message, code=code)


class StorageError(AppError):
    """Raised when the storage layer fails (timeout, lost connection).

    The message is generic on purpose; the cause is logged, never returned.
    """

    status_code = 500

    def __init__(self, message: str = "A storage error occurred"):
        super().__init__(message, code="STORAGE_ERROR")
