"""Account field validation."""

import re
from typing import Any, Iterable, Mapping, Optional

from pydantic import BaseModel, EmailStr, Field, StrictBool, TypeAdapter, field_validator
from pydantic import ValidationError as PydanticValidationError

from user_service.domain.models.enums import Role, Tier, Theme
from user_service.validation.result import (
    NAME_PATTERN,
    Candidate,
    ValidationResult,
    blank_to_none,
    lower_choice,
    rule_error,
)

VALID_ROLES = frozenset(r.value for r in Role)
MAX_EMAIL_LENGTH = 100

MESSAGES = {
    "email": "Email is required, must be valid, 5-100 chars",
    "password": "Password must be a string",
    "first_name": "First name must be 2-50 letters, spaces, hyphens, apostrophes, or periods",
    "last_name": "Last name must be 1-50 letters, spaces, hyphens, apostrophes, or periods",
    "display_name": "Display name must be less than 100 characters",
    "roles": "Roles must be a non-empty list of: " + ", ".join(sorted(VALID_ROLES)),
    "tier": "Tier must be one of: " + ", ".join(t.value for t in Tier),
    "is_active": "is_active must be a boolean value",
    "is_email_verified": "is_email_verified must be a boolean value",
    "preferences": (
        "Preferences theme must be one of: " + ", ".join(t.value for t in Theme)
        + " and notification flags must be boolean"
    ),
}

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(email: Any) -> bool:
    if not isinstance(email, str) or not 5 <= len(email.strip()) <= MAX_EMAIL_LENGTH:
        return False
    try:
        _email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        return False
    return True


def check_password(password: Any) -> Optional[str]:
    """Return the reason a password is rejected, or None when it is acceptable."""
    if not isinstance(password, str):
        return "Password must be a string"
    if not 6 <= len(password.strip()) <= 25:
        return "Password must be between 6 and 25 characters"
    if not re.search(r"[A-Za-z]", password):
        return "Password must contain at least one letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    return None


class NotificationPreferences(BaseModel):
    email: StrictBool = True
    sms: StrictBool = False


class PreferencesCandidate(Candidate):
    theme: Theme = Theme.LIGHT
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @field_validator("theme", mode="before")
    @classmethod
    def normalize_theme(cls, value: Any) -> Any:
        return lower_choice(value)


class NameFields(Candidate):
    first_name: Optional[str] = Field(default=None, min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50, pattern=NAME_PATTERN)
    display_name: Optional[str] = Field(default=None, max_length=100)

    @field_validator("first_name", "last_name", "display_name", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)


class RegistrationCandidate(NameFields):
    """Self-registration payload. The password is kept raw for hashing."""

    email: EmailStr
    password: Any

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("email")
    @classmethod
    def lower_email(cls, value: str) -> str:
        if len(value) > MAX_EMAIL_LENGTH:
            raise ValueError("email is too long")
        return value.lower()

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: Any) -> Any:
        reason = check_password(value)
        if reason:
            raise rule_error(reason)
        return value


class AdminCreateCandidate(RegistrationCandidate):
    """Account created by an admin: names are required and roles, tier and status may be set."""

    first_name: str = Field(min_length=2, max_length=50, pattern=NAME_PATTERN)
    last_name: str = Field(min_length=1, max_length=50, pattern=NAME_PATTERN)
    roles: list[Role] = Field(default_factory=lambda: [Role.CUSTOMER], min_length=1)
    tier: Tier = Tier.BASIC
    is_active: StrictBool = True

    @field_validator("roles", mode="before")
    @classmethod
    def lower_roles(cls, value: Any) -> Any:
        return [lower_choice(r) for r in value] if isinstance(value, list) else value

    @field_validator("roles")
    @classmethod
    def unique_roles(cls, value: list[Role]) -> list[Role]:
        return sorted(set(value), key=lambda r: r.value)

    @field_validator("tier", mode="before")
    @classmethod
    def lower_tier(cls, value: Any) -> Any:
        return lower_choice(value)


class ProfileUpdateCandidate(NameFields):
    """Fields a user may change on their own profile."""

    preferences: Optional[PreferencesCandidate] = None

    @field_validator("preferences", mode="before")
    @classmethod
    def preferences_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("preferences cannot be null")
        return value


class AdminUpdateCandidate(ProfileUpdateCandidate):
    """Fields an admin may change on any profile."""

    roles: Optional[list[Role]] = Field(default=None, min_length=1)
    tier: Optional[Tier] = None
    is_active: Optional[StrictBool] = None
    is_email_verified: Optional[StrictBool] = None

    @field_validator("roles", "tier", "is_active", "is_email_verified", mode="before")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("value cannot be null")
        return value

    @field_validator("roles", mode="before")
    @classmethod
    def lower_roles(cls, value: Any) -> Any:
        return [lower_choice(r) for r in value] if isinstance(value, list) else value

    @field_validator("roles")
    @classmethod
    def unique_roles(cls, value: Optional[list[Role]]) -> Optional[list[Role]]:
        return sorted(set(value), key=lambda r: r.value) if value else value

    @field_validator("tier", mode="before")
    @classmethod
    def lower_tier(cls, value: Any) -> Any:
        return lower_choice(value)


# Fields a user may change on their own profile
SELF_UPDATABLE_FIELDS = frozenset(ProfileUpdateCandidate.model_fields)
# Fields an admin may change on any profile
ADMIN_UPDATABLE_FIELDS = frozenset(AdminUpdateCandidate.model_fields)


def validate_registration(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validate a self-registration payload. The password is returned raw for hashing."""
    return ValidationResult.from_model(RegistrationCandidate, candidate, MESSAGES)


def validate_admin_create(candidate: Mapping[str, Any]) -> ValidationResult:
    return ValidationResult.from_model(AdminCreateCandidate, candidate, MESSAGES)


def validate_profile_update(
    candidate: Mapping[str, Any],
    allowed_fields: Iterable[str] = SELF_UPDATABLE_FIELDS,
) -> ValidationResult:
    """
    Validate a partial profile update.

    Only ``allowed_fields`` are considered; the normalized output holds just
    the fields the caller supplied. A ``preferences`` patch likewise holds
    only the keys supplied, so callers merge it into the stored preferences.
    """
    allowed = frozenset(allowed_fields)
    patch = {k: v for k, v in candidate.items() if k in allowed}
    if not patch:
        return ValidationResult.build(["No updatable fields provided"], {})

    model = AdminUpdateCandidate if allowed - SELF_UPDATABLE_FIELDS else ProfileUpdateCandidate
    return ValidationResult.from_model(model, patch, MESSAGES, exclude_unset=True)
