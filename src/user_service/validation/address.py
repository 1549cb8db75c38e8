"""Address validation and normalization."""

from typing import Any, Mapping, Optional

from pydantic import Field, StrictBool, field_validator

from user_service.domain.models.enums import AddressType
from user_service.validation.result import (
    NAME_PATTERN,
    Candidate,
    ValidationResult,
    blank_to_none,
    is_blank,
    lower_choice,
)

ADDRESS_TYPES = frozenset(t.value for t in AddressType)
DEFAULT_COUNTRY = "United States"

_NAME_RULE = "must contain only letters, spaces, hyphens, apostrophes, and periods"

MESSAGES = {
    "type": "Address type must be one of: " + ", ".join(t.value for t in AddressType),
    "address_line1": "Address line 1 is required and must be less than 200 characters",
    "address_line2": "Address line 2 must be less than 200 characters",
    "city": f"City is required and {_NAME_RULE}",
    "state": f"State is required and {_NAME_RULE}",
    "zip_code": "Zip code is required and must contain only alphanumeric characters, spaces, and hyphens",
    "country": f"Country is required and {_NAME_RULE}",
    "phone": "Phone number must contain only numbers, spaces, hyphens, parentheses, periods, and plus sign",
    "is_default": "isDefault must be a boolean value",
}


class AddressCandidate(Candidate):
    """An address as it will be stored; ``type`` and ``country`` have defaults."""

    type: AddressType = AddressType.HOME
    address_line1: str = Field(min_length=1, max_length=200)
    address_line2: Optional[str] = Field(default=None, max_length=200)
    city: str = Field(max_length=100, pattern=NAME_PATTERN)
    state: str = Field(max_length=100, pattern=NAME_PATTERN)
    zip_code: str = Field(max_length=20, pattern=r"^[a-zA-Z0-9\s\-]+$")
    country: str = Field(default=DEFAULT_COUNTRY, max_length=100, pattern=NAME_PATTERN)
    phone: Optional[str] = Field(default=None, max_length=20, pattern=r"^\+?[0-9\s\-().]+$")
    is_default: StrictBool = False

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, value: Any) -> Any:
        return AddressType.HOME.value if is_blank(value) else lower_choice(value)

    @field_validator("country", mode="before")
    @classmethod
    def default_country(cls, value: Any) -> Any:
        return DEFAULT_COUNTRY if is_blank(value) else value

    @field_validator("address_line2", "phone", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)


def validate_address(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validate an address candidate; ``type`` and ``country`` fall back to their defaults."""
    return ValidationResult.from_model(AddressCandidate, candidate, MESSAGES)
