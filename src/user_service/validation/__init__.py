"""Validation layer - pydantic candidate models that return normalized, storable data."""

from user_service.validation.result import ValidationResult
from user_service.validation.payment import validate_payment_method, PaymentMethodCandidate, SENSITIVE_FIELDS
from user_service.validation.address import validate_address, AddressCandidate
from user_service.validation.wishlist import validate_wishlist_item, WishlistItemCandidate
from user_service.validation.account import (
    validate_registration,
    validate_admin_create,
    validate_profile_update,
    check_password,
    is_valid_email,
    RegistrationCandidate,
    SELF_UPDATABLE_FIELDS,
    ADMIN_UPDATABLE_FIELDS,
)

__all__ = [
    "ValidationResult",
    "validate_payment_method",
    "validate_address",
    "validate_wishlist_item",
    "validate_registration",
    "validate_admin_create",
    "validate_profile_update",
    "check_password",
    "is_valid_email",
    "PaymentMethodCandidate",
    "AddressCandidate",
    "WishlistItemCandidate",
    "RegistrationCandidate",
    "SENSITIVE_FIELDS",
    "SELF_UPDATABLE_FIELDS",
    "ADMIN_UPDATABLE_FIELDS",
]
