"""Pydantic schemas for API request/response."""

from user_service.api.schemas.account import (
    RegisterRequest,
    ProfileUpdateRequest,
    AdminCreateRequest,
    AdminUpdateRequest,
    PasswordChangeRequest,
    PasswordResetRequest,
    PreferencesRequest,
    NotificationsRequest,
    AccountResponse,
    ProfileResponse,
    AccountListResponse,
    MessageResponse,
    AccountStatsResponse,
    RecentUserResponse,
)
from user_service.api.schemas.entries import (
    AddressRequest,
    PaymentMethodRequest,
    WishlistItemRequest,
    AddressResponse,
    PaymentMethodResponse,
    WishlistItemResponse,
    CollectionResponse,
)

__all__ = [
    "RegisterRequest",
    "ProfileUpdateRequest",
    "AdminCreateRequest",
    "AdminUpdateRequest",
    "PasswordChangeRequest",
    "PasswordResetRequest",
    "PreferencesRequest",
    "NotificationsRequest",
    "AccountResponse",
    "ProfileResponse",
    "AccountListResponse",
    "MessageResponse",
    "AccountStatsResponse",
    "RecentUserResponse",
    "AddressRequest",
    "PaymentMethodRequest",
    "WishlistItemRequest",
    "AddressResponse",
    "PaymentMethodResponse",
    "WishlistItemResponse",
    "CollectionResponse",
]
