"""Pydantic schemas for account endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import Field, StrictBool

from user_service.api.schemas.base import CamelRequest, CamelResponse
from user_service.api.schemas.entries import (
    AddressResponse,
    PaymentMethodResponse,
    WishlistItemResponse,
)
from user_service.domain.models import Tier


class RegisterRequest(CamelRequest):
    """Request schema for self-registration."""

    email: Optional[str] = None
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None


class AdminCreateRequest(RegisterRequest):
    """Request schema for an admin creating an account."""

    roles: Optional[list[str]] = None
    tier: Optional[str] = None
    is_active: Optional[StrictBool] = None


class NotificationsRequest(CamelRequest):
    email: Optional[StrictBool] = None
    sms: Optional[StrictBool] = None


class PreferencesRequest(CamelRequest):
    theme: Optional[str] = None
    notifications: Optional[NotificationsRequest] = None


class ProfileUpdateRequest(CamelRequest):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    preferences: Optional[PreferencesRequest] = None


class AdminUpdateRequest(ProfileUpdateRequest):
    roles: Optional[list[str]] = None
    tier: Optional[str] = None
    is_active: Optional[StrictBool] = None
    is_email_verified: Optional[StrictBool] = None


class PasswordChangeRequest(CamelRequest):
    current_password: Optional[str] = None
    new_password: Optional[str] = None


class PasswordResetRequest(CamelRequest):
    new_password: Optional[str] = None


class AccountResponse(CamelResponse):
    """Response schema for a single account. The password hash is never exposed."""

    account_id: str = Field(serialization_alias="id")
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    roles: list[str]
    tier: Tier
    is_active: bool
    is_email_verified: bool
    preferences: dict = Field(default_factory=dict)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileResponse(AccountResponse):
    """Account with its owned collections."""

    addresses: list[AddressResponse] = Field(default_factory=list)
    payment_methods: list[PaymentMethodResponse] = Field(default_factory=list)
    wishlist: list[WishlistItemResponse] = Field(default_factory=list)


class AccountListResponse(CamelResponse):
    """Response schema for listing accounts."""

    items: list[AccountResponse]
    count: int
    limit: int
    offset: int


class MessageResponse(CamelResponse):
    message: str


class AccountStatsResponse(CamelResponse):
    total: int
    active: int
    new_this_month: int
    new_last_month: int
    growth: float


class RecentUserResponse(CamelResponse):
    """Compact account row for the admin dashboard."""

    account_id: str = Field(serialization_alias="id")
    name: str
    email: str
    role: str
    created_at: Optional[datetime] = None
