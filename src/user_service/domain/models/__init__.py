"""Domain models package."""

from typing import Union

from user_service.domain.models.enums import (
    Collection,
    PaymentType,
    PaymentProvider,
    AddressType,
    Role,
    Tier,
    ChangeAction,
    Theme,
)
from user_service.domain.models.account import Account
from user_service.domain.models.entries import Address, PaymentMethod, WishlistItem

Entry = Union[Address, PaymentMethod, WishlistItem]

__all__ = [
    "Collection",
    "PaymentType",
    "PaymentProvider",
    "AddressType",
    "Role",
    "Tier",
    "ChangeAction",
    "Theme",
    "Account",
    "Address",
    "PaymentMethod",
    "WishlistItem",
    "Entry",
]
