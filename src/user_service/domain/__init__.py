"""Domain layer - pure business models with no external dependencies."""

from user_service.domain.models import (
    Account,
    Address,
    PaymentMethod,
    WishlistItem,
    Entry,
    Collection,
    PaymentType,
    PaymentProvider,
    AddressType,
    Role,
    Tier,
    ChangeAction,
)

__all__ = [
    "Account",
    "Address",
    "PaymentMethod",
    "WishlistItem",
    "Entry",
    "Collection",
    "PaymentType",
    "PaymentProvider",
    "AddressType",
    "Role",
    "Tier",
    "ChangeAction",
]
