"""Owned collection entries: addresses, payment methods and wishlist items."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Optional


class EntryFields:
    """Shared behaviour for entries embedded in an account."""

    # Storable fields, in the order they are validated and persisted
    FIELDS: ClassVar[tuple[str, ...]] = ()

    def stored_fields(self) -> dict[str, Any]:
        """Return the storable fields (no ids, no timestamps)."""
        return {name: getattr(self, name) for name in self.FIELDS}


@dataclass
class Address(EntryFields):
    """Shipping/billing address."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "type",
        "address_line1",
        "address_line2",
        "city",
        "state",
        "zip_code",
        "country",
        "phone",
        "is_default",
    )

    entry_id: str
    account_id: str
    address_line1: str
    city: str
    state: str
    zip_code: str
    type: str = "home"
    address_line2: Optional[str] = None
    country: str = "United States"
    phone: Optional[str] = None
    is_default: bool = False
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)


@dataclass
class PaymentMethod(EntryFields):
    """
    Stored payment method.

    Only the masked ``last4`` of a card is kept; expiry is optional and only
    meaningful for card-based types. Entries written under older rules (e.g.
    an expiry now in the past) stay readable as-is.
    """

    FIELDS: ClassVar[tuple[str, ...]] = (
        "type",
        "provider",
        "last4",
        "expiry_month",
        "expiry_year",
        "cardholder_name",
        "is_default",
        "is_active",
        "nickname",
    )

    entry_id: str
    account_id: str
    type: str
    provider: str
    last4: str
    cardholder_name: str
    expiry_month: Optional[int] = None
    expiry_year: Optional[int] = None
    is_default: bool = False
    is_active: bool = True
    nickname: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)


@dataclass
class WishlistItem(EntryFields):
    """Product saved to the account's wishlist."""

    FIELDS: ClassVar[tuple[str, ...]] = (
        "product_id",
        "product_name",
        "product_price",
        "product_image",
        "product_category",
        "product_brand",
        "notes",
    )

    entry_id: str
    account_id: str
    product_id: str
    product_name: str
    product_price: float
    product_image: Optional[str] = None
    product_category: Optional[str] = None
    product_brand: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
