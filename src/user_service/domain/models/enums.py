"""Enumerations for domain models."""

from enum import Enum


class Collection(str, Enum):
    """Entry collections owned by an account."""

    ADDRESSES = "addresses"
    PAYMENT_METHODS = "payment_methods"
    WISHLIST = "wishlist"

    @property
    def has_exclusive_default(self) -> bool:
        """True when at most one entry of the collection may be the default."""
        return self in (Collection.ADDRESSES, Collection.PAYMENT_METHODS)


class PaymentType(str, Enum):
    """Payment method classifications."""

    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    PAYPAL = "paypal"
    APPLE_PAY = "apple_pay"
    GOOGLE_PAY = "google_pay"
    BANK_TRANSFER = "bank_transfer"
    DIGITAL_WALLET = "digital_wallet"
    OTHER = "other"


class PaymentProvider(str, Enum):
    """Payment providers."""

    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    DISCOVER = "discover"
    PAYPAL = "paypal"
    STRIPE = "stripe"
    SQUARE = "square"
    OTHER = "other"


class AddressType(str, Enum):
    """Address classifications."""

    HOME = "home"
    WORK = "work"
    BILLING = "billing"
    SHIPPING = "shipping"
    OTHER = "other"


class Role(str, Enum):
    """Account roles."""

    CUSTOMER = "customer"
    ADMIN = "admin"
    VENDOR = "vendor"
    MODERATOR = "moderator"
    SUPPORT = "support"


class Tier(str, Enum):
    """Loyalty tiers."""

    BASIC = "basic"
    PREMIUM = "premium"
    GOLD = "gold"
    PLATINUM = "platinum"


class ChangeAction(str, Enum):
    """Mutations reported to the event sink."""

    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


class Theme(str, Enum):
    """UI themes a user can pick."""

    LIGHT = "light"
    DARK = "dark"
    AUTO = "auto"
