"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from user_service.domain.models.enums import Role, Theme, Tier


def default_preferences() -> dict:
    return {"theme": Theme.LIGHT.value, "notifications": {"email": True, "sms": False}}


@dataclass
class Account:
    """
    Identity root of the user aggregate.

    Owns the address, payment method and wishlist collections; deleting the
    account deletes all of them.
    """

    account_id: str
    email: str
    password_hash: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    roles: list[str] = field(default_factory=lambda: [Role.CUSTOMER.value])
    tier: Tier = Tier.BASIC
    is_active: bool = True
    is_email_verified: bool = False
    preferences: dict = field(default_factory=default_preferences)
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.tier, str):
            self.tier = Tier(self.tier)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN.value in self.roles

    @property
    def has_local_password(self) -> bool:
        return bool(self.password_hash)
