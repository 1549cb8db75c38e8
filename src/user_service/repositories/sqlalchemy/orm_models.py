"""SQLAlchemy ORM model definitions.

Each owned collection is its own table keyed by entry id. ``position`` keeps
insertion order. Collections with an exclusive default carry a partial unique
index so the database rejects a second default row for the same account.
"""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import declared_attr, relationship

from user_service.core.timezone import now_utc
from user_service.domain.models.account import default_preferences
from user_service.repositories.sqlalchemy.database import Base


class AccountORM(Base):
    """SQLAlchemy model for Account."""

    __tablename__ = "accounts"

    account_id = Column(String(36), primary_key=True)
    email = Column(String(100), unique=True, nullable=False)
    password_hash = Column(Text, nullable=True)
    first_name = Column(String(50), nullable=True)
    last_name = Column(String(50), nullable=True)
    display_name = Column(String(100), nullable=True)
    roles = Column(JSON, nullable=False, default=lambda: ["customer"])
    tier = Column(String(20), nullable=False, default="basic")
    is_active = Column(Boolean, nullable=False, default=True)
    is_email_verified = Column(Boolean, nullable=False, default=False)
    preferences = Column(JSON, nullable=False, default=default_preferences)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    addresses = relationship("AddressORM", order_by="AddressORM.position", passive_deletes=True)
    payment_methods = relationship(
        "PaymentMethodORM", order_by="PaymentMethodORM.position", passive_deletes=True
    )
    wishlist = relationship("WishlistItemORM", order_by="WishlistItemORM.position", passive_deletes=True)


class EntryColumns:
    """Columns shared by every owned-collection table."""

    entry_id = Column(String(36), primary_key=True)
    position = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=now_utc)

    @declared_attr
    def account_id(cls):
        return Column(
            String(36),
            ForeignKey("accounts.account_id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )


def _single_default_index(table: str) -> Index:
    return Index(
        f"uq_{table}_single_default",
        "account_id",
        unique=True,
        sqlite_where=text("is_default = 1"),
        postgresql_where=text("is_default"),
    )


class AddressORM(EntryColumns, Base):
    """SQLAlchemy model for Address."""

    __tablename__ = "addresses"
    __table_args__ = (_single_default_index("addresses"),)

    type = Column(String(20), nullable=False, default="home")
    address_line1 = Column(String(200), nullable=False)
    address_line2 = Column(String(200), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    zip_code = Column(String(20), nullable=False)
    country = Column(String(100), nullable=False, default="United States")
    phone = Column(String(20), nullable=True)
    is_default = Column(Boolean, nullable=False, default=False)


class PaymentMethodORM(EntryColumns, Base):
    """SQLAlchemy model for PaymentMethod. No column holds a raw card number or CVV."""

    __tablename__ = "payment_methods"
    __table_args__ = (_single_default_index("payment_methods"),)

    type = Column(String(30), nullable=False)
    provider = Column(String(30), nullable=False)
    last4 = Column(String(4), nullable=False)
    expiry_month = Column(Integer, nullable=True)
    expiry_year = Column(Integer, nullable=True)
    cardholder_name = Column(String(100), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    nickname = Column(String(50), nullable=True)


class WishlistItemORM(EntryColumns, Base):
    """SQLAlchemy model for WishlistItem."""

    __tablename__ = "wishlist_items"
    __table_args__ = (UniqueConstraint("account_id", "product_id", name="uq_wishlist_product"),)

    product_id = Column(String(100), nullable=False)
    product_name = Column(String(200), nullable=False)
    product_price = Column(Float, nullable=False)
    product_image = Column(String(500), nullable=True)
    product_category = Column(String(100), nullable=True)
    product_brand = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
