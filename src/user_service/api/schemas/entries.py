"""Pydantic schemas for address, payment method and wishlist endpoints."""

from datetime import datetime
from typing import Generic, Optional, TypeVar, Union

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt

from user_service.api.schemas.base import CamelRequest, CamelResponse


class AddressRequest(CamelRequest):
    """Address fields; used for both create and partial update."""

    type: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    is_default: Optional[StrictBool] = None


class PaymentMethodRequest(CamelRequest):
    """
    Payment method fields.

    ``card_number`` is accepted only to derive ``last4``; CVV/CVC keys are not
    declared and are dropped on parsing.
    """

    type: Optional[str] = None
    provider: Optional[str] = None
    card_number: Optional[Union[str, StrictInt]] = None
    last4: Optional[str] = None
    expiry_month: Optional[Union[StrictInt, str]] = None
    expiry_year: Optional[Union[StrictInt, str]] = None
    cardholder_name: Optional[str] = None
    is_default: Optional[StrictBool] = None
    is_active: Optional[StrictBool] = None
    nickname: Optional[str] = None


class WishlistItemRequest(CamelRequest):
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_price: Optional[Union[StrictInt, StrictFloat, str]] = None
    product_image: Optional[str] = None
    product_category: Optional[str] = None
    product_brand: Optional[str] = None
    notes: Optional[str] = None


class EntryResponse(CamelResponse):
    entry_id: str = Field(serialization_alias="id")
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AddressResponse(EntryResponse):
    type: str
    address_line1: str
    address_line2: Optional[str] = None
    city: str
    state: str
    zip_code: str
    country: str
    phone: Optional[str] = None
    is_default: bool


class PaymentMethodResponse(EntryResponse):
    type: str
    provider: str
    last4: str
    expiry_month: Optional[int] = None
    expiry_year: Optional[int] = None
    cardholder_name: str
    is_default: bool
    is_active: bool
    nickname: Optional[str] = None


class WishlistItemResponse(EntryResponse):
    product_id: str
    product_name: str
    product_price: float
    product_image: Optional[str] = None
    product_category: Optional[str] = None
    product_brand: Optional[str] = None
    notes: Optional[str] = None


ItemT = TypeVar("ItemT")


class CollectionResponse(BaseModel, Generic[ItemT]):
    """Response schema for listing one collection."""

    items: list[ItemT]
    count: int
