"""Wishlist item validation and normalization."""

from typing import Any, Mapping, Optional

from pydantic import Field, field_validator

from user_service.validation.result import Candidate, ValidationResult, blank_to_none

MAX_PRODUCT_PRICE = 999999.99

MESSAGES = {
    "product_id": "Product ID is required and must be a non-empty string (max 100 characters)",
    "product_name": "Product name is required and must be between 1 and 200 characters",
    "product_price": "Product price is required and must be a non-negative number",
    "product_image": (
        "Product image must be a valid HTTP/HTTPS URL ending with jpg, jpeg, png, gif, or webp"
    ),
    "product_category": (
        "Product category must contain only letters, numbers, spaces, hyphens, "
        "and ampersands (max 100 characters)"
    ),
    "product_brand": (
        "Product brand must contain only letters, numbers, spaces, hyphens, "
        "ampersands, and periods (max 100 characters)"
    ),
    "notes": "Notes must be less than 500 characters",
}


class WishlistItemCandidate(Candidate):
    product_id: str = Field(min_length=1, max_length=100)
    product_name: str = Field(min_length=1, max_length=200)
    product_price: float = Field(ge=0, le=MAX_PRODUCT_PRICE, allow_inf_nan=False)
    product_image: Optional[str] = Field(
        default=None,
        max_length=500,
        pattern=r"(?i)^https?://\S+\.(jpg|jpeg|png|gif|webp)$",
    )
    product_category: Optional[str] = Field(default=None, max_length=100, pattern=r"^[a-zA-Z0-9\s\-&]+$")
    product_brand: Optional[str] = Field(default=None, max_length=100, pattern=r"^[a-zA-Z0-9\s\-&.]+$")
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("product_price", mode="before")
    @classmethod
    def reject_bool(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("price must be a number")
        return value

    @field_validator("product_image", "product_category", "product_brand", "notes", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)


def validate_wishlist_item(candidate: Mapping[str, Any]) -> ValidationResult:
    return ValidationResult.from_model(WishlistItemCandidate, candidate, MESSAGES)
