"""Payment method validation and normalization."""

from datetime import date
from typing import Any, Mapping, Optional

from pydantic import Field, StrictBool, ValidationInfo, field_validator, model_validator

from user_service.core.timezone import today_utc
from user_service.domain.models.enums import PaymentProvider, PaymentType
from user_service.validation.result import (
    NAME_PATTERN,
    Candidate,
    ValidationResult,
    blank_to_none,
    is_blank,
    lower_choice,
    rule_error,
)

CARD_BASED_TYPES = frozenset({
    PaymentType.CREDIT_CARD,
    PaymentType.DEBIT_CARD,
    PaymentType.APPLE_PAY,
    PaymentType.GOOGLE_PAY,
})
CARD_PROVIDERS = frozenset({
    PaymentProvider.VISA,
    PaymentProvider.MASTERCARD,
    PaymentProvider.AMEX,
    PaymentProvider.DISCOVER,
    PaymentProvider.OTHER,
})

# Raw inputs that are read but never stored
SENSITIVE_FIELDS = frozenset({"card_number", "cvv", "cvc", "billing_address"})

DEFAULT_HORIZON_YEARS = 20

MESSAGES = {
    "type": "Payment type must be one of: " + ", ".join(t.value for t in PaymentType),
    "provider": "Provider must be one of: " + ", ".join(p.value for p in PaymentProvider),
    "last4": "Last 4 digits must be exactly 4 numeric characters",
    "expiry_month": "Expiry month must be a number between 1 and 12",
    "expiry_year": "Expiry year must be a whole number",
    "cardholder_name": (
        "Cardholder name is required and must contain only letters, spaces, "
        "hyphens, apostrophes, and periods"
    ),
    "is_default": "isDefault must be a boolean value",
    "is_active": "isActive must be a boolean value",
    "nickname": "Payment method nickname must be less than 50 characters",
}


def derive_last4(card_number: Any) -> Optional[str]:
    """Trailing four characters of a raw card number, separators removed."""
    if isinstance(card_number, int) and not isinstance(card_number, bool):
        card_number = str(card_number)
    if not isinstance(card_number, str):
        return None
    digits = card_number.replace(" ", "").replace("-", "")
    return digits[-4:] if digits else None


def type_provider_errors(payment_type: PaymentType, provider: PaymentProvider) -> list[str]:
    """Combinations of type and provider that are rejected."""
    errors = []
    if payment_type == PaymentType.PAYPAL and provider != PaymentProvider.PAYPAL:
        errors.append("PayPal payment type must use PayPal as provider")
    if payment_type == PaymentType.APPLE_PAY and provider not in CARD_PROVIDERS:
        errors.append("Apple Pay must be associated with a valid card provider")
    if payment_type == PaymentType.GOOGLE_PAY and provider not in CARD_PROVIDERS:
        errors.append("Google Pay must be associated with a valid card provider")
    if payment_type == PaymentType.BANK_TRANSFER and provider != PaymentProvider.OTHER:
        errors.append('Bank transfer should use "other" as provider')
    return errors


def is_expiry_in_past(month: int, year: int, today: date) -> bool:
    """Month granularity: a card expiring this month is still valid."""
    return (year, month) < (today.year, today.month)


class PaymentMethodCandidate(Candidate):
    """
    A payment method as it will be stored.

    A raw ``card_number`` is reduced to ``last4`` before field validation and
    is not a field; CVV keys are ignored. Expiry rules need ``today`` and
    ``horizon_years`` in the validation context.
    """

    type: PaymentType
    provider: PaymentProvider
    last4: str = Field(pattern=r"^\d{4}$")
    expiry_month: Optional[int] = Field(default=None, ge=1, le=12)
    expiry_year: Optional[int] = None
    cardholder_name: str = Field(min_length=1, max_length=100, pattern=NAME_PATTERN)
    is_default: StrictBool = False
    is_active: StrictBool = True
    nickname: Optional[str] = Field(default=None, max_length=50)

    @model_validator(mode="before")
    @classmethod
    def derive_masked_number(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        card_number = data.get("card_number")
        data = {k: v for k, v in data.items() if k not in SENSITIVE_FIELDS}
        if not is_blank(card_number):
            data["last4"] = derive_last4(card_number)
        return data

    @field_validator("type", "provider", mode="before")
    @classmethod
    def normalize_choice(cls, value: Any) -> Any:
        return lower_choice(value)

    @field_validator("expiry_month", "expiry_year", "nickname", mode="before")
    @classmethod
    def blank_is_absent(cls, value: Any) -> Any:
        return blank_to_none(value)

    @model_validator(mode="after")
    def check_combinations(self, info: ValidationInfo) -> "PaymentMethodCandidate":
        context = info.context or {}
        today = context.get("today") or today_utc()
        horizon = context.get("horizon_years", DEFAULT_HORIZON_YEARS)

        errors = type_provider_errors(self.type, self.provider)
        if self.type in CARD_BASED_TYPES:
            month, year = self.expiry_month, self.expiry_year
            if month is None:
                errors.append(MESSAGES["expiry_month"])
            if year is None or not today.year <= year <= today.year + horizon:
                errors.append(f"Expiry year must be between {today.year} and {today.year + horizon}")
            if month is not None and year is not None and year <= today.year + horizon:
                if is_expiry_in_past(month, year, today):
                    errors.append("Card expiry date cannot be in the past")
        if errors:
            raise rule_error(*errors)
        return self


def validate_payment_method(
    candidate: Mapping[str, Any],
    today: Optional[date] = None,
    horizon_years: int = DEFAULT_HORIZON_YEARS,
) -> ValidationResult:
    """
    Validate a payment method candidate.

    A raw ``card_number`` takes precedence over ``last4``; neither it nor any
    CVV is part of the normalized output. Expiry rules only apply to
    card-based types.
    """
    return ValidationResult.from_model(
        PaymentMethodCandidate,
        candidate,
        MESSAGES,
        context={"today": today or today_utc(), "horizon_years": horizon_years},
    )
