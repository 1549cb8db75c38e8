"""Validation result type and the pydantic glue shared by every candidate model."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic_core import PydanticCustomError

from user_service.core.exceptions import ValidationError

# Letters, spaces, hyphens, apostrophes and periods
NAME_PATTERN = r"^[a-zA-Z\s\-'.]+$"

# Error type raised by cross-field rules; ctx["errors"] carries the messages
RULE_ERROR = "rule_violation"


class Candidate(BaseModel):
    """Base for models that validate one raw candidate mapping."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


def rule_error(*messages: str) -> PydanticCustomError:
    """Error for rules that span fields; all ``messages`` are reported."""
    return PydanticCustomError(RULE_ERROR, "{summary}", {"summary": "; ".join(messages), "errors": list(messages)})


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def blank_to_none(value: Any) -> Any:
    """Before-validator for optional fields: blank strings count as absent."""
    return None if is_blank(value) else value


def lower_choice(value: Any) -> Any:
    """Before-validator for enum fields: case and surrounding spaces are ignored."""
    return value.strip().lower() if isinstance(value, str) else value


def error_messages(exc: PydanticValidationError, messages: Mapping[str, str]) -> list[str]:
    """Map pydantic errors to user-facing messages, one per failing field."""
    errors: list[str] = []
    for err in exc.errors():
        if err["type"] == RULE_ERROR:
            found = err["ctx"]["errors"]
        else:
            name = str(err["loc"][0]) if err["loc"] else ""
            found = [messages.get(name) or f"{name}: {err['msg']}"]
        errors.extend(m for m in found if m not in errors)
    return errors


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one candidate.

    Errors are accumulated, never truncated to the first failure.
    ``normalized`` is only populated when the candidate is valid and is the
    exact form the caller must persist.
    """

    valid: bool
    errors: list[str] = field(default_factory=list)
    normalized: Optional[dict[str, Any]] = None

    @classmethod
    def build(cls, errors: list[str], normalized: dict[str, Any]) -> "ValidationResult":
        if errors:
            return cls(valid=False, errors=list(errors))
        return cls(valid=True, normalized=normalized)

    @classmethod
    def from_model(
        cls,
        model: type[BaseModel],
        candidate: Mapping[str, Any],
        messages: Mapping[str, str],
        context: Optional[dict[str, Any]] = None,
        exclude_unset: bool = False,
    ) -> "ValidationResult":
        """Validate ``candidate`` with ``model``; the normalized form is its JSON-mode dump."""
        try:
            parsed = model.model_validate(dict(candidate), context=context)
        except PydanticValidationError as exc:
            return cls.build(error_messages(exc, messages), {})
        return cls.build([], parsed.model_dump(mode="json", exclude_unset=exclude_unset))

    @property
    def message(self) -> str:
        """Errors joined for user display."""
        return "; ".join(self.errors)

    def raise_for_errors(self, code: str = "VALIDATION_ERROR") -> dict[str, Any]:
        """Return the normalized mapping or raise ValidationError with every error."""
        if not self.valid:
            raise ValidationError(self.errors, code=code)
        return dict(self.normalized or {})
