"""Update dispatcher: picks the scoped write path for each collection mutation.

| Mutation                                   | Path           |
|--------------------------------------------|----------------|
| add/update that sets is_default = true     | ATOMIC_DEFAULT |
| add/update that leaves is_default alone    | TARGETED       |
| remove                                     | PULL           |

No path reads, validates or rewrites entries other than the target, apart
from the ``is_default`` column cleared by ATOMIC_DEFAULT.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping

from user_service.domain.models import Collection

# Inputs that are stored under a different field once normalized
_DERIVED_FIELDS = {"card_number": "last4"}


class WritePath(str, Enum):
    """Storage write strategies."""

    ATOMIC_DEFAULT = "ATOMIC_DEFAULT"
    TARGETED = "TARGETED"
    PULL = "PULL"


@dataclass(frozen=True)
class WritePlan:
    """Which path to take and exactly which fields to write."""

    path: WritePath
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def clears_sibling_defaults(self) -> bool:
        return self.path == WritePath.ATOMIC_DEFAULT


def _path_for(collection: Collection, fields: Mapping[str, Any]) -> WritePath:
    if collection.has_exclusive_default and fields.get("is_default") is True:
        return WritePath.ATOMIC_DEFAULT
    return WritePath.TARGETED


def plan_add(collection: Collection, normalized: Mapping[str, Any]) -> WritePlan:
    """Plan the insert of a fully normalized entry."""
    return WritePlan(path=_path_for(collection, normalized), fields=dict(normalized))


def changed_fields(partial: Mapping[str, Any], normalized: Mapping[str, Any]) -> dict[str, Any]:
    """
    Normalized values for the fields the caller supplied.

    The merged candidate was validated as a whole, but only the supplied
    fields are written; a raw card number is written as its ``last4``.
    """
    keys = {_DERIVED_FIELDS.get(k, k) for k in partial}
    return {k: normalized[k] for k in normalized if k in keys}


def plan_update(
    collection: Collection,
    partial: Mapping[str, Any],
    normalized: Mapping[str, Any],
) -> WritePlan:
    """Plan a field-scoped update of one entry."""
    fields = changed_fields(partial, normalized)
    return WritePlan(path=_path_for(collection, fields), fields=fields)


def plan_remove() -> WritePlan:
    return WritePlan(path=WritePath.PULL)
