"""Shared schema configuration for the camelCase wire format."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelRequest(BaseModel):
    """
    Inbound payload.

    Fields carry their wire types only. Domain rules and normalization live
    in the validation candidate models, which report every violation at
    once. Unknown keys are ignored.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    def supplied(self) -> dict[str, Any]:
        """Snake_case mapping of the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


class CamelResponse(BaseModel):
    """Outbound payload, serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
