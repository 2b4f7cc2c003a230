"""Shared Pydantic configuration for domain models.

Domain models use snake_case attributes in Python and camelCase keys on the
wire, matching the shape the dashboard frontend consumes.  Both spellings
are accepted on input so stored rows can be validated directly.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Immutable base model serialised with camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
