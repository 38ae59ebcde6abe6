"""
Shared configuration for domain models.

Legacy workout records and the unified schema are exchanged as camelCase JSON,
so every model serializes by alias while still accepting snake_case names.
"""

from typing import Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Durations, calories and intensities arrive as ints or floats from JSON.
Number = Union[int, float]


class DomainModel(BaseModel):
    """Immutable value object with camelCase wire aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Dump to the plain JSON-compatible camelCase shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
