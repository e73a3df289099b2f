"""Shared base for wire-level Pydantic models.

Python attributes are snake_case; the JSON wire format is camelCase.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    def to_wire(self) -> dict:
        """Serialize to the camelCase JSON-compatible dict sent over the socket."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
