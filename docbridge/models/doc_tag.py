"""Documentation tag data models."""

from typing import List

from pydantic import BaseModel, Field


class DocTag(BaseModel):
    """A single ``@name value`` entry of a documentation comment."""

    name: str = Field(..., description="Tag name without the leading '@'")
    value: str = Field("", description="Tag text, e.g. '{number} count'")

    def has_explicit_type(self) -> bool:
        """Return True if the value starts with a ``{type}`` marker."""
        return self.value.startswith("{")


class PendingProperty(BaseModel):
    """A class field waiting to be materialized as a constructor assignment."""

    name: str
    tags: List[DocTag] = Field(default_factory=list)
