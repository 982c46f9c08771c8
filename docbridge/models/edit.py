"""Edit ledger data models."""

from typing import List

from pydantic import BaseModel, Field

from docbridge.models.declaration import DeclarationKind
from docbridge.models.doc_tag import DocTag


class Edit(BaseModel):
    """A splice against the original source bytes."""

    position: int = Field(..., ge=0, description="Byte offset where the splice starts")
    remove_length: int = Field(0, ge=0, description="Number of bytes removed at position")
    text: str = Field("", description="Replacement text inserted at position")
    sequence: int = Field(0, description="Registration order, breaks ties between inserts")


class TargetNode(BaseModel):
    """A declaration that receives a synthesized comment at its own position."""

    kind: DeclarationKind
    position: int = Field(..., ge=0, description="Byte offset the comment is inserted at")
    remove_length: int = Field(0, ge=0, description="Length of the existing doc comment at position")
    indent: str = Field("", description="Indentation of the declaration line")
    line_number: int = Field(..., ge=1)
    tags: List[DocTag] = Field(default_factory=list)
