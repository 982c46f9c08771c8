"""Data models for the TypeScript doc bridge."""

from .declaration import AccessModifier, DeclarationKind
from .doc_tag import DocTag, PendingProperty
from .edit import Edit, TargetNode
from .error import (
    DocBridgeError,
    ErrorRecord,
    MalformedInputError,
    MismatchError,
    TranspileError,
)

__all__ = [
    # Declaration models
    "AccessModifier",
    "DeclarationKind",
    # Tag models
    "DocTag",
    "PendingProperty",
    # Ledger models
    "Edit",
    "TargetNode",
    # Error models
    "DocBridgeError",
    "ErrorRecord",
    "MalformedInputError",
    "MismatchError",
    "TranspileError",
]
