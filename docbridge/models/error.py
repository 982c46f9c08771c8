"""Error types and error tracking data models."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class DocBridgeError(Exception):
    """Base class for errors that abort processing of a single file."""
    pass


class MismatchError(DocBridgeError):
    """Documented @param tags do not line up with the declared parameters."""

    def __init__(self, declared: int, documented: int, line_number: Optional[int] = None):
        self.declared = declared
        self.documented = documented
        self.line_number = line_number
        location = f" at line {line_number}" if line_number is not None else ""
        super().__init__(
            f"mismatch params and comments{location}: "
            f"{declared} declared, {documented} documented"
        )


class MalformedInputError(DocBridgeError):
    """A declaration has a structurally invalid modifier or parameter shape."""
    pass


class TranspileError(DocBridgeError):
    """The external type-stripping compiler failed."""
    pass


class ErrorRecord(BaseModel):
    """Error record for a file that failed to process."""

    file_path: str
    error_type: str
    message: str
    stack_trace: Optional[str] = None
    timestamp: datetime
