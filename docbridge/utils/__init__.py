"""
Utility modules for the TypeScript doc bridge.
"""

from docbridge.utils.logging import (
    get_logger,
    setup_logging,
    LogContext,
    log_file_annotated,
    log_error_with_context,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "log_file_annotated",
    "log_error_with_context",
]
