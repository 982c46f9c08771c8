"""
Services for the TypeScript doc bridge.
"""

from docbridge.services.annotator import Annotator, annotate_source
from docbridge.services.transpiler import (
    PassthroughTranspiler,
    SubprocessTranspiler,
    Transpiler,
    create_transpiler,
)

__all__ = [
    "Annotator",
    "annotate_source",
    "PassthroughTranspiler",
    "SubprocessTranspiler",
    "Transpiler",
    "create_transpiler",
]
