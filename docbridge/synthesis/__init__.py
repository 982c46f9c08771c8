"""
Doc-comment synthesis engine: type description, tag synthesis, declaration
selection and source rewriting.
"""

from docbridge.synthesis.doc_comment import build_doc_comment, parse_doc_comment
from docbridge.synthesis.ledger import EditLedger, rewrite
from docbridge.synthesis.parser import parse_source
from docbridge.synthesis.selector import DeclarationSelector
from docbridge.synthesis.synthesizer import AnnotationSynthesizer
from docbridge.synthesis.type_describer import describe_type

__all__ = [
    "AnnotationSynthesizer",
    "DeclarationSelector",
    "EditLedger",
    "build_doc_comment",
    "describe_type",
    "parse_doc_comment",
    "parse_source",
    "rewrite",
]
