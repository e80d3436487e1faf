"""jinja_expects compiler: annotation extraction, parsing and rewriting."""

from ._compiler import compile_expects, parse_annotation
from ._docblock import parse_docblock, parse_type_expression
from ._extract import Annotation, AnnotationForm, extract_annotations
from ._normalize import classify_type, coerce_default, literal_from_default, reduce_type_members
from ._rewrite import rewrite
from ._signature import parse_signature

__all__ = [
    "Annotation",
    "AnnotationForm",
    "classify_type",
    "coerce_default",
    "compile_expects",
    "extract_annotations",
    "literal_from_default",
    "parse_annotation",
    "parse_docblock",
    "parse_signature",
    "parse_type_expression",
    "reduce_type_members",
    "rewrite",
]
