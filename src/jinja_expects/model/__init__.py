"""Declaration model shared by both annotation front ends."""

from .declarations import VariableDeclaration
from .literals import (
    FloatLiteral,
    IntLiteral,
    LiteralValue,
    NullLiteral,
    StringLiteral,
)
from .types import (
    PRIMITIVE_NAMES,
    ClassTypeRef,
    IgnoredType,
    NullMarker,
    PrimitiveKind,
    PrimitiveTypeRef,
    TypeMember,
    TypeRef,
    normalize_class_path,
)

__all__ = [
    "ClassTypeRef",
    "FloatLiteral",
    "IgnoredType",
    "IntLiteral",
    "LiteralValue",
    "NullMarker",
    "NullLiteral",
    "PRIMITIVE_NAMES",
    "PrimitiveKind",
    "PrimitiveTypeRef",
    "StringLiteral",
    "TypeMember",
    "TypeRef",
    "VariableDeclaration",
    "normalize_class_path",
]
