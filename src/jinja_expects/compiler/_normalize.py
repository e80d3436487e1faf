"""Type classification and default-value normalization.

Shared by the signature and docblock front ends so that equivalent
declarations reach the guard writer as identical ``VariableDeclaration``
objects.
"""

from __future__ import annotations

import math
import re
from collections.abc import Iterable
from dataclasses import dataclass

from pydantic import ValidationError

from jinja_expects.errors import InvalidDefaultError, ParseError
from jinja_expects.model import (
    PRIMITIVE_NAMES,
    ClassTypeRef,
    FloatLiteral,
    IntLiteral,
    LiteralValue,
    NullLiteral,
    NullMarker,
    PrimitiveKind,
    PrimitiveTypeRef,
    StringLiteral,
    TypeMember,
    TypeRef,
    VariableDeclaration,
    normalize_class_path,
)


# ---------------------------------------------------------------------------
# Non-literal default expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DefaultExpression:
    """A syntactically valid default that is not a literal.

    *description* names the construct for the error message, e.g.
    ``"constant Foo::BAR"`` or ``"new Carbon"``.
    """

    description: str


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------

def classify_type(raw: str) -> tuple[TypeRef | None, bool]:
    """Classify a type token as primitive or class reference.

    A leading ``?`` marks the type nullable.  Only the exact lowercase
    primitive names are primitives; every other name is a class path.
    """
    nullable = raw.startswith("?")
    name = raw[1:] if nullable else raw
    if not name:
        return None, nullable
    if name in PRIMITIVE_NAMES:
        return PrimitiveTypeRef(type=PrimitiveKind(name)), nullable
    try:
        return ClassTypeRef(name=normalize_class_path(name)), nullable
    except ValidationError as e:
        raise ParseError(f"Invalid type name {name!r}") from e


def reduce_type_members(members: Iterable[TypeMember]) -> tuple[TypeRef | None, bool]:
    """Fold union members into ``(type_ref, nullable)``.

    ``null`` members set *nullable*; ignored pseudo-types leave the result
    untouched; any other member replaces the type seen so far, so the last
    one wins for ``int|string``.
    """
    type_ref: TypeRef | None = None
    nullable = False
    for member in members:
        if member.kind == "null":
            nullable = True
        elif member.kind in ("primitive", "class"):
            type_ref = member
    return type_ref, nullable


# ---------------------------------------------------------------------------
# Literals
# ---------------------------------------------------------------------------

_OCTAL_LEGACY_RE = re.compile(r"^[+-]?0[0-7]+$")


def parse_number(text: str) -> int | float:
    """Parse an int or float literal (hex, octal, binary and ``_`` allowed)."""
    cleaned = text.strip()
    if _OCTAL_LEGACY_RE.match(cleaned):
        return int(cleaned, 8)
    try:
        return int(cleaned, 0)
    except ValueError:
        pass
    if not cleaned or cleaned.lstrip("+-")[:1] not in set("0123456789."):
        raise ValueError(f"not a numeric literal: {text!r}")
    return float(cleaned)


def literal_from_default(value: object) -> LiteralValue:
    """Wrap an evaluated signature default in its literal model."""
    if value is None:
        return NullLiteral()
    if isinstance(value, bool):
        raise InvalidDefaultError(
            f"Default value {'true' if value else 'false'} is a boolean; "
            f"only null, int, float and string defaults are supported"
        )
    if isinstance(value, int):
        return IntLiteral(value=value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidDefaultError(f"Default value {value!r} is not a finite number")
        return FloatLiteral(value=value)
    if isinstance(value, str):
        return StringLiteral(value=value)
    if isinstance(value, (list, dict)):
        raise InvalidDefaultError(
            "Array defaults are not supported; "
            "only null, int, float and string defaults are supported"
        )
    if isinstance(value, DefaultExpression):
        raise InvalidDefaultError(
            f"Default value {value.description} is not a literal; "
            f"only null, int, float and string defaults are supported"
        )
    raise InvalidDefaultError(f"Unsupported default value {value!r}")


def coerce_default(text: str, type_ref: TypeRef | None) -> LiteralValue | None:
    """Coerce a ``(default:...)`` hint to the declared primitive kind.

    ``null`` is accepted for any type.  Class references and untyped
    declarations produce no default.
    """
    if text.lower() == "null":
        return NullLiteral()
    if type_ref is None or type_ref.kind != "primitive":
        return None
    if type_ref.type in (PrimitiveKind.ARRAY, PrimitiveKind.STRING):
        return StringLiteral(value=text)
    try:
        number = parse_number(text)
    except ValueError as e:
        raise InvalidDefaultError(
            f"Default value {text!r} is not a valid {type_ref.type.value}"
        ) from e
    if type_ref.type is PrimitiveKind.INT:
        if not isinstance(number, int):
            raise InvalidDefaultError(f"Default value {text!r} is not a valid int")
        return IntLiteral(value=number)
    return literal_from_default(float(number))


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def make_declaration(
    name: str,
    *,
    type_ref: TypeRef | None,
    nullable: bool,
    required: bool,
    default: LiteralValue | None = None,
) -> VariableDeclaration:
    """Build a declaration, reporting model violations as parse errors."""
    try:
        return VariableDeclaration(
            name=name,
            required=required,
            type_ref=type_ref,
            default=default,
            nullable=nullable,
        )
    except ValidationError as e:
        msg = e.errors()[0]["msg"].removeprefix("Value error, ")
        raise ParseError(msg) from e


def check_unique(declarations: list[VariableDeclaration]) -> None:
    seen: set[str] = set()
    for decl in declarations:
        if decl.name in seen:
            raise ParseError(f"Duplicate variable ${decl.name}")
        seen.add(decl.name)
