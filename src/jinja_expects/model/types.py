"""Type references for expected template variables.

A declaration's type is either one of a closed set of primitive kinds,
checked by runtime kind, or a reference to a class checked with
``isinstance``.  The two are a discriminated union keyed on ``kind``.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Primitives
# ---------------------------------------------------------------------------

class PrimitiveKind(str, Enum):
    """Runtime kinds the guard runtime knows how to check."""

    ARRAY = "array"
    INT = "int"
    FLOAT = "float"
    STRING = "string"


PRIMITIVE_NAMES = frozenset(k.value for k in PrimitiveKind)


# ---------------------------------------------------------------------------
# Type references
# ---------------------------------------------------------------------------

_CLASS_PATH_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class PrimitiveTypeRef(BaseModel):
    """Reference to a primitive kind (array, int, float, string)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    type: PrimitiveKind


class ClassTypeRef(BaseModel):
    """Reference to a class or interface by dotted import path."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["class"] = "class"
    name: str

    @field_validator("name")
    @classmethod
    def _well_formed(cls, value: str) -> str:
        if not _CLASS_PATH_RE.match(value):
            raise ValueError(f"malformed class path {value!r}")
        return value


TypeRef = Annotated[
    Union[PrimitiveTypeRef, ClassTypeRef],
    Field(discriminator="kind"),
]


def normalize_class_path(raw: str) -> str:
    """Turn ``\\App\\Models\\User`` or ``app.models.User`` into a dotted path."""
    return raw.lstrip("\\").replace("\\", ".")


# ---------------------------------------------------------------------------
# Union members (docblock type expressions)
# ---------------------------------------------------------------------------

class NullMarker(BaseModel):
    """The ``null`` member of a union such as ``int|null``."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["null"] = "null"


class IgnoredType(BaseModel):
    """A pseudo-type (``mixed``, ``bool``, ...) that produces no guard."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ignored"] = "ignored"
    name: str


TypeMember = Annotated[
    Union[PrimitiveTypeRef, ClassTypeRef, NullMarker, IgnoredType],
    Field(discriminator="kind"),
]
