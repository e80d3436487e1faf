"""The normalized declaration both annotation front ends produce."""

from __future__ import annotations

import re
from typing import Self

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from .literals import LiteralValue
from .types import TypeRef


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Names the Jinja2 lexer treats as operators or constants.
_RESERVED_NAMES = frozenset({
    "and", "or", "not", "in", "is", "if", "else",
    "true", "false", "none", "True", "False", "None",
})


class VariableDeclaration(BaseModel):
    """One expected template variable.

    *required* is true iff no default was supplied and the declared type
    does not admit null.  *default* is only meaningful for optional
    variables; an optional variable without one defaults to null.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    required: bool = True
    type_ref: TypeRef | None = None
    default: LiteralValue | None = None
    nullable: bool = False

    @field_validator("name")
    @classmethod
    def _identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            raise ValueError(f"{value!r} is not a valid variable name")
        if value in _RESERVED_NAMES:
            raise ValueError(f"{value!r} is a reserved word")
        return value

    @model_validator(mode="after")
    def _default_implies_optional(self) -> Self:
        if self.default is not None and self.required:
            raise ValueError(
                f"${self.name} has a default value and cannot be required"
            )
        return self
