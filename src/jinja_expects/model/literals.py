"""Literal default values.

Only compile-time constants that render back into template source are
representable: null, int, float and string.
"""

from __future__ import annotations

import math
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NullLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["null"] = "null"

    @property
    def value(self) -> None:
        return None


class IntLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["int"] = "int"
    value: int


class FloatLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["float"] = "float"
    value: float

    @field_validator("value")
    @classmethod
    def _finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError(f"float default must be finite, got {value!r}")
        return value


class StringLiteral(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["string"] = "string"
    value: str


LiteralValue = Annotated[
    Union[NullLiteral, IntLiteral, FloatLiteral, StringLiteral],
    Field(discriminator="kind"),
]
