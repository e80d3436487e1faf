"""Helpers called by generated guard code at render time."""

from __future__ import annotations

import builtins
from functools import lru_cache

from loguru import logger
from pydantic import ImportString, TypeAdapter, ValidationError

from jinja_expects.errors import (
    UndefinedVariableError,
    UnknownClassError,
    WrongClassError,
    WrongTypeError,
)


# ---------------------------------------------------------------------------
# Runtime kinds
# ---------------------------------------------------------------------------

_KIND_CHECKS = {
    "array": lambda v: isinstance(v, (list, tuple, dict)),
    "int": lambda v: isinstance(v, int) and not isinstance(v, bool),
    "float": lambda v: isinstance(v, float),
    "string": lambda v: isinstance(v, str),
}


def runtime_kind(value: object) -> str:
    """Name of *value*'s kind as it appears in error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    for kind, check in _KIND_CHECKS.items():
        if check(value):
            return kind
    return type(value).__name__


def is_kind(value: object, kind: str) -> bool:
    try:
        check = _KIND_CHECKS[kind]
    except KeyError:
        raise ValueError(f"Unknown primitive kind {kind!r}") from None
    return check(value)


# ---------------------------------------------------------------------------
# Classes
# ---------------------------------------------------------------------------

_IMPORT_ADAPTER = TypeAdapter(ImportString)


@lru_cache(maxsize=256)
def resolve_class(class_path: str) -> type:
    """Import the class named by a dotted path; bare names are builtins."""
    if "." not in class_path:
        obj = getattr(builtins, class_path, None)
        if obj is None:
            raise UnknownClassError(class_path, "no such builtin")
    else:
        try:
            obj = _IMPORT_ADAPTER.validate_python(class_path)
        except ValidationError as e:
            raise UnknownClassError(class_path, e.errors()[0]["msg"]) from e
    if not isinstance(obj, type):
        raise UnknownClassError(class_path, "not a class")
    return obj


def is_instance(value: object, class_path: str) -> bool:
    """``isinstance`` by class path; a path that does not resolve matches nothing."""
    try:
        cls = resolve_class(class_path)
    except UnknownClassError as e:
        logger.warning("{}; treating value as not an instance", e)
        return False
    return isinstance(value, cls)


# ---------------------------------------------------------------------------
# Raisers
# ---------------------------------------------------------------------------

def raise_undefined(name: str) -> None:
    raise UndefinedVariableError(name)


def raise_wrong_type(name: str, expected: str, value: object) -> None:
    raise WrongTypeError(name, expected, runtime_kind(value))


def raise_wrong_class(name: str, class_path: str) -> None:
    raise WrongClassError(name, class_path)
