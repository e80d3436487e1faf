"""Render-time support for generated guards.

``install_runtime(env)`` registers the globals and tests the guard code
refers to.  ``ExpectsExtension`` calls it for you.
"""

from __future__ import annotations

from typing import Any

from jinja_expects.export.guards import (
    RAISE_UNDEFINED,
    RAISE_WRONG_CLASS,
    RAISE_WRONG_TYPE,
    TEST_INSTANCE,
    TEST_KIND,
)

from ._checks import (
    is_instance,
    is_kind,
    raise_undefined,
    raise_wrong_class,
    raise_wrong_type,
    resolve_class,
    runtime_kind,
)


def install_runtime(environment: Any) -> None:
    environment.globals[RAISE_UNDEFINED] = raise_undefined
    environment.globals[RAISE_WRONG_TYPE] = raise_wrong_type
    environment.globals[RAISE_WRONG_CLASS] = raise_wrong_class
    environment.tests[TEST_KIND] = is_kind
    environment.tests[TEST_INSTANCE] = is_instance


__all__ = [
    "install_runtime",
    "is_instance",
    "is_kind",
    "raise_undefined",
    "raise_wrong_class",
    "raise_wrong_type",
    "resolve_class",
    "runtime_kind",
]
