"""Shared test helpers for the jinja_expects test suite."""

from jinja2 import Environment

from jinja_expects.compiler import compile_expects
from jinja_expects.config import ExpectsSettings
from jinja_expects.model import (
    ClassTypeRef,
    IntLiteral,
    PrimitiveKind,
    PrimitiveTypeRef,
    StringLiteral,
)


def make_env(**settings) -> Environment:
    """Environment with the extension loaded and the given settings."""
    env = Environment(extensions=["jinja_expects.ext.ExpectsExtension"])
    if settings:
        env.expects_settings = ExpectsSettings(**settings)
    return env


def render(source: str, **context) -> str:
    """Compile and render *source* through a default environment."""
    return make_env().from_string(source).render(**context)


def compile_source(source: str, **settings) -> str:
    """Run the core rewriter with explicit settings."""
    return compile_expects(source, ExpectsSettings(**settings))


def prim(kind: str) -> PrimitiveTypeRef:
    """Shorthand for PrimitiveTypeRef(type=PrimitiveKind(kind))."""
    return PrimitiveTypeRef(type=PrimitiveKind(kind))


def cls(name: str) -> ClassTypeRef:
    return ClassTypeRef(name=name)


def lit(value):
    """Wrap an int or str in its literal model."""
    if isinstance(value, int):
        return IntLiteral(value=value)
    return StringLiteral(value=value)
