"""Jinja2 integration.

Usage::

    from jinja2 import Environment
    env = Environment(extensions=["jinja_expects.ext.ExpectsExtension"])
    env.from_string("@expects(string $title)\\n<h1>{{ title }}</h1>").render(title="Hi")

The extension rewrites ``@expects`` annotations while the template source
is preprocessed, and installs the runtime helpers the guards call.
Compile errors surface as ``jinja2.TemplateSyntaxError``.
"""

from __future__ import annotations

from jinja2 import TemplateSyntaxError
from jinja2.ext import Extension
from jinja2.lexer import (
    TOKEN_BLOCK_BEGIN,
    TOKEN_LINESTATEMENT_BEGIN,
    TOKEN_NAME,
    TOKEN_WHITESPACE,
)

from jinja_expects.compiler import compile_expects
from jinja_expects.config import ExpectsSettings
from jinja_expects.errors import ExpectsCompileError, RawCodeForbiddenError
from jinja_expects.export.guards import GuardSyntax
from jinja_expects.runtime import install_runtime


def find_raw_code(environment, source: str, name: str | None = None,
                  filename: str | None = None) -> int | None:
    """Line number of the first ``do`` statement in *source*, or None.

    Scans the environment's own token stream: ``do`` as a line statement
    is found, ``do`` inside a comment or a raw block is not.
    """
    opened = False
    for lineno, token, value in environment.lex(source, name, filename):
        if token == TOKEN_WHITESPACE:
            continue
        if opened and token == TOKEN_NAME and value == "do":
            return lineno
        opened = token in (TOKEN_BLOCK_BEGIN, TOKEN_LINESTATEMENT_BEGIN)
    return None


class ExpectsExtension(Extension):
    """Preprocess ``@expects`` annotations into guard statements."""

    def __init__(self, environment):
        super().__init__(environment)
        environment.extend(expects_settings=ExpectsSettings())
        install_runtime(environment)

    def preprocess(self, source: str, name: str | None, filename: str | None = None) -> str:
        settings = self.environment.expects_settings
        if not settings.allow_raw_code:
            lineno = find_raw_code(self.environment, source, name, filename)
            if lineno is not None:
                e = RawCodeForbiddenError(
                    "Raw code ({% do %} statements) is not allowed in templates"
                )
                raise TemplateSyntaxError(str(e), lineno, name, filename) from e
        try:
            return compile_expects(source, settings, GuardSyntax.from_environment(self.environment))
        except ExpectsCompileError as e:
            lineno = source.count("\n", 0, e.offset) + 1 if e.offset is not None else 1
            raise TemplateSyntaxError(str(e), lineno, name, filename) from e
