"""Guard-code writer.

Turns ``VariableDeclaration`` models into Jinja2 statements.  For each
declaration, in order:

1. an existence guard that raises when a required variable is missing, or
   assigns the default when an optional one is;
2. a type guard (primitive kind) or class guard (``isinstance``), only when
   a type was declared.  Both skip ``none`` values.

Guards are joined by newlines; every guard after the first opens with
``{%-`` so the joining newlines never reach the rendered output.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from typing import Any

from jinja_expects.model import (
    FloatLiteral,
    IntLiteral,
    LiteralValue,
    NullLiteral,
    StringLiteral,
    VariableDeclaration,
)


# Names the runtime installs into the environment (see jinja_expects.runtime).
RAISE_UNDEFINED = "expects_raise_undefined"
RAISE_WRONG_TYPE = "expects_raise_wrong_type"
RAISE_WRONG_CLASS = "expects_raise_wrong_class"
TEST_KIND = "expects_kind"
TEST_INSTANCE = "expects_instance"


@dataclass(frozen=True)
class GuardSyntax:
    """Delimiters of the target environment."""

    block_start: str = "{%"
    block_end: str = "%}"
    variable_start: str = "{{"
    variable_end: str = "}}"

    @classmethod
    def from_environment(cls, environment: Any) -> GuardSyntax:
        return cls(
            block_start=environment.block_start_string,
            block_end=environment.block_end_string,
            variable_start=environment.variable_start_string,
            variable_end=environment.variable_end_string,
        )


# ---------------------------------------------------------------------------
# Literal rendering
# ---------------------------------------------------------------------------

def quote_string(value: str) -> str:
    """Double-quoted Jinja2 string literal that decodes back to *value*.

    The Jinja2 lexer decodes string tokens with ``unicode-escape``, so
    backslashes, quotes and control characters are escaped; anything else
    is passed through.
    """
    out = ['"']
    for ch in value:
        if ch == "\\":
            out.append("\\\\")
        elif ch == '"':
            out.append('\\"')
        elif ch == "\n":
            out.append("\\n")
        elif ch == "\r":
            out.append("\\r")
        elif ch == "\t":
            out.append("\\t")
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _render_null(_lit: NullLiteral) -> str:
    return "none"


def _render_int(lit: IntLiteral) -> str:
    return str(lit.value)


def _render_float(lit: FloatLiteral) -> str:
    return repr(lit.value)


def _render_string(lit: StringLiteral) -> str:
    return quote_string(lit.value)


_LITERAL_RENDERERS = {
    "null": _render_null,
    "int": _render_int,
    "float": _render_float,
    "string": _render_string,
}


def render_literal(lit: LiteralValue) -> str:
    return _LITERAL_RENDERERS[lit.kind](lit)


# ---------------------------------------------------------------------------
# GuardWriter
# ---------------------------------------------------------------------------

class GuardWriter:
    """Accumulates guard statements for one annotation occurrence."""

    def __init__(self, syntax: GuardSyntax | None = None) -> None:
        self.syntax = syntax or GuardSyntax()
        self._buf = StringIO()
        self._count = 0

    def getvalue(self) -> str:
        return self._buf.getvalue()

    # -- Low-level output helpers -------------------------------------------

    def _tag(self, content: str, trim_left: bool = False) -> str:
        s = self.syntax
        return f"{s.block_start}{'-' if trim_left else ''} {content} {s.block_end}"

    def _output(self, expr: str) -> str:
        s = self.syntax
        return f"{s.variable_start} {expr} {s.variable_end}"

    def _guard(self, condition: str, body: str) -> None:
        if self._count:
            self._buf.write("\n")
        self._buf.write(
            self._tag(f"if {condition}", trim_left=self._count > 0)
            + body
            + self._tag("endif")
        )
        self._count += 1

    # -- Declarations -------------------------------------------------------

    def write_declarations(self, declarations: list[VariableDeclaration]) -> None:
        for decl in declarations:
            self.write_declaration(decl)

    def write_declaration(self, decl: VariableDeclaration) -> None:
        self._write_existence_guard(decl)
        if decl.type_ref is not None:
            _TYPE_GUARD_WRITERS[decl.type_ref.kind](self, decl)

    def _write_existence_guard(self, decl: VariableDeclaration) -> None:
        name = decl.name
        absent = f"{name} is not defined or {name} is none"
        if decl.required:
            self._guard(absent, self._output(f"{RAISE_UNDEFINED}({quote_string(name)})"))
        else:
            default = render_literal(decl.default or NullLiteral())
            self._guard(absent, self._tag(f"set {name} = {default}"))

    def _write_primitive_guard(self, decl: VariableDeclaration) -> None:
        name = decl.name
        kind = quote_string(decl.type_ref.type.value)
        self._guard(
            f"{name} is not none and {name} is not {TEST_KIND}({kind})",
            self._output(f"{RAISE_WRONG_TYPE}({quote_string(name)}, {kind}, {name})"),
        )

    def _write_class_guard(self, decl: VariableDeclaration) -> None:
        name = decl.name
        path = quote_string(decl.type_ref.name)
        self._guard(
            f"{name} is not none and {name} is not {TEST_INSTANCE}({path})",
            self._output(f"{RAISE_WRONG_CLASS}({quote_string(name)}, {path})"),
        )


_TYPE_GUARD_WRITERS = {
    "primitive": GuardWriter._write_primitive_guard,
    "class": GuardWriter._write_class_guard,
}


def generate_guards(
    declarations: list[VariableDeclaration],
    syntax: GuardSyntax | None = None,
) -> str:
    """Emit the guard block for one annotation; empty for no declarations."""
    w = GuardWriter(syntax)
    w.write_declarations(declarations)
    return w.getvalue()
