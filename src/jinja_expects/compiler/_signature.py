"""Parser for the expression form: ``@expects(string $title, int $age = 18)``.

The body reads like a function parameter list.  Each parameter has an
optional type hint (``?`` marks it nullable), a ``$name`` and an optional
default.  Defaults are evaluated at compile time; only null, int, float
and string literals survive normalization, but arrays, constants and
``new`` expressions are still parsed so they can be reported as invalid
defaults rather than syntax errors.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from jinja_expects.errors import ParseError
from jinja_expects.model import VariableDeclaration

from ._normalize import (
    DefaultExpression,
    check_unique,
    classify_type,
    literal_from_default,
    make_declaration,
    parse_number,
)


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    pos: int


_NAME = r"\\?[A-Za-z_][A-Za-z0-9_]*(?:(?:\\|\.)[A-Za-z_][A-Za-z0-9_]*)*"

_TOKEN_SPEC: list[tuple[str, str]] = [
    ("ws", r"\s+"),
    ("variable", r"\$[A-Za-z_][A-Za-z0-9_]*"),
    ("dollar", r"\$"),
    ("number", r"0[xX][0-9a-fA-F_]+|0[bB][01_]+|0[oO][0-7_]+"
               r"|(?:\d[\d_]*)?\.\d[\d_]*(?:[eE][+-]?\d+)?"
               r"|\d[\d_]*\.?(?:[eE][+-]?\d+)?"),
    ("string", r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\""),
    ("name", _NAME),
    ("double_colon", r"::"),
    ("arrow", r"=>"),
    ("punct", r"[?,=()\[\]+-]"),
]

_TOKEN_RE = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in _TOKEN_SPEC))


def tokenize(body: str) -> list[Token]:
    tokens: list[Token] = []
    pos = 0
    while pos < len(body):
        m = _TOKEN_RE.match(body, pos)
        if m is None:
            raise ParseError(f"Unexpected character {body[pos]!r}", pos)
        kind = m.lastgroup
        if kind != "ws":
            tokens.append(Token(kind, m.group(0), pos))
        pos = m.end()
    tokens.append(Token("eof", "", len(body)))
    return tokens


# ---------------------------------------------------------------------------
# String literals
# ---------------------------------------------------------------------------

_DOUBLE_QUOTED_ESCAPES = {
    "n": "\n", "t": "\t", "r": "\r", "v": "\v", "f": "\f",
    "e": "\x1b", "\\": "\\", "$": "$", '"': '"',
}
_DOUBLE_QUOTED_RE = re.compile(
    r"\\(?:x([0-9a-fA-F]{1,2})|u\{([0-9a-fA-F]+)\}|([0-7]{1,3})|(.))",
    re.DOTALL,
)
_SINGLE_QUOTED_RE = re.compile(r"\\([\\'])")
_MAX_CODEPOINT = 0x10FFFF


def unquote(text: str, pos: int | None = None) -> str:
    """Decode a quoted string token.

    Single-quoted strings only unescape ``\\'`` and ``\\\\``; double-quoted
    strings also understand the usual control escapes, octal ``\\NNN``,
    ``\\xHH`` and ``\\u{HHHH}``.  Unknown escapes are kept verbatim.
    """
    inner = text[1:-1]
    if text[0] == "'":
        return _SINGLE_QUOTED_RE.sub(lambda m: m.group(1), inner)

    def _replace(m: re.Match) -> str:
        hex_byte, codepoint, octal, ch = m.groups()
        if hex_byte is not None:
            return chr(int(hex_byte, 16))
        if codepoint is not None:
            value = int(codepoint, 16)
            if value > _MAX_CODEPOINT:
                raise ParseError(f"Invalid UTF-8 codepoint escape sequence {m.group(0)!r}", pos)
            return chr(value)
        if octal is not None:
            # out-of-range octal escapes wrap to one byte
            return chr(int(octal, 8) & 0xFF)
        return _DOUBLE_QUOTED_ESCAPES.get(ch, "\\" + ch)

    return _DOUBLE_QUOTED_RE.sub(_replace, inner)


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

class SignatureParser:
    """Recursive-descent parser over the token list of one body."""

    def __init__(self, body: str):
        self.tokens = tokenize(body)
        self.index = 0

    # -- Token helpers ------------------------------------------------------

    def _peek(self) -> Token:
        return self.tokens[min(self.index, len(self.tokens) - 1)]

    def _advance(self) -> Token:
        tok = self._peek()
        self.index += 1
        return tok

    def _at(self, kind: str, text: str | None = None) -> bool:
        tok = self._peek()
        return tok.kind == kind and (text is None or tok.text == text)

    def _expect(self, kind: str, text: str | None = None, what: str | None = None) -> Token:
        if not self._at(kind, text):
            tok = self._peek()
            found = repr(tok.text) if tok.kind != "eof" else "end of input"
            raise ParseError(f"Expected {what or text or kind}, found {found}", tok.pos)
        return self._advance()

    # -- Grammar ------------------------------------------------------------

    def parse(self) -> list[VariableDeclaration]:
        declarations: list[VariableDeclaration] = []
        while not self._at("eof"):
            declarations.append(self._parameter())
            if self._at("eof"):
                break
            self._expect("punct", ",", what="','")
        check_unique(declarations)
        return declarations

    def _parameter(self) -> VariableDeclaration:
        type_token: str | None = None
        if self._at("punct", "?"):
            self._advance()
            type_token = "?" + self._expect("name", what="type name after '?'").text
        elif self._at("name"):
            type_token = self._advance().text

        if self._at("dollar"):
            raise ParseError("Expected variable name after '$'", self._peek().pos)
        name = self._expect("variable", what="variable").text[1:]

        type_ref, nullable = classify_type(type_token) if type_token else (None, False)

        if not self._at("punct", "="):
            return make_declaration(name, type_ref=type_ref, nullable=nullable, required=True)

        self._advance()
        value = self._default()
        return make_declaration(
            name,
            type_ref=type_ref,
            nullable=nullable,
            required=False,
            default=literal_from_default(value),
        )

    def _default(self) -> object:
        tok = self._peek()

        if tok.kind == "punct" and tok.text in "+-":
            self._advance()
            number = self._number(self._expect("number", what="number after sign"))
            return -number if tok.text == "-" else number

        if tok.kind == "number":
            return self._number(self._advance())

        if tok.kind == "string":
            self._advance()
            return unquote(tok.text, tok.pos)

        if tok.kind == "punct" and tok.text == "[":
            self._advance()
            return self._array_items("]")

        if tok.kind == "name":
            return self._name_default()

        found = repr(tok.text) if tok.kind != "eof" else "end of input"
        raise ParseError(f"Expected default value, found {found}", tok.pos)

    @staticmethod
    def _number(tok: Token) -> int | float:
        try:
            return parse_number(tok.text)
        except ValueError as e:
            raise ParseError(f"Invalid number {tok.text!r}", tok.pos) from e

    def _name_default(self) -> object:
        name = self._advance().text
        lowered = name.lower()

        if lowered == "null":
            return None
        if lowered in ("true", "false"):
            return lowered == "true"

        if lowered == "array" and self._at("punct", "("):
            self._advance()
            return self._array_items(")")

        if lowered == "new":
            cls = self._expect("name", what="class name after 'new'").text
            if self._at("punct", "("):
                self._advance()
                self._array_items(")")
            return DefaultExpression(f"new {cls}")

        if self._at("double_colon"):
            self._advance()
            member = self._expect("name", what="constant name after '::'").text
            return DefaultExpression(f"constant {name}::{member}")

        return DefaultExpression(f"constant {name}")

    def _array_items(self, closer: str) -> list:
        items: list = []
        while not self._at("punct", closer):
            item = self._default()
            if self._at("arrow"):
                self._advance()
                item = (item, self._default())
            items.append(item)
            if self._at("punct", closer):
                break
            self._expect("punct", ",", what=f"',' or '{closer}'")
        self._advance()
        return items


def parse_signature(body: str) -> list[VariableDeclaration]:
    """Parse an expression-form body into declarations, in source order."""
    return SignatureParser(body).parse()
