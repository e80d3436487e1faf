"""Parser for the block form::

    @expects
        @param string $title Page title
        @param int $perPage Rows per page (default: 25)
        @var ?app.models.User $user
    @endexpects

One declaration per ``@param`` or ``@var`` tag.  Other tags and free text
are ignored; lines that do not start a tag continue the previous tag's
description.  Comment decoration (``/**``, ``*``, ``*/``) is stripped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

from jinja_expects.errors import ParseError
from jinja_expects.model import (
    ClassTypeRef,
    IgnoredType,
    NullMarker,
    PrimitiveKind,
    PrimitiveTypeRef,
    TypeMember,
    VariableDeclaration,
    normalize_class_path,
)

from ._normalize import (
    check_unique,
    coerce_default,
    make_declaration,
    reduce_type_members,
)


_DECLARING_TAGS = frozenset({"param", "var"})

_TAG_RE = re.compile(r"^@(?P<tag>[A-Za-z][\w-]*)(?P<rest>.*)$", re.DOTALL)
_VARIABLE_RE = re.compile(r"^\$(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?=\s|$)")
_DEFAULT_MARKER_RE = re.compile(r"\(default:(?P<value>[^)]*)\)", re.IGNORECASE)
_CLASS_NAME_RE = re.compile(
    r"^\\?[A-Za-z_][A-Za-z0-9_]*(?:(?:\\|\.)[A-Za-z_][A-Za-z0-9_]*)*$"
)
_GENERIC_ARRAY_RE = re.compile(
    r"^(?:non-empty-)?(?:array|list)(?:<.*>|\{.*\})$", re.DOTALL
)

_PRIMITIVE_ALIASES: dict[str, PrimitiveKind] = {
    "int": PrimitiveKind.INT,
    "integer": PrimitiveKind.INT,
    "float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.FLOAT,
    "string": PrimitiveKind.STRING,
    "array": PrimitiveKind.ARRAY,
    "list": PrimitiveKind.ARRAY,
    "non-empty-array": PrimitiveKind.ARRAY,
    "non-empty-list": PrimitiveKind.ARRAY,
}

_PSEUDO_TYPES = frozenset({
    "mixed", "bool", "boolean", "true", "false", "callable", "iterable",
    "object", "resource", "scalar", "void",
})

_OPENERS = {"<": ">", "{": "}", "(": ")", "[": "]"}


@dataclass
class DocTag:
    """A raw tag: ``@<name> <rest>``, with continuation lines folded in."""

    name: str
    rest: str
    line: int


# ---------------------------------------------------------------------------
# Lines and tags
# ---------------------------------------------------------------------------

def _strip_decoration(line: str) -> str:
    line = line.strip()
    if line.startswith("/**"):
        line = line[3:]
    if line.endswith("*/"):
        line = line[:-2]
    line = line.strip()
    if line.startswith("*"):
        line = line[1:]
    return line.strip()


def split_tags(body: str) -> list[DocTag]:
    tags: list[DocTag] = []
    for lineno, raw in enumerate(body.splitlines(), start=1):
        line = _strip_decoration(raw)
        if not line:
            continue
        m = _TAG_RE.match(line)
        if m is not None:
            tags.append(DocTag(m.group("tag").lower(), m.group("rest"), lineno))
        elif tags:
            tags[-1].rest += " " + line
    return tags


# ---------------------------------------------------------------------------
# Type expressions
# ---------------------------------------------------------------------------

def _scan_type(text: str, line: int) -> tuple[str, str]:
    """Split *text* into a leading type expression and the remainder.

    The type ends at the first whitespace outside brackets, so shapes such
    as ``array{id: int, name: string}`` stay in one piece.
    """
    stack: list[str] = []
    for i, ch in enumerate(text):
        if ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _OPENERS.values():
            if not stack or stack.pop() != ch:
                raise ParseError(f"Unbalanced {ch!r} in type on line {line}")
        elif ch.isspace() and not stack:
            return text[:i], text[i:]
    if stack:
        raise ParseError(f"Unclosed {stack[-1]!r} in type on line {line}")
    return text, ""


def _split_union(expr: str) -> list[str]:
    members: list[str] = []
    depth = 0
    current = ""
    for ch in expr:
        if ch in _OPENERS:
            depth += 1
        elif ch in _OPENERS.values():
            depth -= 1
        if ch == "|" and depth == 0:
            members.append(current)
            current = ""
        else:
            current += ch
    members.append(current)
    return members


def parse_type_expression(expr: str, line: int = 0) -> list[TypeMember]:
    """Decompose a (possibly union) type expression into members."""
    members: list[TypeMember] = []
    for raw in _split_union(expr):
        member = raw.strip()
        if not member:
            raise ParseError(f"Empty member in type {expr!r} on line {line}")
        if member.startswith("?"):
            members.append(NullMarker())
            member = member[1:]
        lowered = member.lower()

        if lowered == "null":
            members.append(NullMarker())
        elif lowered in _PRIMITIVE_ALIASES:
            members.append(PrimitiveTypeRef(type=_PRIMITIVE_ALIASES[lowered]))
        elif member.endswith("[]") or _GENERIC_ARRAY_RE.match(lowered):
            members.append(PrimitiveTypeRef(type=PrimitiveKind.ARRAY))
        elif lowered in _PSEUDO_TYPES:
            members.append(IgnoredType(name=lowered))
        elif member.startswith("(") and member.endswith(")"):
            members.extend(parse_type_expression(member[1:-1], line))
        elif _CLASS_NAME_RE.match(member):
            members.append(ClassTypeRef(name=normalize_class_path(member)))
        else:
            raise ParseError(f"Invalid type {member!r} on line {line}")
    return members


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

def _declaration_from_tag(tag: DocTag) -> VariableDeclaration:
    rest = tag.rest.strip()
    if not rest:
        raise ParseError(f"@{tag.name} tag on line {tag.line} is empty")

    members: list[TypeMember] = []
    if not rest.startswith("$"):
        type_expr, rest = _scan_type(rest, tag.line)
        members = parse_type_expression(type_expr, tag.line)
        rest = rest.strip()

    m = _VARIABLE_RE.match(rest)
    if m is None:
        raise ParseError(
            f"@{tag.name} tag on line {tag.line} must name a variable ($name)"
        )
    name = m.group("name")
    description = rest[m.end():]

    type_ref, nullable = reduce_type_members(members)

    marker = _DEFAULT_MARKER_RE.search(description)
    default = None
    if marker is not None:
        default = coerce_default(marker.group("value").strip(), type_ref)

    return make_declaration(
        name,
        type_ref=type_ref,
        nullable=nullable,
        required=marker is None and not nullable,
        default=default,
    )


def parse_docblock(body: str) -> list[VariableDeclaration]:
    """Parse a block-form body into declarations, in source order."""
    declarations = []
    for tag in split_tags(body):
        if tag.name not in _DECLARING_TAGS:
            logger.debug("Ignoring @{} tag on line {}", tag.name, tag.line)
            continue
        declarations.append(_declaration_from_tag(tag))
    check_unique(declarations)
    return declarations
