"""Locate ``@expects`` annotations in raw template text.

Two forms are recognised:

- **Expression form**: ``@expects(<parameter list>)`` on one line.  The
  closing parenthesis is found by balancing, so defaults such as
  ``'a)b'`` do not end the match early.
- **Block form**: ``@expects`` ... ``@endexpects`` spanning any number of
  lines, with ``@param``/``@var`` tag lines in between.

Scanning is pure; malformed bodies are left for the parsers to reject.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from loguru import logger


class AnnotationForm(str, Enum):
    EXPRESSION = "expression"
    BLOCK = "block"


@dataclass(frozen=True)
class Annotation:
    """One annotation occurrence and its span in the original text."""

    form: AnnotationForm
    body: str
    start: int
    end: int
    text: str


# ``@@expects`` and ``user@expects`` are not annotations.
_EXPRESSION_OPEN_RE = re.compile(r"(?<![\w@])@expects[ \t]*\(")
_BLOCK_RE = re.compile(
    r"(?<![\w@])@expects(?!\w|[ \t]*\()(?P<body>.*?)@endexpects(?!\w)",
    re.DOTALL,
)


def _find_closing_paren(source: str, open_pos: int) -> int | None:
    """Index of the parenthesis balancing the one at *open_pos*, or None.

    Quoted strings are skipped.  The search stops at the end of the line.
    """
    depth = 0
    quote: str | None = None
    i = open_pos
    while i < len(source):
        ch = source[i]
        if ch == "\n":
            return None
        if quote is not None:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return None


def _expression_annotations(source: str) -> Iterator[Annotation]:
    last_end = 0
    for m in _EXPRESSION_OPEN_RE.finditer(source):
        # an opener inside the previous occurrence (e.g. in a quoted default)
        if m.start() < last_end:
            continue
        open_pos = m.end() - 1
        close_pos = _find_closing_paren(source, open_pos)
        if close_pos is None:
            continue
        end = close_pos + 1
        last_end = end
        yield Annotation(
            form=AnnotationForm.EXPRESSION,
            body=source[open_pos + 1:close_pos],
            start=m.start(),
            end=end,
            text=source[m.start():end],
        )


def _block_annotations(source: str) -> Iterator[Annotation]:
    for m in _BLOCK_RE.finditer(source):
        yield Annotation(
            form=AnnotationForm.BLOCK,
            body=m.group("body"),
            start=m.start(),
            end=m.end(),
            text=m.group(0),
        )


def extract_annotations(source: str) -> Iterator[Annotation]:
    """Yield every annotation in *source*, left to right.

    An expression-form occurrence that overlaps a block-form span is
    part of that block and is not yielded on its own.
    """
    blocks = list(_block_annotations(source))
    expressions = []
    for ann in _expression_annotations(source):
        if any(b.start < ann.end and ann.start < b.end for b in blocks):
            logger.warning(
                "Skipping @expects(...) nested in an @expects block at offset {}",
                ann.start,
            )
            continue
        expressions.append(ann)
    yield from sorted(blocks + expressions, key=lambda a: a.start)
