"""Splice generated guard code back into the original text."""

from __future__ import annotations

from collections.abc import Iterable


def rewrite(source: str, replacements: Iterable[tuple[tuple[int, int], str | None]]) -> str:
    """Replace each ``(start, end)`` span of *source* with its code.

    Spans are offsets into the original *source* and must not overlap.
    ``None`` removes the span.  Text outside the spans is copied verbatim.
    """
    parts: list[str] = []
    cursor = 0
    for (start, end), code in sorted(replacements, key=lambda r: r[0][0]):
        if start < cursor:
            raise ValueError(f"Overlapping span {start}..{end} (previous span ends at {cursor})")
        parts.append(source[cursor:start])
        if code:
            parts.append(code)
        cursor = end
    parts.append(source[cursor:])
    return "".join(parts)
