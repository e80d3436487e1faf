"""Compile entry point: annotations in, guard code out.

Control flow for one document:

- ``extract_annotations`` finds every occurrence of either form;
- each body goes to the parser for its form (signature or docblock);
- ``generate_guards`` renders the declarations;
- ``rewrite`` substitutes the result at the original spans.

The only inputs besides the text are the settings snapshot and the
target delimiters.  Nothing is cached between calls.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from jinja_expects.config import ExpectsSettings
from jinja_expects.errors import (
    AnnotationSyntaxError,
    InvalidDefaultError,
    ParseError,
)
from jinja_expects.export.guards import GuardSyntax, generate_guards
from jinja_expects.model import VariableDeclaration

from ._docblock import parse_docblock
from ._extract import Annotation, AnnotationForm, extract_annotations
from ._rewrite import rewrite
from ._signature import parse_signature


_PARSERS: dict[AnnotationForm, Callable[[str], list[VariableDeclaration]]] = {
    AnnotationForm.EXPRESSION: parse_signature,
    AnnotationForm.BLOCK: parse_docblock,
}


def parse_annotation(annotation: Annotation) -> list[VariableDeclaration]:
    """Parse one occurrence, attaching its text to any compile error."""
    try:
        return _PARSERS[annotation.form](annotation.body)
    except ParseError as e:
        raise AnnotationSyntaxError(
            f"Invalid @expects usage ({e})",
            annotation=annotation.text,
            offset=annotation.start,
        ) from e
    except InvalidDefaultError as e:
        if e.annotation is not None:
            raise
        raise InvalidDefaultError(
            f"Invalid @expects usage ({e.message})",
            annotation=annotation.text,
            offset=annotation.start,
        ) from e


def compile_expects(
    source: str,
    settings: ExpectsSettings | None = None,
    syntax: GuardSyntax | None = None,
) -> str:
    """Rewrite every ``@expects`` annotation in *source*.

    With the feature disabled the annotations are removed without being
    parsed.  Any compile error aborts the whole document; nothing is
    partially rewritten.
    """
    if settings is None:
        settings = ExpectsSettings()

    annotations = list(extract_annotations(source))
    if not annotations:
        return source
    logger.debug("Found {} @expects annotation(s)", len(annotations))

    if not settings.enabled:
        logger.info("@expects disabled; stripping {} annotation(s)", len(annotations))
        return rewrite(source, [((a.start, a.end), None) for a in annotations])

    replacements = []
    for annotation in annotations:
        declarations = parse_annotation(annotation)
        logger.debug(
            "@expects at offset {} declares {} variable(s)",
            annotation.start,
            len(declarations),
        )
        replacements.append(((annotation.start, annotation.end), generate_guards(declarations, syntax)))
    return rewrite(source, replacements)
