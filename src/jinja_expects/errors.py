"""Exception hierarchy.

Compile-time errors are raised while a template is being preprocessed and
abort compilation of that document.  Runtime errors are raised by the
generated guard code while the compiled template renders.
"""

from __future__ import annotations


class ExpectsError(Exception):
    """Base class for every error raised by jinja_expects."""


# ---------------------------------------------------------------------------
# Compile-time
# ---------------------------------------------------------------------------

class ExpectsCompileError(ExpectsError):
    """Error while rewriting a template, with the offending annotation."""

    def __init__(self, message: str, annotation: str | None = None, offset: int | None = None):
        self.annotation = annotation
        self.offset = offset
        self.message = message
        if annotation is not None:
            message = f"{message} in {annotation!r}"
        super().__init__(message)


class AnnotationSyntaxError(ExpectsCompileError):
    """An annotation body does not parse under its grammar."""


class InvalidDefaultError(ExpectsCompileError):
    """A default value is not a null, int, float or string literal."""


class RawCodeForbiddenError(ExpectsCompileError):
    """The document contains raw code while raw code is disallowed."""


class ParseError(Exception):
    """Low-level grammar failure raised by the annotation parsers.

    Never escapes the package: the compile entry point turns it into an
    :class:`AnnotationSyntaxError` carrying the raw annotation text.
    """

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        loc = f" at position {position}" if position is not None else ""
        super().__init__(f"{message}{loc}")


# ---------------------------------------------------------------------------
# Render-time
# ---------------------------------------------------------------------------

class ExpectsRuntimeError(ExpectsError):
    """Raised by generated guard code while a template renders."""


class UndefinedVariableError(ExpectsRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"View expects ${name} variable to be defined")


class WrongTypeError(ExpectsRuntimeError):
    def __init__(self, name: str, expected: str, actual: str):
        self.name = name
        self.expected = expected
        self.actual = actual
        article = "an" if expected[:1].lower() in "aeiou" else "a"
        super().__init__(
            f"View expects ${name} variable to be {article} {expected} instead of {actual}"
        )


class WrongClassError(ExpectsRuntimeError):
    def __init__(self, name: str, class_path: str):
        self.name = name
        self.class_path = class_path
        super().__init__(
            f"View expects ${name} variable to be an instance of {class_path}"
        )


class UnknownClassError(ExpectsRuntimeError):
    """A class path that cannot be imported or does not name a class."""

    def __init__(self, class_path: str, reason: str = ""):
        self.class_path = class_path
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Cannot resolve class {class_path}{detail}")
