"""jinja_expects: declare the variables a Jinja2 template expects.

Users import everything from this flat namespace::

    from jinja_expects import ExpectsExtension, ExpectsSettings, compile_expects
"""

from .compiler import (
    compile_expects,
    extract_annotations,
    parse_docblock,
    parse_signature,
    rewrite,
)
from .config import ExpectsSettings
from .errors import (
    AnnotationSyntaxError,
    ExpectsCompileError,
    ExpectsError,
    ExpectsRuntimeError,
    InvalidDefaultError,
    RawCodeForbiddenError,
    UndefinedVariableError,
    UnknownClassError,
    WrongClassError,
    WrongTypeError,
)
from .export import GuardSyntax, generate_guards
from .ext import ExpectsExtension
from .model import VariableDeclaration
from .runtime import install_runtime

__all__ = [
    "AnnotationSyntaxError",
    "ExpectsCompileError",
    "ExpectsError",
    "ExpectsExtension",
    "ExpectsRuntimeError",
    "ExpectsSettings",
    "GuardSyntax",
    "InvalidDefaultError",
    "RawCodeForbiddenError",
    "UndefinedVariableError",
    "UnknownClassError",
    "VariableDeclaration",
    "WrongClassError",
    "WrongTypeError",
    "compile_expects",
    "extract_annotations",
    "generate_guards",
    "install_runtime",
    "parse_docblock",
    "parse_signature",
    "rewrite",
]
