"""jinja_expects export: guard code generation from declarations.

Public API::

    from jinja_expects.export import generate_guards
    code = generate_guards(declarations)
"""

from .guards import GuardSyntax, generate_guards, render_literal

__all__ = ["GuardSyntax", "generate_guards", "render_literal"]
