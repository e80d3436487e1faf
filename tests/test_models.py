"""Tests for Pydantic model validators on the declaration models."""

import pytest
from pydantic import TypeAdapter, ValidationError

from conftest import cls, lit, prim

from jinja_expects.model import (
    ClassTypeRef,
    FloatLiteral,
    IntLiteral,
    LiteralValue,
    NullLiteral,
    VariableDeclaration,
    normalize_class_path,
)


# ===========================================================================
# VariableDeclaration
# ===========================================================================


class TestVariableDeclaration:
    def test_defaults(self):
        d = VariableDeclaration(name="title")
        assert d.required is True
        assert d.type_ref is None
        assert d.default is None
        assert d.nullable is False

    def test_optional_with_default(self):
        d = VariableDeclaration(name="age", required=False, default=lit(18), type_ref=prim("int"))
        assert d.default == IntLiteral(value=18)

    def test_invalid_identifier(self):
        with pytest.raises(ValidationError, match="not a valid variable name"):
            VariableDeclaration(name="2fast")

    def test_reserved_name(self):
        """Names the Jinja2 lexer treats as keywords cannot be declared."""
        with pytest.raises(ValidationError, match="reserved word"):
            VariableDeclaration(name="none")

    def test_python_keyword_allowed(self):
        """Python keywords that Jinja2 does not reserve are fine."""
        assert VariableDeclaration(name="class").name == "class"

    def test_default_requires_optional(self):
        with pytest.raises(ValidationError, match="cannot be required"):
            VariableDeclaration(name="age", default=lit(18))

    def test_frozen(self):
        d = VariableDeclaration(name="a")
        with pytest.raises(ValidationError):
            d.name = "b"

    def test_type_ref_from_dict(self):
        d = VariableDeclaration.model_validate(
            {"name": "u", "type_ref": {"kind": "class", "name": "app.User"}}
        )
        assert d.type_ref == cls("app.User")


# ===========================================================================
# Type references and literals
# ===========================================================================


class TestClassTypeRef:
    def test_dotted(self):
        assert ClassTypeRef(name="app.models.User").name == "app.models.User"

    def test_malformed(self):
        with pytest.raises(ValidationError, match="malformed class path"):
            ClassTypeRef(name="app..User")

    def test_normalize_class_path(self):
        assert normalize_class_path(r"\App\Models\User") == "App.Models.User"
        assert normalize_class_path("app.User") == "app.User"


class TestLiterals:
    def test_null_value(self):
        assert NullLiteral().value is None

    def test_float_must_be_finite(self):
        with pytest.raises(ValidationError, match="finite"):
            FloatLiteral(value=float("nan"))

    def test_discriminated_union(self):
        adapter = TypeAdapter(LiteralValue)
        assert adapter.validate_python({"kind": "float", "value": 2}) == FloatLiteral(value=2.0)
        assert adapter.validate_python({"kind": "null"}) == NullLiteral()
