"""Tests for the expression-form (signature) parser."""

import pytest

from conftest import cls, lit, prim

from jinja_expects.compiler import parse_signature
from jinja_expects.errors import InvalidDefaultError, ParseError
from jinja_expects.model import FloatLiteral, IntLiteral, NullLiteral, StringLiteral


# ---------------------------------------------------------------------------
# Parameters
# ---------------------------------------------------------------------------

class TestParameters:
    def test_empty(self):
        assert parse_signature("") == []
        assert parse_signature("   ") == []

    def test_untyped_required(self):
        (d,) = parse_signature("$title")
        assert d.name == "title"
        assert d.required is True
        assert d.type_ref is None
        assert d.default is None

    def test_primitive_hint(self):
        (d,) = parse_signature("string $name")
        assert d.type_ref == prim("string")
        assert d.nullable is False

    def test_all_primitives(self):
        decls = parse_signature("array $a, int $b, float $c, string $d")
        assert [d.type_ref for d in decls] == [
            prim("array"), prim("int"), prim("float"), prim("string"),
        ]

    def test_non_primitive_lowercase_is_class(self):
        (d,) = parse_signature("bool $flag")
        assert d.type_ref == cls("bool")

    def test_capitalized_primitive_name_is_class(self):
        (d,) = parse_signature("String $s")
        assert d.type_ref == cls("String")

    def test_dotted_class(self):
        (d,) = parse_signature("app.models.User $user")
        assert d.type_ref == cls("app.models.User")

    def test_namespaced_class_normalized(self):
        (d,) = parse_signature(r"\App\Models\User $user")
        assert d.type_ref == cls("App.Models.User")

    def test_nullable_hint(self):
        (d,) = parse_signature("?int $n")
        assert d.type_ref == prim("int")
        assert d.nullable is True
        # no default: still required
        assert d.required is True

    def test_source_order(self):
        decls = parse_signature("$c, $a, $b")
        assert [d.name for d in decls] == ["c", "a", "b"]

    def test_trailing_comma(self):
        assert [d.name for d in parse_signature("$a, $b,")] == ["a", "b"]

    def test_mixed_example(self):
        decls = parse_signature(r"string $name, int $age = 18, ?App\Models\User $user = null")
        assert [d.name for d in decls] == ["name", "age", "user"]
        assert [d.required for d in decls] == [True, False, False]
        assert decls[1].default == IntLiteral(value=18)
        assert decls[2].default == NullLiteral()
        assert decls[2].type_ref == cls("App.Models.User")


# ---------------------------------------------------------------------------
# Literal defaults
# ---------------------------------------------------------------------------

class TestDefaults:
    def test_int(self):
        (d,) = parse_signature("int $n = 42")
        assert d.default == lit(42)
        assert d.required is False

    def test_negative_int(self):
        (d,) = parse_signature("int $n = -5")
        assert d.default == IntLiteral(value=-5)

    def test_hex_int(self):
        (d,) = parse_signature("int $n = 0x1F")
        assert d.default == IntLiteral(value=31)

    def test_legacy_octal_int(self):
        (d,) = parse_signature("int $n = 017")
        assert d.default == IntLiteral(value=15)

    def test_float(self):
        (d,) = parse_signature("float $f = 1.5")
        assert d.default == FloatLiteral(value=1.5)

    def test_float_exponent(self):
        (d,) = parse_signature("float $f = 2e3")
        assert d.default == FloatLiteral(value=2000.0)

    def test_negative_float(self):
        (d,) = parse_signature("$f = -.25")
        assert d.default == FloatLiteral(value=-0.25)

    def test_single_quoted_string(self):
        (d,) = parse_signature("string $s = 'hello'")
        assert d.default == lit("hello")

    def test_single_quoted_escapes(self):
        (d,) = parse_signature(r"string $s = 'it\'s a \\ back\slash'")
        assert d.default == StringLiteral(value="it's a \\ back\\slash")

    def test_double_quoted_escapes(self):
        (d,) = parse_signature(r'string $s = "a\tb\n\"c\" \x41 \u{263A}"')
        assert d.default == StringLiteral(value='a\tb\n"c" A ☺')

    def test_double_quoted_unknown_escape_kept(self):
        (d,) = parse_signature(r'string $s = "\q"')
        assert d.default == StringLiteral(value="\\q")

    def test_double_quoted_octal_escapes(self):
        (d,) = parse_signature(r'string $s = "\101\012"')
        assert d.default == StringLiteral(value="A\n")

    def test_double_quoted_nul_escape(self):
        (d,) = parse_signature(r'string $s = "a\0b"')
        assert d.default == StringLiteral(value="a\x00b")

    def test_octal_escape_wraps_to_one_byte(self):
        (d,) = parse_signature(r'string $s = "\501"')
        assert d.default == StringLiteral(value="A")

    def test_null_case_insensitive(self):
        (d,) = parse_signature("$x = NULL")
        assert d.default == NullLiteral()
        assert d.required is False

    def test_untyped_default(self):
        (d,) = parse_signature("$x = 'y'")
        assert d.type_ref is None
        assert d.default == lit("y")


# ---------------------------------------------------------------------------
# Non-literal defaults
# ---------------------------------------------------------------------------

class TestInvalidDefaults:
    def test_true(self):
        with pytest.raises(InvalidDefaultError, match="boolean"):
            parse_signature("$x = true")

    def test_false(self):
        with pytest.raises(InvalidDefaultError, match="boolean"):
            parse_signature("$x = FALSE")

    def test_short_array(self):
        with pytest.raises(InvalidDefaultError, match="Array defaults"):
            parse_signature("array $x = []")

    def test_long_array(self):
        with pytest.raises(InvalidDefaultError, match="Array defaults"):
            parse_signature("array $x = array('a' => 1, 'b' => 2)")

    def test_new_expression(self):
        with pytest.raises(InvalidDefaultError, match="new Carbon"):
            parse_signature("$x = new Carbon('now')")

    def test_class_constant(self):
        with pytest.raises(InvalidDefaultError, match="constant Foo::BAR"):
            parse_signature("$x = Foo::BAR")

    def test_bare_constant(self):
        with pytest.raises(InvalidDefaultError, match="constant PHP_EOL"):
            parse_signature("$x = PHP_EOL")


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------

class TestSyntaxErrors:
    def test_missing_variable_name(self):
        with pytest.raises(ParseError, match=r"Expected variable name after '\$'"):
            parse_signature("int $")

    def test_type_only(self):
        with pytest.raises(ParseError, match="Expected variable"):
            parse_signature("int")

    def test_missing_comma(self):
        with pytest.raises(ParseError, match="Expected ','"):
            parse_signature("$a $b")

    def test_missing_default(self):
        with pytest.raises(ParseError, match="Expected default value, found end of input"):
            parse_signature("$a =")

    def test_unexpected_character(self):
        with pytest.raises(ParseError, match="Unexpected character ';'"):
            parse_signature("$a;")

    def test_unterminated_array(self):
        with pytest.raises(ParseError):
            parse_signature("$a = [1, 2")

    def test_bad_number(self):
        with pytest.raises(ParseError, match="Invalid number"):
            parse_signature("$a = 1__0")

    def test_duplicate_name(self):
        with pytest.raises(ParseError, match=r"Duplicate variable \$a"):
            parse_signature("int $a, string $a")

    def test_reserved_name(self):
        with pytest.raises(ParseError, match="reserved word"):
            parse_signature("$none")

    def test_lone_question_mark(self):
        with pytest.raises(ParseError, match="type name after '\\?'"):
            parse_signature("? $a")

    def test_codepoint_escape_out_of_range(self):
        with pytest.raises(ParseError, match="Invalid UTF-8 codepoint") as exc:
            parse_signature(r'string $s = "\u{110000}"')
        assert exc.value.position == 12

    def test_huge_codepoint_escape(self):
        with pytest.raises(ParseError, match="Invalid UTF-8 codepoint"):
            parse_signature(r'string $s = "\u{FFFFFFFFFFFFFFFFFFFF}"')
