"""Unit tests for the expression parser and tree utilities."""

import pytest

from uitypes.errors import ExpressionSyntaxError

from .lib import parse, tokenize
from .models import (
    EnumSet,
    Generic,
    Intersection,
    Literal,
    Mapping,
    Optional,
    Primitive,
    Reference,
    Sequence,
    Union,
    is_struct_shaped,
    iter_references,
    substitute,
)


class TestTokenize:
    """Tests for the tokenizer."""

    @pytest.mark.unit
    def test_qualified_names_are_single_tokens(self):
        """Dotted names tokenize as one name."""
        tokens = tokenize("UI.Flow.Cut?")
        assert [t.kind for t in tokens] == ["name", "?"]
        assert tokens[0].text == "UI.Flow.Cut"

    @pytest.mark.unit
    def test_separator_only_between_strings(self):
        """Underscore before a quote is the literal separator."""
        tokens = tokenize('"ch"_"em"')
        assert [t.kind for t in tokens] == ["string", "sep", "string"]

    @pytest.mark.unit
    def test_offsets_skip_whitespace(self):
        """Token offsets point into the original string."""
        tokens = tokenize("A | B")
        assert [t.offset for t in tokens] == [0, 2, 4]


class TestParseAtoms:
    """Tests for names, primitives and literals."""

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["boolean", "number", "string", "none"])
    def test_primitives(self, name):
        """Built-in scalar names parse to Primitive."""
        assert parse(name) == Primitive(name)

    @pytest.mark.unit
    def test_reference(self):
        """Other names parse to Reference."""
        assert parse("UI.Widget") == Reference("UI.Widget")

    @pytest.mark.unit
    def test_single_literal(self):
        """A single quoted string is a Literal."""
        assert parse('"stretch"') == Literal("stretch")

    @pytest.mark.unit
    def test_literal_set(self):
        """Joined literals form an order-insignificant EnumSet."""
        expr = parse('"ch"_"em"_"ex"_"px"_"rem"')
        assert expr == EnumSet(frozenset({"ch", "em", "ex", "px", "rem"}))
        assert expr == parse('"rem"_"px"_"ex"_"em"_"ch"')

    @pytest.mark.unit
    def test_empty_literal(self):
        """Empty quoted strings are valid literals."""
        assert parse('""') == Literal("")


class TestParseOperators:
    """Tests for operators, modifiers and precedence."""

    @pytest.mark.unit
    def test_union(self):
        """Pipe builds a Union."""
        assert parse("UI.Length|number") == Union(
            (Reference("UI.Length"), Primitive("number"))
        )

    @pytest.mark.unit
    def test_intersection_binds_tighter_than_union(self):
        """Plus binds tighter than pipe."""
        assert parse("A+B|C") == Union(
            (Intersection((Reference("A"), Reference("B"))), Reference("C"))
        )

    @pytest.mark.unit
    def test_optional_binds_tightest(self):
        """Question mark applies to the preceding modifier only."""
        assert parse("A|B?") == Union((Reference("A"), Optional(Reference("B"))))

    @pytest.mark.unit
    def test_sequence_and_mapping(self):
        """Brackets and angle brackets build collections."""
        assert parse("[W]") == Sequence(Reference("W"))
        assert parse("<W>") == Mapping(Reference("W"))
        assert parse("[W]?") == Optional(Sequence(Reference("W")))

    @pytest.mark.unit
    def test_collections_contain_full_expressions(self):
        """Collection markers wrap complete expressions."""
        assert parse("[A|B]") == Sequence(Union((Reference("A"), Reference("B"))))

    @pytest.mark.unit
    def test_grouping(self):
        """Parentheses group without producing a node."""
        assert parse("(A|B)?") == Optional(Union((Reference("A"), Reference("B"))))

    @pytest.mark.unit
    def test_literal_mixed_with_reference(self):
        """A single literal may be a union operand."""
        assert parse('"stretch"|UI.Flow.ItemAlignment') == Union(
            (Literal("stretch"), Reference("UI.Flow.ItemAlignment"))
        )

    @pytest.mark.unit
    def test_grouped_literal_set_in_union(self):
        """Grouped literal sets may be union operands."""
        expr = parse('("a"_"b")|number')
        assert expr == Union((EnumSet(frozenset({"a", "b"})), Primitive("number")))


class TestParseGenerics:
    """Tests for generic application."""

    @pytest.mark.unit
    def test_generic_application(self):
        """Name followed by arguments is a Generic."""
        assert parse("UI.Metal(W,M)") == Generic(
            "UI.Metal", (Reference("W"), Reference("M"))
        )

    @pytest.mark.unit
    def test_nested_generics(self):
        """Arguments are full expressions, including generics."""
        assert parse("Maybe([W]|<W>)") == Generic(
            "Maybe", (Union((Sequence(Reference("W")), Mapping(Reference("W")))),)
        )
        assert parse("A(B(C),D?)") == Generic(
            "A", (Generic("B", (Reference("C"),)), Optional(Reference("D")))
        )

    @pytest.mark.unit
    def test_generic_supertype_composition(self):
        """Generic members compose with plus."""
        assert parse("UI.Decorator(W)+UI.Sizeable") == Intersection(
            (Generic("UI.Decorator", (Reference("W"),)), Reference("UI.Sizeable"))
        )


class TestParseErrors:
    """Tests for syntax error reporting."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "A|",
            "[A",
            "<A",
            "A]",
            "(A",
            "A()",
            "A(B,)",
            "A(,B)",
            "A??",
            "A!",
            "A*",
            '"open',
            "number(A)",
            "A B",
        ],
    )
    def test_malformed_expressions(self, raw):
        """Malformed text raises ExpressionSyntaxError."""
        with pytest.raises(ExpressionSyntaxError):
            parse(raw)

    @pytest.mark.unit
    def test_literal_set_mixed_with_union_is_rejected(self):
        """Ungrouped literal sets may not be combined with operators."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse('"a"_"b"|number')
        assert "grouping" in exc_info.value.reason
        with pytest.raises(ExpressionSyntaxError):
            parse('A+"a"_"b"')

    @pytest.mark.unit
    def test_duplicate_literal_rejected(self):
        """Literal sets are disjoint."""
        with pytest.raises(ExpressionSyntaxError):
            parse('"a"_"a"')

    @pytest.mark.unit
    def test_error_reports_offset(self):
        """The error points at the offending character."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            parse("A|B!")
        assert exc_info.value.offset == 3
        assert exc_info.value.raw == "A|B!"


class TestRendering:
    """Tests for rendering expressions back to text."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            "UI.Decorator(W)+UI.Sizeable",
            "Maybe([W]|<W>)",
            '"stretch"|UI.Flow.ItemAlignment',
            "(A|B)?",
            "(A|B)+C",
            "UI.Size?",
        ],
    )
    def test_rendering_parses_back(self, raw):
        """Rendered text parses to the same tree."""
        expr = parse(raw)
        assert parse(str(expr)) == expr


class TestTreeUtilities:
    """Tests for substitution and reference walking."""

    @pytest.mark.unit
    def test_substitute_replaces_parameters(self):
        """Bound references are replaced throughout the tree."""
        expr = parse("Maybe([W]|<W>)")
        result = substitute(expr, {"W": Reference("UI.Item")})
        assert result == parse("Maybe([UI.Item]|<UI.Item>)")

    @pytest.mark.unit
    def test_substitute_is_not_textual(self):
        """Names that merely contain a parameter name are left alone."""
        expr = parse("W|UI.W|Wide")
        assert substitute(expr, {"W": Primitive("number")}) == parse("number|UI.W|Wide")

    @pytest.mark.unit
    def test_iter_references(self):
        """All referenced names are reported, generic bases included."""
        names = list(iter_references(parse("UI.Metal(W,M)+UI.Sizeable?")))
        assert names == ["UI.Metal", "W", "M", "UI.Sizeable"]

    @pytest.mark.unit
    def test_is_struct_shaped(self):
        """Only references, generics and their intersections are struct-shaped."""
        assert is_struct_shaped(parse("UI.Input+UI.Layout(UI.Choice)"))
        assert not is_struct_shaped(parse("UI.Length|number"))
        assert not is_struct_shaped(parse("[UI.Widget]"))
