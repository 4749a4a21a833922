"""Unit tests for the composer."""

import pytest

from uitypes.annotation import EventDirection
from uitypes.errors import (
    ArityError,
    CompositionConflictError,
    DefinitionError,
    InheritanceCycleError,
    ResolutionDepthError,
    UnknownFieldError,
    UnknownTypeError,
)
from uitypes.expression import Optional, Primitive, Reference, Sequence, parse
from uitypes.registry import Registry

from .lib import Composer, ResolvedSchema, field_annotations

FRAME_TABLE = [
    ("Widget", {"hidden": "Flag", "status": "Text?"}),
    ("Sizeable", {"height": "number?", "width": "number?"}),
    ("Decorator", {"$macro": ["W=Widget"], "$super": "Widget", "subject": "W?"}),
    ("Frame", {"$macro": ["W=Widget"], "$super": "Decorator(W)+Sizeable"}),
    ("Button", {"$super": "Widget", "click": "boolean? @event=client"}),
]


def _composer(table, prelude=True, max_depth=None) -> Composer:
    registry = Registry(prelude=prelude)
    registry.register_all(table)
    registry.freeze()
    return Composer(registry, max_depth=max_depth)


@pytest.fixture
def composer() -> Composer:
    return _composer(FRAME_TABLE)


class TestResolveStructs:
    """Tests for flattening supertype chains."""

    @pytest.mark.unit
    def test_frame_end_to_end(self, composer):
        """Frame has exactly the five composed fields."""
        frame = composer.resolve("Frame")
        assert isinstance(frame, ResolvedSchema)
        assert list(frame.fields) == ["hidden", "status", "subject", "height", "width"]
        assert frame.fields["subject"].expression == Optional(Reference("Widget"))
        assert frame.fields["height"].expression == Optional(Primitive("number"))
        assert frame.fields["width"].expression == Optional(Primitive("number"))

    @pytest.mark.unit
    def test_field_origin(self, composer):
        """Fields remember the definition that declared them."""
        frame = composer.resolve("Frame")
        assert frame.fields["hidden"].origin == "Widget"
        assert frame.fields["subject"].origin == "Decorator"
        assert frame.fields["width"].origin == "Sizeable"

    @pytest.mark.unit
    def test_lineage(self, composer):
        """Lineage lists every composed instantiation."""
        frame = composer.resolve("Frame")
        assert frame.lineage == frozenset(
            {"Frame(Widget)", "Decorator(Widget)", "Widget", "Sizeable"}
        )

    @pytest.mark.unit
    def test_own_fields_override_inherited(self):
        """A child silently redeclares an inherited field."""
        composer = _composer(
            [
                ("Input", {"unchained": "Flag", "disabled": "Flag"}),
                ("Choice", {"$super": "Input", "unchained": "none", "selected": "Flag"}),
            ]
        )
        choice = composer.resolve("Choice")
        assert choice.fields["unchained"].expression == Primitive("none")
        assert choice.fields["unchained"].origin == "Choice"
        assert list(choice.fields) == ["disabled", "unchained", "selected"]

    @pytest.mark.unit
    def test_empty_struct(self):
        """Event types without fields resolve to empty schemas."""
        composer = _composer([("UI.Event.Click", "{}")])
        assert composer.resolve("UI.Event.Click").fields == {}


class TestGenerics:
    """Tests for generic parameter binding."""

    @pytest.mark.unit
    def test_default_substitution(self, composer):
        """No arguments equals explicitly passing the defaults."""
        implicit = composer.resolve("Frame")
        explicit = composer.resolve("Frame", [Reference("Widget")])
        assert implicit == explicit
        assert implicit.args == (Reference("Widget"),)

    @pytest.mark.unit
    def test_explicit_argument(self, composer):
        """Arguments flow through generic supertypes."""
        frame = composer.resolve("Frame", [Reference("Button")])
        assert frame.fields["subject"].expression == Optional(Reference("Button"))
        assert str(frame) == "Frame(Button)"

    @pytest.mark.unit
    def test_collection_argument(self, composer):
        """Arguments are full expressions."""
        frame = composer.resolve("Frame", [parse("[Button]")])
        assert frame.fields["subject"].expression == Optional(Sequence(Reference("Button")))

    @pytest.mark.unit
    def test_too_many_arguments(self, composer):
        """Extra arguments raise ArityError."""
        with pytest.raises(ArityError) as exc_info:
            composer.resolve("Frame", [Reference("Widget"), Reference("Button")])
        assert (exc_info.value.expected, exc_info.value.given) == (1, 2)

    @pytest.mark.unit
    def test_argument_to_non_generic(self, composer):
        """Non-generic types take no arguments."""
        with pytest.raises(ArityError):
            composer.resolve("Widget", [Reference("Button")])

    @pytest.mark.unit
    def test_missing_argument_without_default(self, composer):
        """Parameters without default must be supplied."""
        with pytest.raises(ArityError):
            composer.resolve("Maybe")

    @pytest.mark.unit
    def test_alias_resolves_to_expression(self, composer):
        """Generic aliases resolve to substituted expressions."""
        assert composer.resolve("Maybe", [parse("[W]|<W>")]) == parse("([W]|<W>)?")
        assert composer.resolve("Flag") == Optional(Primitive("boolean"))

    @pytest.mark.unit
    def test_default_may_use_earlier_parameter(self):
        """Defaults can mention parameters bound before them."""
        composer = _composer(
            [("Pair", {"$macro": ["A=number", "B=A"], "first": "A", "second": "B"})]
        )
        pair = composer.resolve("Pair", [Primitive("string")])
        assert pair.fields["second"].expression == Primitive("string")

    @pytest.mark.unit
    def test_parameter_names_do_not_leak(self):
        """Nested instantiations bind their own parameter maps."""
        composer = _composer(
            [
                ("Box", {"$macro": ["T=number"], "item": "T"}),
                ("Shelf", {"$macro": ["T=string"], "$super": "Box(Box)", "label": "T"}),
            ]
        )
        shelf = composer.resolve("Shelf")
        assert shelf.fields["item"].expression == Reference("Box")
        assert shelf.fields["label"].expression == Primitive("string")


class TestConflicts:
    """Tests for peer supertype field conflicts."""

    @pytest.mark.unit
    def test_agreeing_peers(self):
        """Peers declaring the same field identically compose."""
        composer = _composer(
            [
                ("Image", {"symbol": "string"}),
                ("Text", {"symbol": "string"}),
                ("Icon", "Image+Text"),
            ],
            prelude=False,
        )
        icon = composer.resolve("Icon")
        assert isinstance(icon, ResolvedSchema)
        assert list(icon.fields) == ["symbol"]

    @pytest.mark.unit
    def test_disagreeing_peers(self):
        """Peers declaring a field differently raise a conflict."""
        composer = _composer(
            [
                ("Image", {"symbol": "string"}),
                ("Text", {"symbol": "number"}),
                ("Icon", "Image+Text"),
            ],
            prelude=False,
        )
        with pytest.raises(CompositionConflictError) as exc_info:
            composer.resolve("Icon")
        assert exc_info.value.field == "symbol"
        assert {exc_info.value.first, exc_info.value.second} == {"Image", "Text"}

    @pytest.mark.unit
    @pytest.mark.parametrize("supertype", ["Derived+Base", "Base+Derived"])
    def test_related_supertypes_do_not_conflict(self, supertype):
        """A descendant's redeclaration wins over its ancestor in either order."""
        composer = _composer(
            [
                ("Base", {"x": "number"}),
                ("Derived", {"$super": "Base", "x": "string"}),
                ("Mixed", {"$super": supertype}),
            ]
        )
        assert composer.resolve("Mixed").fields["x"].expression == Primitive("string")

    @pytest.mark.unit
    def test_same_generic_with_different_arguments(self):
        """Two instantiations of one generic are peers."""
        composer = _composer(
            [
                ("Holder", {"$macro": ["T=number"], "value": "T"}),
                ("Both", {"$super": "Holder(string)+Holder(number)"}),
            ]
        )
        with pytest.raises(CompositionConflictError):
            composer.resolve("Both")

    @pytest.mark.unit
    def test_instantiation_inherited_through_subtype(self):
        """An instantiation reached through a subtype still conflicts with its peer."""
        composer = _composer(
            [
                ("Holder", {"$macro": ["T=number"], "value": "T"}),
                ("Sub", {"$super": "Holder(string)"}),
                ("Both", {"$super": "Sub+Holder(number)"}),
            ]
        )
        with pytest.raises(CompositionConflictError) as exc_info:
            composer.resolve("Both")
        assert exc_info.value.field == "value"
        assert {exc_info.value.first, exc_info.value.second} == {"Sub", "Holder(number)"}

    @pytest.mark.unit
    def test_default_arguments_match_explicit_ones(self):
        """Holder and Holder(number) are one instantiation."""
        composer = _composer(
            [
                ("Holder", {"$macro": ["T=number"], "value": "T"}),
                ("Sub", {"$super": "Holder", "value": "string"}),
                ("Both", {"$super": "Sub+Holder(number)"}),
            ]
        )
        assert composer.resolve("Both").fields["value"].expression == Primitive("string")

    @pytest.mark.unit
    def test_order_of_unrelated_registrations(self):
        """Registration order elsewhere does not change the field set."""
        forward = _composer(FRAME_TABLE + [("Other", {"status": "number"})])
        backward = _composer([("Other", {"status": "number"})] + FRAME_TABLE[::-1])
        assert forward.resolve("Frame") == backward.resolve("Frame")


class TestFailures:
    """Tests for structural failures."""

    @pytest.mark.unit
    def test_unknown_type(self, composer):
        """Missing names raise UnknownTypeError."""
        with pytest.raises(UnknownTypeError):
            composer.resolve("Missing")

    @pytest.mark.unit
    def test_failed_resolution_is_not_cached(self):
        """A failed composition leaves no partial result behind."""
        composer = _composer(FRAME_TABLE + [("Broken", {"$super": "Widget+Missing"})])
        composer.resolve("Widget")
        size = composer.cache_size
        with pytest.raises(UnknownTypeError) as exc_info:
            composer.resolve("Broken")
        assert exc_info.value.name == "Missing"
        assert composer.cache_size == size

    @pytest.mark.unit
    def test_non_struct_supertype_member(self):
        """Supertype members must name types."""
        composer = _composer([("Widget", {"hidden": "Flag"}), ("Bad", "Widget+[Widget]")])
        with pytest.raises(DefinitionError):
            composer.resolve("Bad")

    @pytest.mark.unit
    def test_non_struct_alias_as_supertype(self):
        """Union aliases cannot be composed."""
        composer = _composer(
            [("Size", "number|string"), ("Bad", {"$super": "Size", "x": "number"})]
        )
        with pytest.raises(DefinitionError):
            composer.resolve("Bad")

    @pytest.mark.unit
    def test_inheritance_cycle(self):
        """Supertype chains leading back to themselves are rejected."""
        composer = _composer([("A", {"$super": "B"}), ("B", {"$super": "A"})])
        with pytest.raises(InheritanceCycleError) as exc_info:
            composer.resolve("A")
        assert exc_info.value.chain == ["A", "B", "A"]

    @pytest.mark.unit
    def test_unbounded_generic_recursion(self):
        """Self-referential generics stop at the depth bound."""
        composer = _composer(
            [("Deep", {"$macro": ["T=number"], "$super": "Deep([T])"})], max_depth=8
        )
        with pytest.raises(ResolutionDepthError) as exc_info:
            composer.resolve("Deep")
        assert exc_info.value.max_depth == 8


class TestCaching:
    """Tests for memoization."""

    @pytest.mark.unit
    def test_repeated_resolution_returns_cached_schema(self, composer):
        """Structurally equal arguments return the same cached object."""
        first = composer.resolve("Frame", [Reference("Button")])
        second = composer.resolve("Frame", (Reference("Button"),))
        assert first is second

    @pytest.mark.unit
    def test_no_parser_work_during_resolution(self, composer):
        """Resolution only reuses expressions parsed at registration."""
        parse.cache_clear()
        composer.resolve("Frame")
        composer.resolve("Frame")
        assert parse.cache_info().misses == 0

    @pytest.mark.unit
    def test_clear_cache(self, composer):
        """Clearing the cache forgets every resolution."""
        composer.resolve("Frame")
        assert composer.cache_size > 0
        composer.clear_cache()
        assert composer.cache_size == 0

    @pytest.mark.unit
    def test_cached_schema_is_read_only(self, composer):
        """Callers cannot edit the fields of a shared schema."""
        widget = composer.resolve("Widget")
        with pytest.raises(TypeError):
            del widget.fields["hidden"]
        with pytest.raises(TypeError):
            widget.fields["extra"] = widget.fields["status"]
        assert list(composer.resolve("Widget").fields) == ["hidden", "status"]

    @pytest.mark.unit
    def test_schemas_are_hashable(self, composer):
        """Equal schemas hash alike and can key a set."""
        frame = composer.resolve("Frame")
        other = _composer(FRAME_TABLE).resolve("Frame")
        assert hash(frame) == hash(other)
        assert {frame, other} == {frame}


class TestFieldAnnotations:
    """Tests for annotation lookup on resolved schemas."""

    @pytest.mark.unit
    def test_annotations_survive_composition(self, composer):
        """Annotations are attached to resolved fields."""
        button = composer.resolve("Button")
        assert field_annotations(button, "click").event is EventDirection.CLIENT
        assert not field_annotations(button, "hidden").is_synchronized

    @pytest.mark.unit
    def test_unknown_field(self, composer):
        """Asking for a missing field raises UnknownFieldError."""
        with pytest.raises(UnknownFieldError):
            field_annotations(composer.resolve("Button"), "scrollX")

    @pytest.mark.unit
    def test_to_dict(self, composer):
        """Schemas render to plain dictionaries."""
        data = composer.resolve("Button").to_dict()
        assert data["name"] == "Button"
        assert data["fields"]["click"] == {
            "type": "boolean?",
            "annotations": {"event": "client"},
            "origin": "Button",
        }
