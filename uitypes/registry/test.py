"""Unit tests for the type registry."""

import pytest

from uitypes.annotation import DelayPolicy, EventDirection
from uitypes.errors import (
    DefinitionError,
    DuplicateDefinitionError,
    ExpressionSyntaxError,
    RegistryFrozenError,
    UnknownTypeError,
)
from uitypes.expression import Generic, Intersection, Optional, Reference, parse

from .lib import (
    AliasDef,
    GenericParameter,
    Registry,
    StructDef,
    build_definition,
    flatten_tables,
)


class TestBuildDefinition:
    """Tests for turning raw table entries into definitions."""

    @pytest.mark.unit
    def test_expression_string_is_alias(self):
        """Plain strings become aliases."""
        definition = build_definition("UI.Size", "UI.Length|number")
        assert isinstance(definition, AliasDef)
        assert definition.expression == parse("UI.Length|number")
        assert not definition.struct_shaped

    @pytest.mark.unit
    def test_intersection_alias_is_struct_shaped(self):
        """Aliases over struct compositions are struct-shaped."""
        definition = build_definition("UI.Selection", "UI.Input+UI.Layout(UI.Choice)")
        assert definition.struct_shaped

    @pytest.mark.unit
    def test_empty_struct(self):
        """The '{}' entry is a struct without fields."""
        definition = build_definition("UI.Event.Click", "{}")
        assert definition == StructDef("UI.Event.Click")

    @pytest.mark.unit
    def test_struct_with_macro_and_super(self):
        """Struct entries split macros, supertype and fields."""
        definition = build_definition(
            "UI.Frame",
            {"$macro": ["W=UI.Widget"], "$super": "UI.Decorator(W)+UI.Sizeable"},
        )
        assert isinstance(definition, StructDef)
        assert definition.parameters == (GenericParameter("W", Reference("UI.Widget")),)
        assert definition.supertype == Intersection(
            (Generic("UI.Decorator", (Reference("W"),)), Reference("UI.Sizeable"))
        )
        assert definition.fields == {}

    @pytest.mark.unit
    def test_field_annotations_parsed_once(self):
        """Field strings are split into expression and annotations."""
        definition = build_definition(
            "UI.Button", {"click": "UI.Event.Click? @event=client @delay=forever"}
        )
        click = definition.fields["click"]
        assert click.expression == Optional(Reference("UI.Event.Click"))
        assert click.annotations.event is EventDirection.CLIENT
        assert click.annotations.delay is DelayPolicy.FOREVER
        assert click.raw.endswith("@delay=forever")

    @pytest.mark.unit
    def test_field_order_preserved(self):
        """Fields keep declaration order."""
        definition = build_definition("A", {"z": "number", "a": "string", "m": "Flag"})
        assert list(definition.fields) == ["z", "a", "m"]

    @pytest.mark.unit
    def test_bare_parameter_has_no_default(self):
        """Macros without '=' have no default."""
        assert GenericParameter.from_raw("T") == GenericParameter("T")

    @pytest.mark.unit
    def test_syntax_error_names_field(self):
        """Syntax errors in a field mention the owning definition and field."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            build_definition("UI.Broken", {"width": "UI.Size|"})
        assert "UI.Broken.width" in str(exc_info.value)
        assert exc_info.value.raw == "UI.Size|"

    @pytest.mark.unit
    def test_syntax_error_points_into_declared_field(self):
        """Error raw text and offset refer to the field string as written."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            build_definition("W", {"f": "   A| @event=client"})
        assert exc_info.value.raw == "   A| @event=client"
        assert exc_info.value.offset == 5

    @pytest.mark.unit
    def test_struct_fields_are_read_only(self):
        """Definitions cannot gain or lose fields after they are built."""
        definition = build_definition("A", {"x": "number"})
        with pytest.raises(TypeError):
            definition.fields["y"] = definition.fields["x"]
        with pytest.raises(TypeError):
            del definition.fields["x"]
        assert list(definition.fields) == ["x"]
        assert hash(definition) == hash(build_definition("A", {"x": "number"}))

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            42,
            {"width": 3},
            {"$macro": ["W", "W"]},
            {"bad-name": "number"},
            {"$extends": "UI.Widget"},
        ],
    )
    def test_malformed_entries(self, raw):
        """Wrongly shaped entries raise DefinitionError."""
        with pytest.raises(DefinitionError):
            build_definition("X", raw)


class TestFlattenTables:
    """Tests for nested namespace tables."""

    @pytest.mark.unit
    def test_nested_namespaces(self):
        """Capitalized keys are namespaces, lower-case keys are fields."""
        tables = {
            "UI": {
                "Length": {"n": "number", "u": '"ch"_"em"'},
                "Flow": {"Cut": '"never"_"reverse"'},
            }
        }
        assert flatten_tables(tables) == [
            ("UI.Length", {"n": "number", "u": '"ch"_"em"'}),
            ("UI.Flow.Cut", '"never"_"reverse"'),
        ]

    @pytest.mark.unit
    def test_flat_pairs_pass_through(self):
        """Already qualified pairs are kept in order."""
        pairs = [("UI.B", "number"), ("UI.A", "string")]
        assert flatten_tables(pairs) == pairs


class TestRegistry:
    """Tests for registration and lookup."""

    @pytest.mark.unit
    def test_prelude_is_registered(self):
        """Every registry knows Flag, Text and Maybe."""
        registry = Registry()
        assert "Flag" in registry
        assert "Text" in registry
        assert registry.lookup("Maybe").parameters == (GenericParameter("T"),)

    @pytest.mark.unit
    def test_prelude_can_be_skipped(self):
        """Registries without prelude start empty."""
        assert len(Registry(prelude=False)) == 0

    @pytest.mark.unit
    def test_register_and_lookup(self):
        """Registered definitions can be looked up."""
        registry = Registry(prelude=False)
        registry.register("UI.Size", "UI.Length|number")
        assert registry.lookup("UI.Size").name == "UI.Size"
        assert registry.names() == ["UI.Size"]

    @pytest.mark.unit
    def test_duplicate_registration(self):
        """A name can only be registered once."""
        registry = Registry(prelude=False)
        registry.register("UI.Size", "number")
        with pytest.raises(DuplicateDefinitionError):
            registry.register("UI.Size", "UI.Length|number")
        assert registry.lookup("UI.Size").expression == parse("number")

    @pytest.mark.unit
    def test_unknown_lookup(self):
        """Looking up a missing name raises UnknownTypeError."""
        with pytest.raises(UnknownTypeError) as exc_info:
            Registry().lookup("UI.Pixel")
        assert exc_info.value.name == "UI.Pixel"

    @pytest.mark.unit
    def test_frozen_registry_rejects_registration(self):
        """No registration after the build phase."""
        registry = Registry()
        registry.freeze()
        with pytest.raises(RegistryFrozenError):
            registry.register("UI.Size", "number")

    @pytest.mark.unit
    @pytest.mark.parametrize("name", ["number", "UI..Size", "", "1UI"])
    def test_invalid_names(self, name):
        """Primitive names and malformed names cannot be registered."""
        with pytest.raises(DefinitionError):
            Registry().register(name, "string")

    @pytest.mark.unit
    def test_register_all_nested(self):
        """Nested tables register under qualified names."""
        registry = Registry(prelude=False)
        names = registry.register_all({"UI": {"Event": {"Click": "{}", "Touch": "{}"}}})
        assert names == ["UI.Event.Click", "UI.Event.Touch"]

    @pytest.mark.unit
    def test_unresolved_references(self):
        """Dangling references are reported, parameters are not."""
        registry = Registry()
        registry.register_all(
            [
                ("UI.Resolution", {"pixel": "UI.Pixel", "depth": "number"}),
                ("UI.Decorator", {"$macro": ["W=UI.Widget"], "subject": "W?"}),
            ]
        )
        assert registry.unresolved_references() == {
            "UI.Resolution": ["UI.Pixel"],
            "UI.Decorator": ["UI.Widget"],
        }
