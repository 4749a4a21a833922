"""Unit tests for the public engine."""

import pytest

from uitypes.annotation import DataFlow, DelayPolicy, EventDirection
from uitypes.errors import (
    DefinitionError,
    ExpressionSyntaxError,
    RegistryFrozenError,
    UnknownTypeError,
)
from uitypes.expression import Optional, Reference

from .lib import TypeEngine, load_engine


class TestRegisterAll:
    """Tests for the build phase."""

    @pytest.mark.unit
    def test_register_freezes(self, frame_tables):
        """Registering tables ends the build phase."""
        engine = TypeEngine()
        names = engine.register_all(frame_tables)
        assert names[0] == "Widget"
        assert engine.registry.frozen
        with pytest.raises(RegistryFrozenError):
            engine.register_all({"Late": "{}"})

    @pytest.mark.unit
    def test_dangling_reference_is_logged(self, caplog):
        """Non-strict registration only warns about missing names."""
        engine = TypeEngine()
        with caplog.at_level("WARNING", logger="uitypes.engine"):
            engine.register_all({"Widget": {"parent": "Container?"}})
        assert "Container" in caplog.text

    @pytest.mark.unit
    def test_dangling_reference_in_strict_mode(self):
        """Strict registration rejects missing names."""
        engine = TypeEngine()
        with pytest.raises(UnknownTypeError) as exc_info:
            engine.register_all({"Widget": {"parent": "Container?"}}, strict=True)
        assert exc_info.value.name == "Container"

    @pytest.mark.unit
    def test_syntax_error_names_the_definition(self):
        """Malformed field strings report where they came from."""
        engine = TypeEngine()
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            engine.register_all({"Widget": {"hidden": "Flag|"}})
        assert "Widget.hidden" in str(exc_info.value)


class TestResolveWidget:
    """Tests for resolve_widget."""

    @pytest.mark.unit
    def test_frame_end_to_end(self, frame_engine):
        """Frame resolves to exactly its five composed fields."""
        frame = frame_engine.resolve_widget("Frame")
        assert list(frame.fields) == ["hidden", "status", "subject", "height", "width"]

    @pytest.mark.unit
    def test_string_arguments_are_parsed(self, frame_engine):
        """Generic arguments may be raw expression strings."""
        frame = frame_engine.resolve_widget("Frame", ["Button"])
        assert frame.fields["subject"].expression == Optional(Reference("Button"))
        assert frame is frame_engine.resolve_widget("Frame", [Reference("Button")])

    @pytest.mark.unit
    def test_non_struct_type(self, frame_engine):
        """Plain aliases are not widgets."""
        with pytest.raises(DefinitionError):
            frame_engine.resolve_widget("Text")


class TestValidate:
    """Tests for validation through the engine."""

    @pytest.mark.unit
    def test_validate_by_name(self, frame_engine):
        """Type names are resolved before validation."""
        assert frame_engine.validate({"status": ["busy"], "width": 0.5}, "Frame").valid

    @pytest.mark.unit
    def test_validate_nested_subject(self, frame_engine):
        """Subjects are validated against the generic argument."""
        schema = frame_engine.resolve_widget("Frame", ["Button"])
        result = frame_engine.validate({"subject": {"click": "yes"}}, schema)
        assert [f.path for f in result.failures] == ["root.subject.click"]

    @pytest.mark.unit
    def test_required_fields(self, frame_engine):
        """Every Frame field is optional."""
        assert frame_engine.required_fields("Frame") == []


class TestCatalogueEngines:
    """Tests for engines built from the built-in catalogues."""

    @pytest.mark.unit
    @pytest.mark.parametrize("catalogue", ["std", "pub"])
    def test_load_engine(self, catalogue):
        """Both catalogues load without dangling references."""
        engine = load_engine(catalogue)
        assert "UI.Choice" in engine.registry
        assert engine.registry.frozen

    @pytest.mark.unit
    def test_default_catalogue_from_environment(self, monkeypatch):
        """UITYPES_CATALOGUE selects the catalogue."""
        monkeypatch.setenv("UITYPES_CATALOGUE", "pub")
        engine = load_engine()
        assert engine.registry.lookup("UI.Frame").parameters == ()

    @pytest.mark.unit
    def test_unknown_catalogue(self):
        """Unknown catalogue names raise KeyError."""
        with pytest.raises(KeyError):
            load_engine("oma")

    @pytest.mark.unit
    def test_annotations(self):
        """Synchronization tags are read from resolved widgets."""
        engine = load_engine("std")
        click = engine.field_annotations("UI.Choice", "click")
        assert click.event is EventDirection.CLIENT
        assert click.delay is DelayPolicy.FOREVER
        scroll = engine.field_annotations(engine.resolve_widget("UI.Scroll"), "scrollX")
        assert scroll.data is DataFlow.BOTH
        assert not engine.field_annotations("UI.Scroll", "hidden").is_synchronized

    @pytest.mark.unit
    def test_validate_list_layout(self):
        """A list of items validates against the std catalogue."""
        engine = load_engine("std")
        value = {
            "direction": "column",
            "widgets": [
                {"basis": 1, "alignment": "stretch"},
                {"basis": 2, "alignment": "baseline", "grows": 1},
            ],
        }
        assert engine.validate(value, "UI.List").valid

        value["widgets"][1]["alignment"] = "middle"
        result = engine.validate(value, "UI.List")
        assert [f.path for f in result.failures] == ["root.widgets"]
        assert "root.widgets[1].alignment" in result.failures[0].reason

    @pytest.mark.unit
    def test_focus_divergence(self):
        """std focus needs a boolean, pub focus carries nothing."""
        value = {
            "focused": False,
            "pressed": {},
            "focus": True,
        }
        assert load_engine("std").validate(value, "UI.Input").valid
        result = load_engine("pub").validate(value, "UI.Input")
        assert [f.path for f in result.failures] == ["root.focus"]
