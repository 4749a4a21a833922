"""Unit tests for the built-in catalogues."""

import pytest

from uitypes.composer import Composer, ResolvedSchema
from uitypes.expression import Primitive
from uitypes.registry import Registry

from .lib import get_catalogue, list_catalogues

WIDGET_FIELDS = ["hidden", "status", "index"]


def _load(name: str) -> tuple[Registry, Composer]:
    registry = Registry()
    registry.register_all(get_catalogue(name))
    registry.freeze()
    return registry, Composer(registry)


class TestCatalogueRegistry:
    """Tests for catalogue lookup."""

    @pytest.mark.unit
    def test_list_catalogues(self):
        """Both catalogues are available."""
        assert list_catalogues() == ["std", "pub"]

    @pytest.mark.unit
    def test_unknown_catalogue(self):
        """Unknown names raise KeyError listing the choices."""
        with pytest.raises(KeyError, match="std, pub"):
            get_catalogue("oma")


@pytest.mark.parametrize("catalogue", ["std", "pub"])
class TestCatalogueResolution:
    """Tests shared by both catalogues."""

    @pytest.mark.unit
    def test_no_dangling_references(self, catalogue):
        """Every referenced name is registered."""
        registry, _ = _load(catalogue)
        assert registry.unresolved_references() == {}

    @pytest.mark.unit
    def test_every_definition_resolves(self, catalogue):
        """Every catalogue name resolves without errors."""
        registry, composer = _load(catalogue)
        for name in registry.names():
            if name.startswith("UI."):
                composer.resolve(name)

    @pytest.mark.unit
    def test_namespaces_are_flattened(self, catalogue):
        """Nested and flat tables produce the same dotted names."""
        registry, _ = _load(catalogue)
        assert "UI.Flow.ItemAlignment" in registry
        assert "UI.Event.Click" in registry

    @pytest.mark.unit
    def test_frame_fields(self, catalogue):
        """Frame combines decorator and sizeable fields."""
        _, composer = _load(catalogue)
        frame = composer.resolve_struct("UI.Frame")
        assert list(frame.fields) == WIDGET_FIELDS + ["subject", "height", "width"]

    @pytest.mark.unit
    def test_magnet_resolves_finitely(self, catalogue):
        """The Magnet/Metal/Layout loop stays a reference."""
        _, composer = _load(catalogue)
        magnet = composer.resolve_struct("UI.Magnet")
        assert list(magnet.fields) == WIDGET_FIELDS + [
            "subject",
            "height",
            "width",
            "widgets",
            "left",
            "top",
            "translationX",
            "translationY",
        ]
        assert "UI.Magnet" in str(magnet.fields["widgets"].expression)

    @pytest.mark.unit
    def test_selection_alias_composes(self, catalogue):
        """Selection is an alias that composes as a struct."""
        _, composer = _load(catalogue)
        selection = composer.resolve("UI.Selection")
        assert isinstance(selection, ResolvedSchema)
        assert "UI.Input" in selection.lineage
        assert str(selection.fields["widgets"].expression) == "Maybe([UI.Choice]|<UI.Choice>)"
        radio = composer.resolve_struct("UI.RadioList")
        assert "UI.Selection" in radio.lineage

    @pytest.mark.unit
    def test_choice_overrides_unchained(self, catalogue):
        """Choices are never taken out of the focus chain."""
        _, composer = _load(catalogue)
        choice = composer.resolve_struct("UI.Choice")
        assert choice.fields["unchained"].expression == Primitive("none")

    @pytest.mark.unit
    def test_icon_peers_agree(self, catalogue):
        """Image and Text share the symbol field without conflict."""
        _, composer = _load(catalogue)
        icon = composer.resolve_struct("UI.Icon")
        assert {"symbol", "asset", "content", "direction"} <= set(icon.fields)


class TestCatalogueDivergence:
    """Tests for the differences between std and pub."""

    @pytest.mark.unit
    def test_focus_field(self):
        """std focus is a boolean, pub focus is a payload-free event."""
        _, std = _load("std")
        _, pub = _load("pub")
        assert std.resolve_struct("UI.Input").fields["focus"].expression == Primitive(
            "boolean"
        )
        assert pub.resolve_struct("UI.Input").fields["focus"].expression == Primitive(
            "none"
        )

    @pytest.mark.unit
    def test_frame_shape(self):
        """std Frame is generic, pub Frame is an alias."""
        std_registry, std = _load("std")
        pub_registry, pub = _load("pub")
        assert [p.name for p in std_registry.lookup("UI.Frame").parameters] == ["W"]
        assert pub_registry.lookup("UI.Frame").parameters == ()
        std_frame = std.resolve_struct("UI.Frame")
        pub_frame = pub.resolve_struct("UI.Frame")
        assert std_frame.fields == pub_frame.fields
        assert (str(std_frame), str(pub_frame)) == ("UI.Frame(UI.Widget)", "UI.Frame")
