"""Unit tests for annotation extraction."""

import pytest

from uitypes.errors import ExpressionSyntaxError

from .lib import (
    EMPTY_ANNOTATIONS,
    AnnotationSet,
    DataFlow,
    DelayPolicy,
    EventDirection,
    extract_annotations,
)


class TestExtractAnnotations:
    """Tests for splitting field strings."""

    @pytest.mark.unit
    def test_plain_field_has_no_annotations(self):
        """Fields without tags are pure data."""
        expr, annotations = extract_annotations("UI.Size?")
        assert expr == "UI.Size?"
        assert annotations == EMPTY_ANNOTATIONS
        assert not annotations.is_synchronized

    @pytest.mark.unit
    def test_event_and_delay(self):
        """Known tags are split off and typed."""
        expr, annotations = extract_annotations("boolean @event=client @delay=forever")
        assert expr == "boolean"
        assert annotations.event is EventDirection.CLIENT
        assert annotations.delay is DelayPolicy.FOREVER
        assert annotations.data is None
        assert annotations.is_synchronized

    @pytest.mark.unit
    def test_data_flow(self):
        """Data-flow tags are typed."""
        expr, annotations = extract_annotations("number? @data=both @delay=flush")
        assert expr == "number?"
        assert annotations.data is DataFlow.BOTH
        assert annotations.delay is DelayPolicy.FLUSH

    @pytest.mark.unit
    def test_unknown_keys_preserved(self):
        """Unknown keys are kept opaquely."""
        _, annotations = extract_annotations("string @priority=high")
        assert annotations["priority"] == "high"
        assert annotations.to_dict() == {"priority": "high"}

    @pytest.mark.unit
    def test_unrecognised_known_value_is_kept(self, monkeypatch):
        """Unrecognised values of known keys are preserved but untyped."""
        monkeypatch.delenv("UITYPES_STRICT_ANNOTATIONS", raising=False)
        _, annotations = extract_annotations("boolean @event=sideways")
        assert annotations["event"] == "sideways"
        assert annotations.event is None

    @pytest.mark.unit
    def test_strict_mode_rejects_unrecognised_value(self):
        """Strict mode rejects values outside the known enum."""
        with pytest.raises(ExpressionSyntaxError):
            extract_annotations("boolean @event=sideways", strict=True)

    @pytest.mark.unit
    def test_strict_mode_from_environment(self, monkeypatch):
        """Strict mode can be enabled through the environment."""
        monkeypatch.setenv("UITYPES_STRICT_ANNOTATIONS", "1")
        with pytest.raises(ExpressionSyntaxError):
            extract_annotations("boolean @delay=never")

    @pytest.mark.unit
    def test_at_sign_inside_literal_is_not_a_tag(self):
        """Quoted literals may contain '@'."""
        expr, annotations = extract_annotations('"a@b"_"c" @data=client')
        assert expr == '"a@b"_"c"'
        assert annotations.data is DataFlow.CLIENT

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "raw",
        [
            "boolean @event",
            "boolean @=client",
            "boolean @event=",
            "boolean @event=client delay=forever",
            "boolean @event=client@delay=forever",
            "boolean @event=client @event=server",
            "boolean @1st=x",
        ],
    )
    def test_malformed_tags(self, raw):
        """Malformed tag syntax raises ExpressionSyntaxError."""
        with pytest.raises(ExpressionSyntaxError):
            extract_annotations(raw)

    @pytest.mark.unit
    def test_missing_equals_offset(self):
        """Errors point at the offending tag."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            extract_annotations("boolean @event")
        assert exc_info.value.offset == 8


class TestAnnotationSet:
    """Tests for the AnnotationSet mapping."""

    @pytest.mark.unit
    def test_is_read_only(self):
        """Annotation sets cannot be mutated."""
        annotations = AnnotationSet({"event": "server"})
        with pytest.raises(TypeError):
            annotations["event"] = "client"  # type: ignore[index]

    @pytest.mark.unit
    def test_equality_and_hash(self):
        """Equal tags compare and hash equal."""
        a = AnnotationSet({"event": "server", "delay": "flush"})
        b = AnnotationSet({"delay": "flush", "event": "server"})
        assert a == b
        assert hash(a) == hash(b)
        assert a == {"event": "server", "delay": "flush"}

    @pytest.mark.unit
    def test_str_renders_tags(self):
        """String form uses the tag syntax."""
        assert str(AnnotationSet({"event": "server"})) == "@event=server"
