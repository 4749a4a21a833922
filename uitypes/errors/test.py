"""Tests for the error taxonomy."""

import pytest

from .lib import (
    ArityError,
    CompositionConflictError,
    CyclicValueError,
    ExpressionSyntaxError,
    SchemaError,
    UnknownTypeError,
)


class TestErrorAttributes:
    """Errors carry the data callers need to report them."""

    @pytest.mark.unit
    def test_syntax_error_keeps_raw_and_offset(self):
        """Syntax errors expose the source text and offset."""
        err = ExpressionSyntaxError("unexpected token", "A|", 2)
        assert err.raw == "A|"
        assert err.offset == 2
        assert "offset 2" in str(err)

    @pytest.mark.unit
    def test_conflict_names_both_contributors(self):
        """Conflict message names the field and both supertypes."""
        err = CompositionConflictError("symbol", "Image", "Text")
        assert err.field == "symbol"
        assert "Image" in str(err) and "Text" in str(err)

    @pytest.mark.unit
    def test_arity_error_counts(self):
        """Arity errors record expected and given counts."""
        err = ArityError("UI.Layout", 1, 3)
        assert (err.expected, err.given) == (1, 3)

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "error",
        [
            UnknownTypeError("UI.Pixel"),
            CyclicValueError("root.subject"),
            ArityError("X", 0, 1),
        ],
    )
    def test_all_errors_share_base(self, error):
        """Every engine error derives from SchemaError."""
        assert isinstance(error, SchemaError)
