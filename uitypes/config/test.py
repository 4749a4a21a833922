"""Tests for configuration management."""

import pytest

from .lib import (
    EnvConfig,
    EnvVar,
    get_default_catalogue,
    get_environment,
    get_environment_info,
    get_log_level,
    get_max_depth,
    list_environment_variables,
    strict_annotations,
)

# =============================================================================
# Tests for get_environment (main interface)
# =============================================================================


class TestGetEnvironment:
    """Tests for the unified get_environment interface."""

    @pytest.mark.unit
    def test_returns_default_when_not_set(self, monkeypatch):
        """Returns default value when env var is not set."""
        monkeypatch.delenv("UITYPES_MAX_DEPTH", raising=False)
        assert get_environment(EnvVar.UITYPES_MAX_DEPTH) == 64

    @pytest.mark.unit
    def test_override_takes_priority(self, monkeypatch):
        """Override parameter takes highest priority."""
        monkeypatch.setenv("UITYPES_MAX_DEPTH", "9")
        assert get_environment(EnvVar.UITYPES_MAX_DEPTH, override=5) == 5

    @pytest.mark.unit
    def test_int_type_conversion(self, monkeypatch):
        """Integer type conversion from string."""
        monkeypatch.setenv("UITYPES_MAX_DEPTH", "12")
        result = get_environment(EnvVar.UITYPES_MAX_DEPTH)
        assert result == 12
        assert isinstance(result, int)

    @pytest.mark.unit
    def test_invalid_int_falls_back_to_default(self, monkeypatch):
        """Unparseable integers fall back to the default."""
        monkeypatch.setenv("UITYPES_MAX_DEPTH", "deep")
        assert get_environment(EnvVar.UITYPES_MAX_DEPTH) == 64

    @pytest.mark.unit
    def test_bool_type_conversion(self, monkeypatch):
        """Boolean type conversion for true and false values."""
        for value in ("true", "1", "yes", "TRUE"):
            monkeypatch.setenv("UITYPES_STRICT_ANNOTATIONS", value)
            assert get_environment(EnvVar.UITYPES_STRICT_ANNOTATIONS) is True
        for value in ("false", "0", "no", "No"):
            monkeypatch.setenv("UITYPES_STRICT_ANNOTATIONS", value)
            assert get_environment(EnvVar.UITYPES_STRICT_ANNOTATIONS) is False

    @pytest.mark.unit
    def test_invalid_bool_returns_default(self, monkeypatch):
        """Invalid boolean returns default."""
        monkeypatch.setenv("UITYPES_STRICT_ANNOTATIONS", "maybe")
        assert get_environment(EnvVar.UITYPES_STRICT_ANNOTATIONS) is False


class TestConvenienceFunctions:
    """Tests for the typed convenience accessors."""

    @pytest.mark.unit
    def test_max_depth_rejects_non_positive(self, monkeypatch):
        """A zero or negative bound falls back to the default."""
        monkeypatch.setenv("UITYPES_MAX_DEPTH", "0")
        assert get_max_depth() == 64
        assert get_max_depth(override=3) == 3

    @pytest.mark.unit
    def test_log_level_is_upper_case(self, monkeypatch):
        """Log level names are normalized."""
        monkeypatch.setenv("UITYPES_LOG_LEVEL", "debug")
        assert get_log_level() == "DEBUG"

    @pytest.mark.unit
    def test_default_catalogue(self, monkeypatch):
        """Catalogue selection reads the environment."""
        monkeypatch.delenv("UITYPES_CATALOGUE", raising=False)
        assert get_default_catalogue() == "std"
        monkeypatch.setenv("UITYPES_CATALOGUE", "pub")
        assert get_default_catalogue() == "pub"

    @pytest.mark.unit
    def test_strict_annotations_default(self, monkeypatch):
        """Strict annotation parsing is off by default."""
        monkeypatch.delenv("UITYPES_STRICT_ANNOTATIONS", raising=False)
        assert strict_annotations() is False


class TestIntrospection:
    """Tests for environment variable metadata."""

    @pytest.mark.unit
    def test_info_is_env_config(self):
        """Metadata lookup returns the EnvConfig."""
        info = get_environment_info(EnvVar.UITYPES_MAX_DEPTH)
        assert isinstance(info, EnvConfig)
        assert info.var_type is int

    @pytest.mark.unit
    def test_list_by_category(self):
        """Filtering by category returns matching members only."""
        assert list_environment_variables("resolution") == [EnvVar.UITYPES_MAX_DEPTH]
        assert len(list_environment_variables()) == len(EnvVar)
