"""Tests for the parser configuration."""

import dataclasses

import pytest

from rsx_parser.shared.config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)


class TestParserConfig:
    """Test suite for ParserConfig."""

    def test_default_configuration(self):
        """Test default configuration values."""
        config = ParserConfig()

        assert config.flatten is False
        assert config.max_depth is None
        assert config.correlation_id is None

    def test_presets(self):
        """Test preset constructors."""
        assert ParserConfig.default() == ParserConfig()
        assert ParserConfig.flat().flatten is True

    def test_configuration_is_immutable(self):
        """Test that configuration cannot be mutated after creation."""
        config = ParserConfig()

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.flatten = True  # type: ignore[misc]

    @pytest.mark.parametrize("max_depth", [0, -3])
    def test_non_positive_max_depth_rejected(self, max_depth):
        """Test max_depth validation."""
        with pytest.raises(ConfigValidationError, match="max_depth must be > 0") as info:
            ParserConfig(max_depth=max_depth)

        assert info.value.field_name == "max_depth"

    def test_non_bool_flatten_rejected(self):
        """Test flatten type validation."""
        with pytest.raises(ConfigValidationError, match="flatten must be a bool"):
            ParserConfig(flatten="yes")  # type: ignore[arg-type]

    def test_bool_max_depth_rejected(self):
        """Test that a bool is not accepted as a depth."""
        with pytest.raises(ConfigValidationError, match="max_depth must be an int"):
            ParserConfig(max_depth=True)  # type: ignore[arg-type]

    def test_validation_error_is_config_error(self):
        """Test exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)

    def test_from_dict(self):
        """Test building configuration from a mapping."""
        config = ParserConfig.from_dict({"flatten": True, "max_depth": 8})

        assert config.flatten is True
        assert config.max_depth == 8

    def test_from_dict_unknown_keys(self):
        """Test unknown keys are rejected with suggestions."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration keys: flaten") as info:
            ParserConfig.from_dict({"flaten": True})

        assert "flatten" in info.value.suggestions

    def test_to_dict_round_trips_through_from_dict(self):
        """Test dictionary conversion."""
        config = ParserConfig(flatten=True, max_depth=3, correlation_id="abc")

        assert config.to_dict() == {
            "flatten": True,
            "max_depth": 3,
            "correlation_id": "abc",
        }
        assert ParserConfig.from_dict(config.to_dict()) == config
