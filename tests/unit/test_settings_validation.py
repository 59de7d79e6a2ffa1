"""
Tests for the settings validation framework.

Tests the ValidationResult, FieldValidator, and BaseSettings.validate() functionality.
"""
import pytest
from dataclasses import dataclass

from src.application.settings.base_settings import (
    BaseSettings,
    ValidationResult,
    FieldValidator,
    validated_field,
)


@dataclass
class StorageSettings(BaseSettings):
    debounce_ms: int = validated_field(150, min_value=0, max_value=10000)
    backend: str = validated_field("sqlite", choices=["sqlite", "memory"])
    key_prefix: str = validated_field("", pattern=r"^[a-z-]*$", pattern_message="Lowercase letters and dashes only")
    label: str = "default"  # No validator


class TestValidationResult:
    """Tests for ValidationResult class."""

    def test_initial_state_is_valid(self):
        result = ValidationResult()
        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []

    def test_add_error_marks_invalid(self):
        result = ValidationResult()
        result.add_error("debounce_ms: bad")
        assert result.valid is False
        assert bool(result) is False

    def test_add_warning_keeps_valid(self):
        result = ValidationResult()
        result.add_warning("database_path: unset")
        assert result
        assert result.warnings == ["database_path: unset"]

    def test_merge_invalid_makes_target_invalid(self):
        """Merging an invalid result into a valid one should make it invalid."""
        target = ValidationResult()
        target.add_warning("w")
        other = ValidationResult()
        other.add_error("e")

        target.merge(other)

        assert target.valid is False
        assert target.errors == ["e"]
        assert target.warnings == ["w"]


class TestFieldValidator:
    """Tests for FieldValidator class."""

    def test_range(self):
        validator = FieldValidator(min_value=0, max_value=1000)
        assert validator.validate(150, "debounce_ms")
        assert "below minimum" in validator.validate(-1, "debounce_ms").errors[0]
        assert "above maximum" in validator.validate(1001, "debounce_ms").errors[0]

    def test_bool_is_not_a_number(self):
        assert FieldValidator(min_value=5).validate(False, "flag").valid is True

    def test_choices(self):
        validator = FieldValidator(choices=["DEBUG", "INFO"])
        assert validator.validate("INFO", "log_level")
        assert "not in allowed choices" in validator.validate("LOUD", "log_level").errors[0]

    def test_pattern_custom_message(self):
        validator = FieldValidator(pattern=r"^\d+$", pattern_message="Digits only")
        assert validator.validate("123", "code")
        assert "Digits only" in validator.validate("abc", "code").errors[0]

    def test_length(self):
        validator = FieldValidator(min_length=2, max_length=4)
        assert validator.validate("car", "template")
        assert "below minimum" in validator.validate("c", "template").errors[0]
        assert "above maximum" in validator.validate("truck", "template").errors[0]

    def test_required(self):
        validator = FieldValidator(required=True)
        assert validator.validate("car", "default_template_id")
        assert "Required field" in validator.validate("  ", "default_template_id").errors[0]
        assert not validator.validate(None, "default_template_id")

    def test_allow_none(self):
        validator = FieldValidator(allow_none=False)
        assert "Cannot be None" in validator.validate(None, "debounce_ms").errors[0]

    def test_custom(self):
        def multiple_of_ten(value, field_name):
            if value % 10:
                return f"{field_name}: Must be a multiple of 10"
            return None

        validator = FieldValidator(custom=multiple_of_ten)
        assert validator.validate(150, "debounce_ms")
        assert "multiple of 10" in validator.validate(155, "debounce_ms").errors[0]


class TestBaseSettings:
    """Tests for BaseSettings validation and loading."""

    def test_defaults_are_valid(self):
        assert StorageSettings().is_valid() is True

    def test_validated_field_metadata(self):
        validators = StorageSettings.get_field_validators()
        assert validators["debounce_ms"].min_value == 0
        assert "label" not in validators

    def test_multiple_errors_reported(self):
        settings = StorageSettings(debounce_ms=-5, backend="postgres")
        result = settings.validate()
        assert result.valid is False
        assert len(result.errors) == 2

    def test_validate_field_single(self):
        settings = StorageSettings(debounce_ms=-5, backend="postgres")
        result = settings.validate_field("backend")
        assert len(result.errors) == 1
        assert "backend" in result.errors[0]
        assert StorageSettings().validate_field("label").valid is True

    def test_validate_unknown_field(self):
        with pytest.raises(AttributeError):
            StorageSettings().validate_field("missing")

    def test_from_dict_ignores_unknown_keys(self):
        settings = StorageSettings.from_dict({"backend": "memory", "removed_option": True})
        assert settings.backend == "memory"
        assert settings.debounce_ms == 150

    def test_from_dict_does_not_validate(self):
        """Values load as stored; validation is a separate step."""
        settings = StorageSettings.from_dict({"key_prefix": "Bad Prefix"})
        assert settings.key_prefix == "Bad Prefix"
        assert "Lowercase letters" in settings.validate().errors[0]

    def test_round_trip(self):
        settings = StorageSettings(debounce_ms=300, label="x")
        assert StorageSettings.from_dict(settings.to_dict()) == settings
