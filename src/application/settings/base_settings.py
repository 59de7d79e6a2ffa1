"""
Base Settings

Dataclass foundation for settings schemas.

A schema is a plain dataclass whose fields all have defaults. Fields that
need checking are declared with validated_field(), which stores a
FieldValidator in the field metadata; BaseSettings.validate() walks them.

Loading is tolerant: from_dict() fills missing keys with defaults and drops
keys the schema no longer has, so settings written by older versions keep
loading. Validation is a separate, explicit step.

Usage:
    @dataclass
    class StorageSettings(BaseSettings):
        debounce_ms: int = validated_field(150, min_value=0)
        backend: str = validated_field("sqlite", choices=["sqlite", "memory"])

    settings = StorageSettings.from_dict(stored)
    if not settings.validate():
        ...
"""
from dataclasses import dataclass, asdict, fields, field
from typing import Optional, Dict, Any, List, Callable, Union
from enum import Enum
import re


VALIDATOR_KEY = "validator"


@dataclass
class ValidationResult:
    """
    Outcome of a validation pass.

    Truthy when no errors were recorded. Warnings never affect validity.
    """
    valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str):
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)

    def merge(self, other: 'ValidationResult'):
        """Fold another result into this one."""
        self.valid = self.valid and other.valid
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)

    def __bool__(self) -> bool:
        return self.valid


def _as_number(value: Any) -> Optional[Union[int, float]]:
    # bool is an int subclass but never a meaningful number here
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


@dataclass
class FieldValidator:
    """
    Rules for one settings field.

    Every rule is optional; rules that do not apply to the value's type
    (a range on a string, a pattern on a number) are skipped.
    """
    min_value: Optional[Union[int, float]] = None
    max_value: Optional[Union[int, float]] = None
    choices: Optional[List[Any]] = None
    pattern: Optional[str] = None
    pattern_message: Optional[str] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    required: bool = False
    allow_none: bool = True
    # (value, field_name) -> error message or None
    custom: Optional[Callable[[Any, str], Optional[str]]] = None

    def validate(self, value: Any, field_name: str) -> ValidationResult:
        """
        Check value against every rule.

        None and empty required values stop further checks.
        """
        result = ValidationResult()

        if value is None:
            if not self.allow_none:
                result.add_error(f"{field_name}: Cannot be None")
            elif self.required:
                result.add_error(f"{field_name}: Required field cannot be empty")
            return result

        if self.required and self._is_empty(value):
            result.add_error(f"{field_name}: Required field cannot be empty")
            return result

        for check in (self._check_range, self._check_choices, self._check_pattern, self._check_length, self._check_custom):
            for message in check(value, field_name):
                result.add_error(message)
        return result

    @staticmethod
    def _is_empty(value: Any) -> bool:
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, (list, dict)):
            return len(value) == 0
        return False

    def _check_range(self, value, field_name):
        number = _as_number(value)
        if number is None:
            return
        if self.min_value is not None and number < self.min_value:
            yield f"{field_name}: Value {number} is below minimum {self.min_value}"
        if self.max_value is not None and number > self.max_value:
            yield f"{field_name}: Value {number} is above maximum {self.max_value}"

    def _check_choices(self, value, field_name):
        if self.choices is None:
            return
        allowed = [c.value if isinstance(c, Enum) else c for c in self.choices]
        actual = value.value if isinstance(value, Enum) else value
        if actual not in allowed:
            yield f"{field_name}: Value '{value}' not in allowed choices: {self.choices}"

    def _check_pattern(self, value, field_name):
        if self.pattern is None or not isinstance(value, str):
            return
        if re.match(self.pattern, value) is None:
            yield f"{field_name}: {self.pattern_message or 'Value does not match required pattern'}"

    def _check_length(self, value, field_name):
        if not hasattr(value, "__len__"):
            return
        length = len(value)
        if self.min_length is not None and length < self.min_length:
            yield f"{field_name}: Length {length} is below minimum {self.min_length}"
        if self.max_length is not None and length > self.max_length:
            yield f"{field_name}: Length {length} is above maximum {self.max_length}"

    def _check_custom(self, value, field_name):
        if self.custom is None:
            return
        message = self.custom(value, field_name)
        if message:
            yield message


def validated_field(default: Any = None, *, metadata: Optional[Dict[str, Any]] = None, **rules):
    """
    dataclasses.field() carrying a FieldValidator built from the keyword rules.

    Example:
        log_level: str = validated_field("INFO", choices=["DEBUG", "INFO"])
    """
    metadata = dict(metadata or {})
    metadata[VALIDATOR_KEY] = FieldValidator(**rules)
    return field(default=default, metadata=metadata)


def _validator_of(f) -> Optional[FieldValidator]:
    validator = f.metadata.get(VALIDATOR_KEY) if f.metadata else None
    return validator if isinstance(validator, FieldValidator) else None


@dataclass
class BaseSettings:
    """
    Base class for settings dataclasses.

    Subclasses give every field a default.
    """

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseSettings':
        """Defaults overlaid with the known keys of data; nothing is validated."""
        known = {f.name for f in fields(cls)}
        values = asdict(cls())
        values.update((k, v) for k, v in data.items() if k in known)
        return cls(**values)

    def validate(self) -> ValidationResult:
        """Run every field validator. Fields without one are valid."""
        result = ValidationResult()
        for name, validator in self.get_field_validators().items():
            result.merge(validator.validate(getattr(self, name), name))
        return result

    def validate_field(self, field_name: str) -> ValidationResult:
        """
        Run one field's validator.

        Raises:
            AttributeError: If the schema has no such field
        """
        for f in fields(self):
            if f.name == field_name:
                validator = _validator_of(f)
                if validator is None:
                    return ValidationResult()
                return validator.validate(getattr(self, field_name), field_name)
        raise AttributeError(f"Field '{field_name}' not found in {self.__class__.__name__}")

    def is_valid(self) -> bool:
        return self.validate().valid

    @classmethod
    def get_field_validators(cls) -> Dict[str, FieldValidator]:
        """Field name -> validator, for fields that have one."""
        validators = {}
        for f in fields(cls):
            validator = _validator_of(f)
            if validator is not None:
                validators[f.name] = validator
        return validators
