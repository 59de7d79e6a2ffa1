"""
Application Settings

Global settings for the Require application.

Usage:
    settings = AppSettings.from_env()
    result = settings.validate()
    if not result:
        ...
    engine = PersistenceEngine(store, debounce_ms=settings.save_debounce_ms)
"""
from dataclasses import dataclass, fields
from typing import Mapping, Optional
import os

from src.application.settings.base_settings import BaseSettings, validated_field
from src.shared.application.persistence.debounced_value import DEFAULT_DEBOUNCE_MS
from src.utils.message import Log, LEVELS
from src.utils.paths import get_database_path


ENV_PREFIX = "REQUIRE_"

TRUE_VALUES = {"1", "true", "yes", "on"}
FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class AppSettings(BaseSettings):
    """
    Global application settings schema.

    All fields have defaults so older stored settings keep loading.
    """

    # Persistence
    save_debounce_ms: int = validated_field(DEFAULT_DEBOUNCE_MS, min_value=0, allow_none=False)
    database_path: str = ""  # empty = platform default (see src.utils.paths)

    # Logging
    log_level: str = validated_field("INFO", choices=list(LEVELS))
    log_to_file: bool = False

    # Project creation
    default_template_id: str = validated_field("car", required=True)

    def resolved_database_path(self) -> str:
        """database_path, or the platform default when unset."""
        if self.database_path:
            return self.database_path
        return str(get_database_path())

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AppSettings':
        """
        Settings from REQUIRE_* environment variables, e.g.
        REQUIRE_SAVE_DEBOUNCE_MS=300 or REQUIRE_LOG_LEVEL=DEBUG.

        Unparsable values are logged and left at their defaults.
        """
        environ = os.environ if environ is None else environ
        settings = cls()
        values = {}
        for f in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{f.name.upper()}")
            if raw is None:
                continue
            default = getattr(settings, f.name)
            try:
                values[f.name] = _parse_env_value(raw, default)
            except ValueError:
                Log.warning(f"AppSettings: Ignoring invalid value for {ENV_PREFIX}{f.name.upper()}: {raw!r}")
        if "log_level" in values:
            values["log_level"] = values["log_level"].upper()
        return cls.from_dict(values)


def _parse_env_value(raw: str, default):
    """Coerce an environment string to the type of the field's default."""
    if isinstance(default, bool):
        lowered = raw.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        raise ValueError(raw)
    if isinstance(default, int):
        return int(raw.strip())
    return raw
