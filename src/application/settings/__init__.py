"""
Application Settings Module

Classes:
    BaseSettings: Base dataclass for settings schemas
    FieldValidator / ValidationResult: field validation
    AppSettings: Global application settings

Usage:
    from src.application.settings import AppSettings
    settings = AppSettings.from_env()
"""

from .base_settings import BaseSettings, FieldValidator, ValidationResult, validated_field
from .app_settings import AppSettings

__all__ = [
    'BaseSettings',
    'FieldValidator',
    'ValidationResult',
    'validated_field',
    'AppSettings',
]
