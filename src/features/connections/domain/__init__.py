"""
Domain layer for connections.

Contains:
- Connection entity and CompatibilityStatus
- Compatibility engine (check_compatibility, CompatibilityRule)
"""
from src.features.connections.domain.connection import Connection, CompatibilityStatus
from src.features.connections.domain.compatibility import (
    CompatibilityRule,
    DEFAULT_COMPATIBILITY_RULES,
    check_compatibility,
)

__all__ = [
    'Connection',
    'CompatibilityStatus',
    'CompatibilityRule',
    'DEFAULT_COMPATIBILITY_RULES',
    'check_compatibility',
]
