"""
Connections feature module.

Usage:
    from src.features.connections.domain import Connection, check_compatibility
"""
from src.features.connections.domain import (
    Connection,
    CompatibilityStatus,
    CompatibilityRule,
    check_compatibility,
)

__all__ = [
    'Connection',
    'CompatibilityStatus',
    'CompatibilityRule',
    'check_compatibility',
]
