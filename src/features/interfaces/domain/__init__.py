"""
Domain layer for the interface catalog.
"""
from src.features.interfaces.domain.interface_definition import (
    InterfaceDefinition,
    DEFAULT_INTERFACES,
    DEFAULT_ICON,
    find_definition,
    resolve_icon,
)

__all__ = [
    'InterfaceDefinition',
    'DEFAULT_INTERFACES',
    'DEFAULT_ICON',
    'find_definition',
    'resolve_icon',
]
