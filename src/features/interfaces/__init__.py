"""
Interfaces feature module (global interface catalog).

Usage:
    from src.features.interfaces.domain import InterfaceDefinition, DEFAULT_INTERFACES
"""
from src.features.interfaces.domain import InterfaceDefinition, DEFAULT_INTERFACES

__all__ = ['InterfaceDefinition', 'DEFAULT_INTERFACES']
