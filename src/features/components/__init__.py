"""
Components feature module.

Usage:
    from src.features.components.domain import Component, ComponentInterface
"""
from src.features.components.domain import (
    Component,
    ComponentInterface,
    ComponentType,
    InterfacePosition,
)

__all__ = [
    'Component',
    'ComponentInterface',
    'ComponentType',
    'InterfacePosition',
]
