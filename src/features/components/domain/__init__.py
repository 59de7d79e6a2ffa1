"""
Domain layer for components.

Contains:
- Component entity and its owned ComponentInterface instances
- ComponentType / InterfacePosition value objects
"""
from src.features.components.domain.component_type import ComponentType, InterfacePosition
from src.features.components.domain.component import Component, ComponentInterface

__all__ = [
    'Component',
    'ComponentInterface',
    'ComponentType',
    'InterfacePosition',
]
