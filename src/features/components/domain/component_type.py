"""
Component type and interface position value objects
"""
from enum import Enum


class ComponentType(Enum):
    """
    Role of a component in the system tree.

    - SYSTEM: the root of a project
    - COMPONENT: everything below the root
    """
    SYSTEM = "system"
    COMPONENT = "component"

    @classmethod
    def from_string(cls, value: str) -> 'ComponentType':
        """Create ComponentType from string"""
        value_lower = value.lower()
        if value_lower == "system":
            return cls.SYSTEM
        elif value_lower == "component":
            return cls.COMPONENT
        else:
            raise ValueError(f"Invalid component type: {value}")


class InterfacePosition(Enum):
    """Side of the component box an interface handle is drawn on."""
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"

    @classmethod
    def from_string(cls, value: str) -> 'InterfacePosition':
        """Create InterfacePosition from string"""
        try:
            return cls(value.lower())
        except ValueError:
            raise ValueError(f"Invalid interface position: {value}") from None
