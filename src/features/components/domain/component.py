"""
Component entity

A node in the system hierarchy. The root of a project has type SYSTEM,
everything else is a COMPONENT nested through parent_id.

A component exclusively owns its interfaces: their lifecycle is bound to
the component, and every interface's component_id must equal the owner's id.
Connections never live here; interfaces only carry the denormalized
is_connected/connection_id back-reference, maintained by the project store.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional, Tuple

from src.features.components.domain.component_type import ComponentType, InterfacePosition
from src.shared.domain.value_objects.point import Point


@dataclass(frozen=True)
class ComponentInterface:
    """
    A named, positioned instance of an interface definition on one component.

    interface_definition_id is a weak reference into the interface catalog.
    """
    id: str
    component_id: str
    interface_definition_id: str
    name: str
    position: InterfacePosition = InterfacePosition.RIGHT
    is_connected: bool = False
    connection_id: Optional[str] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Interface id cannot be empty")
        if not self.interface_definition_id:
            raise ValueError("Interface definition id cannot be empty")

    def connected_to(self, connection_id: str) -> 'ComponentInterface':
        """Copy marked as attached to a connection."""
        return replace(self, is_connected=True, connection_id=connection_id)

    def disconnected(self) -> 'ComponentInterface':
        """Copy with the connection back-reference cleared."""
        return replace(self, is_connected=False, connection_id=None)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {
            "id": self.id,
            "componentId": self.component_id,
            "interfaceDefinitionId": self.interface_definition_id,
            "name": self.name,
            "position": self.position.value,
            "isConnected": self.is_connected,
        }
        if self.connection_id is not None:
            data["connectionId"] = self.connection_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'ComponentInterface':
        """Create from dictionary"""
        return cls(
            id=data["id"],
            component_id=data.get("componentId") or "",
            interface_definition_id=data["interfaceDefinitionId"],
            name=data.get("name") or "",
            position=InterfacePosition.from_string(data.get("position") or "right"),
            is_connected=bool(data.get("isConnected", False)),
            connection_id=data.get("connectionId"),
        )


@dataclass(frozen=True)
class Component:
    """
    Component entity - a node in the system tree.

    position is the pre-migration layout field. Current data keeps layout
    in SystemView.component_positions; the field is only read as a fallback
    and folded into views by the normalization pass.
    """
    id: str
    name: str
    type: ComponentType = ComponentType.COMPONENT
    description: Optional[str] = None
    parent_id: Optional[str] = None
    interfaces: Tuple[ComponentInterface, ...] = field(default_factory=tuple)
    position: Optional[Point] = None

    def __post_init__(self):
        if not self.id:
            raise ValueError("Component id cannot be empty")
        if not isinstance(self.interfaces, tuple):
            object.__setattr__(self, "interfaces", tuple(self.interfaces))

    def get_interface(self, interface_id: str) -> Optional[ComponentInterface]:
        """Find an owned interface by id"""
        for interface in self.interfaces:
            if interface.id == interface_id:
                return interface
        return None

    def is_root(self) -> bool:
        return self.type == ComponentType.SYSTEM

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "interfaces": [interface.to_dict() for interface in self.interfaces],
        }
        if self.description is not None:
            data["description"] = self.description
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        if self.position is not None:
            data["position"] = self.position.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Component':
        """Create from dictionary (strict; see project_normalization for tolerant loading)"""
        position = data.get("position")
        return cls(
            id=data["id"],
            name=data["name"],
            type=ComponentType.from_string(data.get("type") or "component"),
            description=data.get("description"),
            parent_id=data.get("parentId"),
            interfaces=tuple(ComponentInterface.from_dict(i) for i in data.get("interfaces") or ()),
            position=Point.from_dict(position) if position is not None else None,
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.type.value})"
