"""
Project entity

Top-level aggregate of a system model. A project exclusively owns its
components (and through them their interfaces), its connections and its
system views. Snapshots are immutable: every mutation goes through the
project store / system view commands and yields a new Project.
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from src.features.components.domain.component import Component, ComponentInterface
from src.features.connections.domain.connection import Connection
from src.features.system_views.domain.system_view import SystemView


CURRENT_SCHEMA_VERSION = 2


@dataclass(frozen=True)
class Project:
    """
    Project entity.

    A project contains:
    - components: the authoritative component list (tree via parent_id)
    - connections: edges between component interfaces
    - system_views: saved perspectives, never empty once normalized
    - current_system_view_id: pointer into system_views (may dangle;
      readers fall back to the first view)
    """
    id: str
    name: str
    description: Optional[str] = None
    components: Tuple[Component, ...] = ()
    connections: Tuple[Connection, ...] = ()
    system_views: Tuple[SystemView, ...] = ()
    current_system_view_id: Optional[str] = None
    schema_version: int = CURRENT_SCHEMA_VERSION

    def __post_init__(self):
        if not self.id:
            raise ValueError("Project id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("Project name cannot be empty")
        for name in ("components", "connections", "system_views"):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))

    def get_component(self, component_id: str) -> Optional[Component]:
        for component in self.components:
            if component.id == component_id:
                return component
        return None

    def get_interface(self, component_id: str, interface_id: str) -> Optional[ComponentInterface]:
        component = self.get_component(component_id)
        if component is None:
            return None
        return component.get_interface(interface_id)

    def get_connection(self, connection_id: str) -> Optional[Connection]:
        for connection in self.connections:
            if connection.id == connection_id:
                return connection
        return None

    def get_system_view(self, view_id: str) -> Optional[SystemView]:
        for view in self.system_views:
            if view.id == view_id:
                return view
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {
            "id": self.id,
            "name": self.name,
            "schemaVersion": self.schema_version,
            "components": [component.to_dict() for component in self.components],
            "connections": [connection.to_dict() for connection in self.connections],
            "systemViews": [view.to_dict() for view in self.system_views],
        }
        if self.description is not None:
            data["description"] = self.description
        if self.current_system_view_id is not None:
            data["currentSystemViewId"] = self.current_system_view_id
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Project':
        """
        Create from dictionary (strict).

        Persisted records should go through
        project_normalization.validate_and_migrate_project instead.
        """
        project_id = data["id"]
        return cls(
            id=project_id,
            name=data["name"],
            description=data.get("description"),
            components=tuple(Component.from_dict(c) for c in data.get("components") or ()),
            connections=tuple(Connection.from_dict(c) for c in data.get("connections") or ()),
            system_views=tuple(SystemView.from_dict(v, project_id) for v in data.get("systemViews") or ()),
            current_system_view_id=data.get("currentSystemViewId") or data.get("activeSystemViewId"),
            schema_version=int(data.get("schemaVersion") or 1),
        )

    def __str__(self) -> str:
        return f"Project({self.name}, {len(self.components)} components, {len(self.connections)} connections)"
