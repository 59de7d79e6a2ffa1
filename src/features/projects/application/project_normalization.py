"""
Project normalization

Load-time validation and migration of persisted project records.

Stored projects may come from any earlier version of the application, or
may have been hand-edited. validate_and_migrate_project rebuilds a Project
field by field, skipping what cannot be repaired, then reconciles the
denormalized back-references so every snapshot handed to callers satisfies
the project invariants.

Schema history:
    1: layout stored on Component.position
    2: layout stored per SystemView (componentPositions)
"""
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Optional

from src.features.components.domain.component import Component, ComponentInterface
from src.features.components.domain.component_type import ComponentType, InterfacePosition
from src.features.connections.domain.connection import Connection
from src.features.projects.domain.project import CURRENT_SCHEMA_VERSION, Project
from src.features.system_views.application.system_view_commands import ensure_has_system_views
from src.features.system_views.domain.system_view import SystemView
from src.shared.domain.errors import ProjectValidationError
from src.shared.domain.value_objects.point import Point
from src.shared.utils.identity import generate_id
from src.utils.message import Log


UNNAMED_COMPONENT = "Unnamed Component"

# Types written by older versions that no longer exist
LEGACY_COMPONENT_TYPES = {"subsystem": ComponentType.COMPONENT}


def validate_and_migrate_project(data: Any) -> Optional[Project]:
    """
    Rebuild a persisted project record.

    Args:
        data: Decoded JSON record

    Returns:
        A normalized Project at CURRENT_SCHEMA_VERSION, or None when the
        record is irreparable (the caller discards it).
    """
    try:
        project = _build_project(data)
        if project.schema_version < 2:
            project = _migrate_positions_to_views(project)
        return normalize_project(replace(project, schema_version=CURRENT_SCHEMA_VERSION))
    except ProjectValidationError as e:
        Log.warning(f"ProjectNormalization: Discarding project record: {e}")
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        Log.warning(f"ProjectNormalization: Discarding unreadable project record: {e!r}")
    return None


def normalize_project(project: Project) -> Project:
    """
    Reconcile back-references on an already constructed Project.

    - interface component_id is set to the owning component
    - connections whose endpoints do not resolve are dropped
    - interface is_connected/connection_id are recomputed from connections
    - at least one view exists and the current view resolves
    """
    components = tuple(
        replace(c, interfaces=tuple(
            i if i.component_id == c.id else replace(i, component_id=c.id) for i in c.interfaces
        ))
        for c in project.components
    )
    interfaces = {(c.id, i.id) for c in components for i in c.interfaces}

    connections = []
    for connection in project.connections:
        source = (connection.source_component_id, connection.source_interface_id)
        target = (connection.target_component_id, connection.target_interface_id)
        if source in interfaces and target in interfaces:
            connections.append(connection)
        else:
            Log.warning(f"ProjectNormalization: Dropping dangling connection '{connection.id}' in project '{project.name}'")

    # Later connections win, matching create_connection's overwrite order
    attached: Dict[tuple, str] = {}
    for connection in connections:
        attached[(connection.source_component_id, connection.source_interface_id)] = connection.id
        attached[(connection.target_component_id, connection.target_interface_id)] = connection.id

    reconciled = []
    for component in components:
        fixed = []
        for interface in component.interfaces:
            connection_id = attached.get((component.id, interface.id))
            if connection_id is None:
                fixed.append(interface.disconnected() if interface.is_connected or interface.connection_id else interface)
            elif interface.connection_id != connection_id or not interface.is_connected:
                fixed.append(interface.connected_to(connection_id))
            else:
                fixed.append(interface)
        reconciled.append(replace(component, interfaces=tuple(fixed)))

    normalized = replace(project, components=tuple(reconciled), connections=tuple(connections))
    if normalized == project:
        normalized = project
    return ensure_has_system_views(normalized)


def _migrate_positions_to_views(project: Project) -> Project:
    """
    Fold legacy Component.position values into view layouts, then clear them.

    A project with no views gets its default view from the legacy positions.
    Existing views only receive positions for components they do not place.
    """
    legacy = {c.id: c.position for c in project.components if c.position is not None}
    if not project.system_views:
        project = ensure_has_system_views(project)
    elif legacy:
        views = []
        for view in project.system_views:
            missing = {cid: p for cid, p in legacy.items() if cid not in view.component_positions}
            if missing:
                view = replace(view, component_positions={**view.component_positions, **missing})
            views.append(view)
        project = replace(project, system_views=tuple(views))

    if legacy:
        Log.info(f"ProjectNormalization: Migrated {len(legacy)} legacy position(s) in project '{project.name}'")
    return replace(
        project,
        components=tuple(replace(c, position=None) if c.position is not None else c for c in project.components),
    )


# =============================================================================
# Tolerant reconstruction
# =============================================================================

def _build_project(data: Any) -> Project:
    if not isinstance(data, Mapping):
        raise ProjectValidationError(f"expected an object, got {type(data).__name__}")
    project_id = data.get("id")
    name = data.get("name")
    if not isinstance(project_id, str) or not project_id:
        raise ProjectValidationError("missing project id")
    if not isinstance(name, str) or not name.strip():
        raise ProjectValidationError(f"project '{project_id}' has no name")
    if not isinstance(data.get("components"), list):
        raise ProjectValidationError(f"project '{project_id}' has no components list")

    components = [c for c in (_build_component(raw) for raw in data["components"]) if c is not None]
    connections = [c for c in (_build_connection(raw) for raw in _list_field(data, "connections", project_id)) if c is not None]
    views = [v for v in (_build_view(raw, project_id) for raw in _list_field(data, "systemViews", project_id)) if v is not None]

    try:
        schema_version = int(data.get("schemaVersion") or 1)
    except (TypeError, ValueError):
        schema_version = 1

    description = data.get("description")
    return Project(
        id=project_id,
        name=name,
        description=description if isinstance(description, str) else None,
        components=tuple(components),
        connections=tuple(connections),
        system_views=tuple(views),
        current_system_view_id=data.get("currentSystemViewId") or data.get("activeSystemViewId"),
        schema_version=schema_version,
    )


def _list_field(data: Mapping, key: str, owner: str) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        Log.warning(f"ProjectNormalization: Ignoring non-list '{key}' on '{owner}'")
        return []
    return value


def _component_type(value: Any) -> ComponentType:
    if isinstance(value, str):
        if value.lower() in LEGACY_COMPONENT_TYPES:
            return LEGACY_COMPONENT_TYPES[value.lower()]
        try:
            return ComponentType.from_string(value)
        except ValueError:
            pass
    return ComponentType.COMPONENT


def _interface_position(value: Any) -> InterfacePosition:
    if isinstance(value, str):
        try:
            return InterfacePosition.from_string(value)
        except ValueError:
            pass
    return InterfacePosition.RIGHT


def _build_component(raw: Any) -> Optional[Component]:
    if not isinstance(raw, Mapping):
        Log.warning(f"ProjectNormalization: Skipping malformed component {raw!r}")
        return None

    component_id = raw.get("id") if isinstance(raw.get("id"), str) and raw.get("id") else generate_id()
    name = raw.get("name") if isinstance(raw.get("name"), str) and raw.get("name").strip() else UNNAMED_COMPONENT

    interfaces: List[ComponentInterface] = []
    for raw_interface in _list_field(raw, "interfaces", component_id):
        interface = _build_interface(raw_interface, component_id)
        if interface is not None:
            interfaces.append(interface)

    position = None
    if raw.get("position") is not None:
        try:
            position = Point.from_dict(raw["position"])
        except ValueError:
            Log.warning(f"ProjectNormalization: Ignoring malformed position on component '{component_id}'")

    description = raw.get("description")
    parent_id = raw.get("parentId")
    return Component(
        id=component_id,
        name=name,
        type=_component_type(raw.get("type")),
        description=description if isinstance(description, str) else None,
        parent_id=parent_id if isinstance(parent_id, str) and parent_id else None,
        interfaces=tuple(interfaces),
        position=position,
    )


def _build_interface(raw: Any, component_id: str) -> Optional[ComponentInterface]:
    if not isinstance(raw, Mapping) or not raw.get("id") or not raw.get("interfaceDefinitionId"):
        Log.warning(f"ProjectNormalization: Skipping malformed interface on component '{component_id}'")
        return None
    return ComponentInterface(
        id=raw["id"],
        component_id=component_id,
        interface_definition_id=raw["interfaceDefinitionId"],
        name=raw.get("name") if isinstance(raw.get("name"), str) else raw["interfaceDefinitionId"],
        position=_interface_position(raw.get("position")),
        is_connected=bool(raw.get("isConnected", False)),
        connection_id=raw.get("connectionId"),
    )


def _build_connection(raw: Any) -> Optional[Connection]:
    try:
        return Connection.from_dict(raw)
    except (KeyError, TypeError, ValueError) as e:
        Log.warning(f"ProjectNormalization: Skipping malformed connection: {e}")
        return None


def _build_view(raw: Any, project_id: str) -> Optional[SystemView]:
    try:
        view = SystemView.from_dict(raw, project_id)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        Log.warning(f"ProjectNormalization: Skipping malformed system view: {e}")
        return None
    if view.project_id != project_id:
        view = replace(view, project_id=project_id)
    return view
