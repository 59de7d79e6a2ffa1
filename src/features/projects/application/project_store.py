"""
Project Store

Invariant-preserving operations over Project snapshots. Every function is
pure: it takes a Project and returns a new Project (or a derived value),
never mutating its input.

The store is the single choke point for the denormalized back-references:
- ComponentInterface.component_id always names the owning component
- ComponentInterface.is_connected/connection_id track the connections list
- SystemView visibility/positions track the component list

Update/remove operations on unknown ids are no-ops returning the identical
project, so UI races (double-click delete and the like) are harmless.
"""
import math
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Union

from src.features.components.domain.component import Component, ComponentInterface
from src.features.components.domain.component_type import ComponentType, InterfacePosition
from src.features.connections.domain.compatibility import CompatibilityRule, check_compatibility
from src.features.connections.domain.connection import CompatibilityStatus, Connection
from src.features.projects.domain.project import Project
from src.features.system_views.application.system_view_commands import (
    as_point,
    ensure_has_system_views,
    get_current_view,
    get_default_view,
)
from src.features.system_views.domain.system_view import (
    create_default_view,
    next_grid_position,
    with_component,
    without_components,
)
from src.features.templates.application.template_registry import create_default_registry
from src.shared.domain.errors import InterfaceReferenceError
from src.shared.utils.identity import generate_id
from src.utils.message import Log


# Fields a caller may change through update_component
UPDATABLE_COMPONENT_FIELDS = frozenset({"name", "description", "type", "parent_id", "interfaces", "position"})


@dataclass(frozen=True)
class CompatibilityIssue:
    """A connection whose endpoints are not known to be compatible."""
    connection_id: str
    message: str
    severity: str  # "error" | "warning"


# =============================================================================
# Creation
# =============================================================================

def create_project(name: str, description: Optional[str] = None) -> Project:
    """
    Create a blank project: one root system component and one default view
    containing it, selected as current.
    """
    project_id = generate_id()
    root = Component(
        id=generate_id(),
        name=f"{name} System",
        description=f"Root system for {name}",
        type=ComponentType.SYSTEM,
    )
    view = create_default_view(project_id, [root])
    project = Project(
        id=project_id,
        name=name,
        description=description,
        components=(root,),
        system_views=(view,),
        current_system_view_id=view.id,
    )
    Log.info(f"ProjectStore: Created project '{name}'")
    return project


def create_from_template(template_id: str, name: str, description: Optional[str] = None, registry=None) -> Project:
    """
    Create a project from a registered template.

    The template's graph is copied with fresh ids for every entity, so two
    projects built from the same template never share ids.

    Raises:
        TemplateNotFoundError: If the template id is not registered
    """
    if registry is None:
        registry = create_default_registry()
    template = registry.require(template_id)
    project = reassign_ids(template.build(name, description))
    Log.info(f"ProjectStore: Created project '{name}' from template '{template_id}'")
    return ensure_has_system_views(project)


def reassign_ids(project: Project) -> Project:
    """
    Copy of a project graph with fresh ids for the project, its components,
    interfaces, connections and views. Interfaces get their component_id in
    a second pass, once the owner's new id is known.
    """
    component_ids: Dict[str, str] = {c.id: generate_id() for c in project.components}
    interface_ids: Dict[str, str] = {}
    connection_ids: Dict[str, str] = {c.id: generate_id() for c in project.connections}
    project_id = generate_id()

    components = []
    for component in project.components:
        interfaces = []
        for interface in component.interfaces:
            interface_ids[interface.id] = generate_id()
            interfaces.append(replace(
                interface,
                id=interface_ids[interface.id],
                connection_id=connection_ids.get(interface.connection_id) if interface.connection_id else None,
            ))
        components.append(replace(
            component,
            id=component_ids[component.id],
            parent_id=component_ids.get(component.parent_id, component.parent_id) if component.parent_id else None,
            interfaces=tuple(interfaces),
        ))

    # Second pass: owner back-references
    components = [
        replace(component, interfaces=tuple(replace(i, component_id=component.id) for i in component.interfaces))
        for component in components
    ]

    connections = tuple(
        replace(
            connection,
            id=connection_ids[connection.id],
            source_component_id=component_ids.get(connection.source_component_id, connection.source_component_id),
            source_interface_id=interface_ids.get(connection.source_interface_id, connection.source_interface_id),
            target_component_id=component_ids.get(connection.target_component_id, connection.target_component_id),
            target_interface_id=interface_ids.get(connection.target_interface_id, connection.target_interface_id),
        )
        for connection in project.connections
    )

    view_ids = {v.id: generate_id() for v in project.system_views}
    views = tuple(
        replace(
            view,
            id=view_ids[view.id],
            project_id=project_id,
            component_positions={component_ids.get(cid, cid): p for cid, p in view.component_positions.items()},
            visible_components=tuple(component_ids.get(cid, cid) for cid in view.visible_components),
            visible_interfaces=tuple(interface_ids.get(iid, iid) for iid in view.visible_interfaces),
        )
        for view in project.system_views
    )

    return replace(
        project,
        id=project_id,
        components=tuple(components),
        connections=connections,
        system_views=views,
        current_system_view_id=view_ids.get(project.current_system_view_id) if project.current_system_view_id else None,
    )


# =============================================================================
# Components
# =============================================================================

def find_component(project: Project, component_id: str) -> Optional[Component]:
    return project.get_component(component_id)


def find_interface(project: Project, component_id: str, interface_id: str) -> Optional[ComponentInterface]:
    return project.get_interface(component_id, interface_id)


def get_children(project: Project, component_id: str) -> List[Component]:
    """Direct children of a component."""
    return [c for c in project.components if c.parent_id == component_id]


def get_descendant_ids(project: Project, component_id: str) -> Set[str]:
    """Ids of every component below `component_id` in the tree."""
    children_of: Dict[str, List[str]] = {}
    for component in project.components:
        if component.parent_id:
            children_of.setdefault(component.parent_id, []).append(component.id)

    descendants: Set[str] = set()
    stack = list(children_of.get(component_id, ()))
    while stack:
        current = stack.pop()
        if current in descendants or current == component_id:
            continue
        descendants.add(current)
        stack.extend(children_of.get(current, ()))
    return descendants


def _build_interface(component_id: str, data: Union[ComponentInterface, Mapping[str, Any]]) -> ComponentInterface:
    """New unconnected interface owned by component_id."""
    if isinstance(data, ComponentInterface):
        definition_id, name, position = data.interface_definition_id, data.name, data.position
    else:
        definition_id = data["interface_definition_id"]
        name = data.get("name") or definition_id
        position = data.get("position") or InterfacePosition.RIGHT
    if isinstance(position, str):
        position = InterfacePosition.from_string(position)
    return ComponentInterface(
        id=generate_id(),
        component_id=component_id,
        interface_definition_id=definition_id,
        name=name,
        position=position,
    )


def add_component(project: Project, data: Union[Component, Mapping[str, Any]]) -> Project:
    """
    Append a component with a fresh id.

    The component is registered in the current view (and the default view,
    if different) so it is never created invisible. Its placement is
    data["position"] when given, else the next free grid cell of each view.

    Args:
        project: Project snapshot
        data: A Component (its id is replaced) or a mapping with name, type,
            description, parent_id, interfaces, position
    """
    component_id = generate_id()
    if isinstance(data, Component):
        fields = {
            "name": data.name,
            "description": data.description,
            "type": data.type,
            "parent_id": data.parent_id,
            "interfaces": data.interfaces,
        }
        placement = data.position
    else:
        fields = {k: data[k] for k in ("name", "description", "type", "parent_id", "interfaces") if k in data}
        placement = as_point(data["position"]) if data.get("position") is not None else None

    component_type = fields.pop("type", None) or ComponentType.COMPONENT
    if isinstance(component_type, str):
        component_type = ComponentType.from_string(component_type)
    interfaces = tuple(_build_interface(component_id, i) for i in fields.pop("interfaces", None) or ())

    component = Component(
        id=component_id,
        name=fields.pop("name", None) or "New Component",
        type=component_type,
        interfaces=interfaces,
        **fields,
    )
    updated = replace(project, components=project.components + (component,))

    if not updated.system_views:
        return ensure_has_system_views(updated)

    target_ids = {v.id for v in (get_current_view(updated), get_default_view(updated)) if v is not None}
    views = []
    for view in updated.system_views:
        if view.id in target_ids:
            view = with_component(view, component_id, placement or next_grid_position(view))
        views.append(view)

    Log.debug(f"ProjectStore: Added component '{component.name}' to project '{project.name}'")
    return replace(updated, system_views=tuple(views))


def update_component(
    project: Project,
    component_id: str,
    changes: Optional[Mapping[str, Any]] = None,
    **kwargs,
) -> Project:
    """
    Shallow-merge field changes into a component. Unknown id is a no-op.

    Raises:
        ValueError: If a field outside UPDATABLE_COMPONENT_FIELDS (such as id)
            is given
    """
    changes = dict(changes or {}, **kwargs)
    unknown = set(changes) - UPDATABLE_COMPONENT_FIELDS
    if unknown:
        raise ValueError(f"Cannot update component field(s): {', '.join(sorted(unknown))}")

    component = project.get_component(component_id)
    if component is None:
        Log.debug(f"ProjectStore: update_component ignored unknown component '{component_id}'")
        return project

    if isinstance(changes.get("type"), str):
        changes["type"] = ComponentType.from_string(changes["type"])
    if "interfaces" in changes:
        # Owner back-reference is not caller-controlled
        changes["interfaces"] = tuple(replace(i, component_id=component_id) for i in changes["interfaces"])
    if changes.get("position") is not None:
        changes["position"] = as_point(changes["position"])

    updated = replace(component, **changes)
    return replace(
        project,
        components=tuple(updated if c.id == component_id else c for c in project.components),
    )


def _detach_connections(components: Iterable[Component], connection_ids: Set[str]) -> tuple:
    """Clear interface back-references pointing at the given connections."""
    if not connection_ids:
        return tuple(components)
    result = []
    for component in components:
        if any(i.connection_id in connection_ids for i in component.interfaces):
            component = replace(component, interfaces=tuple(
                i.disconnected() if i.connection_id in connection_ids else i
                for i in component.interfaces
            ))
        result.append(component)
    return tuple(result)


def remove_component(project: Project, component_id: str, cascade: bool = False) -> Project:
    """
    Remove a component, its interfaces and every connection touching it.

    Args:
        project: Project snapshot
        component_id: Component to remove
        cascade: Also remove every descendant (parent_id chain). Without
            cascade, direct children are re-parented to the removed
            component's parent.

    Returns:
        New project; surviving endpoint interfaces of removed connections are
        marked disconnected and the removed components leave every view.
    """
    component = project.get_component(component_id)
    if component is None:
        return project

    removed_ids = {component_id}
    if cascade:
        removed_ids |= get_descendant_ids(project, component_id)

    removed_connections = {c.id for c in project.connections if c.source_component_id in removed_ids or c.target_component_id in removed_ids}

    survivors = []
    for c in project.components:
        if c.id in removed_ids:
            continue
        if c.parent_id == component_id:
            c = replace(c, parent_id=component.parent_id)
        survivors.append(c)

    Log.info(
        f"ProjectStore: Removed {len(removed_ids)} component(s) and "
        f"{len(removed_connections)} connection(s) from project '{project.name}'"
    )
    return replace(
        project,
        components=_detach_connections(survivors, removed_connections),
        connections=tuple(c for c in project.connections if c.id not in removed_connections),
        system_views=tuple(without_components(v, removed_ids) for v in project.system_views),
    )


def add_interface_to_component(
    project: Project,
    component_id: str,
    interface_definition_id: str,
    name: Optional[str] = None,
    position: Union[InterfacePosition, str] = InterfacePosition.RIGHT,
) -> Project:
    """Append a new, unconnected interface to a component. Unknown component is a no-op."""
    component = project.get_component(component_id)
    if component is None:
        return project
    interface = _build_interface(component_id, {
        "interface_definition_id": interface_definition_id,
        "name": name,
        "position": position,
    })
    updated = replace(component, interfaces=component.interfaces + (interface,))
    return replace(
        project,
        components=tuple(updated if c.id == component_id else c for c in project.components),
    )


def remove_interface_from_component(project: Project, component_id: str, interface_id: str) -> Project:
    """Remove an interface and every connection attached to it. Unknown ids are a no-op."""
    component = project.get_component(component_id)
    if component is None or component.get_interface(interface_id) is None:
        return project

    removed_connections = {c.id for c in project.connections if c.involves_interface(interface_id)}
    components = tuple(
        replace(c, interfaces=tuple(i for i in c.interfaces if i.id != interface_id)) if c.id == component_id else c
        for c in project.components
    )
    return replace(
        project,
        components=_detach_connections(components, removed_connections),
        connections=tuple(c for c in project.connections if c.id not in removed_connections),
    )


# =============================================================================
# Connections
# =============================================================================

def create_connection(
    project: Project,
    source_component_id: str,
    source_interface_id: str,
    target_component_id: str,
    target_interface_id: str,
    rules: Optional[Iterable[CompatibilityRule]] = None,
) -> Project:
    """
    Connect two component interfaces.

    The new connection is appended and both endpoint interfaces are marked
    connected to it in the same snapshot. An endpoint that is already
    connected is re-pointed at the new connection; the earlier connection
    stays in the list.

    Raises:
        InterfaceReferenceError: If either endpoint does not resolve. The
            input project is left untouched.
    """
    source = project.get_interface(source_component_id, source_interface_id)
    if source is None:
        raise InterfaceReferenceError(source_component_id, source_interface_id, "source")
    target = project.get_interface(target_component_id, target_interface_id)
    if target is None:
        raise InterfaceReferenceError(target_component_id, target_interface_id, "target")

    for endpoint in (source, target):
        if endpoint.is_connected:
            Log.warning(
                f"ProjectStore: Interface '{endpoint.name}' is already connected "
                f"(connection '{endpoint.connection_id}'); re-pointing it at the new connection"
            )

    status = check_compatibility(source.interface_definition_id, target.interface_definition_id, rules)
    connection = Connection(
        id=generate_id(),
        source_component_id=source_component_id,
        source_interface_id=source_interface_id,
        target_component_id=target_component_id,
        target_interface_id=target_interface_id,
        compatibility_status=status,
    )

    endpoints = {(source_component_id, source_interface_id), (target_component_id, target_interface_id)}
    components = []
    for component in project.components:
        if any((component.id, i.id) in endpoints for i in component.interfaces):
            component = replace(component, interfaces=tuple(
                i.connected_to(connection.id) if (component.id, i.id) in endpoints else i
                for i in component.interfaces
            ))
        components.append(component)

    Log.debug(f"ProjectStore: Created connection {connection} ({status.value})")
    return replace(
        project,
        components=tuple(components),
        connections=project.connections + (connection,),
    )


def remove_connection(project: Project, connection_id: str) -> Project:
    """Remove a connection and clear the interfaces that referenced it. Unknown id is a no-op."""
    if project.get_connection(connection_id) is None:
        return project
    return replace(
        project,
        components=_detach_connections(project.components, {connection_id}),
        connections=tuple(c for c in project.connections if c.id != connection_id),
    )


# =============================================================================
# Analysis
# =============================================================================

def calculate_completeness(project: Project) -> int:
    """Percentage of fully defined connections, 0 when there are none."""
    total = len(project.connections)
    if total == 0:
        return 0
    fully_defined = sum(1 for c in project.connections if c.is_fully_defined)
    # Half-up rounding
    return int(math.floor(100 * fully_defined / total + 0.5))


def find_orphaned_components(project: Project) -> List[Component]:
    """Components that are not an endpoint of any connection."""
    connected = set()
    for connection in project.connections:
        connected.add(connection.source_component_id)
        connected.add(connection.target_component_id)
    return [c for c in project.components if c.id not in connected]


def get_compatibility_issues(project: Project) -> List[CompatibilityIssue]:
    """One issue per connection that is not compatible."""
    issues = []
    for connection in project.connections:
        if connection.compatibility_status == CompatibilityStatus.INCOMPATIBLE:
            issues.append(CompatibilityIssue(connection.id, "Incompatible interface types", "error"))
        elif connection.compatibility_status == CompatibilityStatus.UNKNOWN:
            issues.append(CompatibilityIssue(connection.id, "Unknown compatibility - needs verification", "warning"))
    return issues
