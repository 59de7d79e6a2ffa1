"""
System view commands

Project-level operations on system views. Each function takes a Project
snapshot and returns a new one; unknown view ids are no-ops that return the
identical project so callers can cheaply detect "nothing changed".
"""
from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional, Union

from src.features.projects.domain.project import Project
from src.features.system_views.domain.system_view import (
    SystemView,
    create_default_view,
    next_grid_position,
    with_component,
    with_position,
)
from src.shared.domain.errors import DefaultViewRemovalError
from src.shared.domain.value_objects.point import Point
from src.shared.utils.identity import generate_id, utc_now
from src.utils.message import Log


# Fields a caller may change through update_view
UPDATABLE_VIEW_FIELDS = frozenset({
    "name",
    "description",
    "component_positions",
    "visible_components",
    "visible_interfaces",
})


def as_point(value: Union[Point, Mapping[str, Any]]) -> Point:
    """Accept a Point or an {"x", "y"} mapping."""
    if isinstance(value, Point):
        return value
    return Point.from_dict(value)


def _replace_view(project: Project, view: SystemView) -> Project:
    return replace(
        project,
        system_views=tuple(view if v.id == view.id else v for v in project.system_views),
    )


def get_current_view(project: Project) -> Optional[SystemView]:
    """
    The active view: the one current_system_view_id points to, else the
    first view, else None.
    """
    if project.current_system_view_id:
        view = project.get_system_view(project.current_system_view_id)
        if view is not None:
            return view
    if project.system_views:
        return project.system_views[0]
    return None


def get_default_view(project: Project) -> Optional[SystemView]:
    """The view flagged is_default, else the first view."""
    for view in project.system_views:
        if view.is_default:
            return view
    if project.system_views:
        return project.system_views[0]
    return None


def set_current_view(project: Project, view_id: Optional[str]) -> Project:
    """Point the project at a view. Existence is not checked; readers fall back."""
    if project.current_system_view_id == view_id:
        return project
    return replace(project, current_system_view_id=view_id)


def add_view(project: Project, view: Union[SystemView, Mapping[str, Any]]) -> Project:
    """
    Append a view with a fresh id and fresh timestamps.

    Args:
        project: Project snapshot
        view: A SystemView or a mapping of SystemView fields (without id)

    Returns:
        New project containing the view. The view becomes the default only
        when the project had no views.
    """
    now = utc_now()
    if isinstance(view, SystemView):
        fields = {
            "name": view.name,
            "description": view.description,
            "component_positions": view.component_positions,
            "visible_components": view.visible_components,
            "visible_interfaces": view.visible_interfaces,
        }
    else:
        fields = {k: v for k, v in view.items() if k in UPDATABLE_VIEW_FIELDS}

    positions = fields.pop("component_positions", None) or {}
    new_view = SystemView(
        id=generate_id(),
        project_id=project.id,
        component_positions={cid: as_point(p) for cid, p in positions.items()},
        is_default=not project.system_views,
        created_at=now,
        updated_at=now,
        **fields,
    )
    Log.debug(f"SystemViews: Added view '{new_view.name}' to project '{project.name}'")
    return replace(project, system_views=project.system_views + (new_view,))


def update_view(project: Project, view_id: str, changes: Optional[Mapping[str, Any]] = None, **kwargs) -> Project:
    """
    Merge field changes into a view and bump updated_at.

    Raises:
        ValueError: If a field outside UPDATABLE_VIEW_FIELDS is given
    """
    changes = dict(changes or {}, **kwargs)
    unknown = set(changes) - UPDATABLE_VIEW_FIELDS
    if unknown:
        raise ValueError(f"Cannot update system view field(s): {', '.join(sorted(unknown))}")

    view = project.get_system_view(view_id)
    if view is None:
        return project

    if "component_positions" in changes:
        changes["component_positions"] = {
            cid: as_point(p) for cid, p in (changes["component_positions"] or {}).items()
        }
    return _replace_view(project, view.touched(**changes))


def remove_view(project: Project, view_id: str) -> Project:
    """
    Remove a view.

    Removing the active view reassigns current_system_view_id to the first
    remaining view in the same snapshot.

    Raises:
        DefaultViewRemovalError: If the view is the project's default view
    """
    view = project.get_system_view(view_id)
    if view is None:
        return project

    default_view = get_default_view(project)
    if default_view is not None and default_view.id == view_id:
        raise DefaultViewRemovalError(view_id)

    remaining = tuple(v for v in project.system_views if v.id != view_id)
    current_id = project.current_system_view_id
    if current_id == view_id:
        current_id = remaining[0].id
    Log.debug(f"SystemViews: Removed view '{view.name}' from project '{project.name}'")
    return replace(project, system_views=remaining, current_system_view_id=current_id)


def update_position_in_view(
    project: Project,
    view_id: str,
    component_id: str,
    point: Union[Point, Mapping[str, Any]],
) -> Project:
    """Set one component's position in one view, leaving other entries untouched."""
    view = project.get_system_view(view_id)
    if view is None:
        return project
    return _replace_view(project, with_position(view, component_id, as_point(point)))


def set_component_visibility(
    project: Project,
    view_id: str,
    component_id: str,
    visible: bool,
    point: Optional[Union[Point, Mapping[str, Any]]] = None,
) -> Project:
    """
    Show or hide a component in a curated view. A component that becomes
    visible without a position is placed at `point` or the next free grid cell.
    """
    view = project.get_system_view(view_id)
    if view is None or project.get_component(component_id) is None:
        return project

    currently_visible = component_id in view.visible_components
    if visible == currently_visible:
        return project

    if visible:
        if point is not None:
            placed = as_point(point)
        else:
            placed = view.component_positions.get(component_id) or next_grid_position(view)
        return _replace_view(project, with_component(view, component_id, placed))

    return _replace_view(project, view.touched(
        visible_components=tuple(cid for cid in view.visible_components if cid != component_id),
    ))


def set_interface_filter(project: Project, view_id: str, interface_ids: Iterable[str]) -> Project:
    """Restrict which interfaces a view shows; an empty filter shows all."""
    view = project.get_system_view(view_id)
    if view is None:
        return project
    return _replace_view(project, view.touched(visible_interfaces=tuple(interface_ids)))


def ensure_has_system_views(project: Project) -> Project:
    """
    Guarantee at least one view and a resolvable current view.

    - No views: synthesize the default view (legacy component positions are
      honoured) and select it.
    - Dangling current_system_view_id: repoint to the first view.
    - Otherwise the identical project is returned.
    """
    if not project.system_views:
        view = create_default_view(project.id, project.components)
        Log.info(f"SystemViews: Created default view for project '{project.name}'")
        return replace(project, system_views=(view,), current_system_view_id=view.id)

    if project.current_system_view_id is None or project.get_system_view(project.current_system_view_id) is None:
        return replace(project, current_system_view_id=project.system_views[0].id)

    return project
