"""
SystemView entity

A saved visual perspective over the shared component graph: which
components are shown and where they sit on the canvas. Topology lives in
the project; views only carry layout and visibility, so any number of
views can coexist over one graph.
"""
import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, Tuple

from src.features.components.domain.component import Component
from src.shared.domain.value_objects.point import Point
from src.shared.utils.identity import generate_id, parse_timestamp, utc_now


DEFAULT_VIEW_NAME = "All Components"
DEFAULT_VIEW_DESCRIPTION = "Default view showing all components in the system"

# Fallback for components with neither a view position nor a legacy position
DEFAULT_POSITION = Point(100, 100)

# Auto-layout grid
GRID_ORIGIN = Point(100, 100)
GRID_COLUMN_SPACING = 250
GRID_ROW_SPACING = 150


@dataclass(frozen=True)
class SystemView:
    """
    Saved layout + visibility filter.

    - component_positions: sparse componentId -> Point map (read-only)
    - visible_components: ordered ids with set semantics
    - visible_interfaces: optional interface filter, empty means show all
    - is_default: the designated default view cannot be removed
    """
    id: str
    name: str
    project_id: str
    description: Optional[str] = None
    component_positions: Mapping[str, Point] = field(default_factory=dict)
    visible_components: Tuple[str, ...] = ()
    visible_interfaces: Tuple[str, ...] = ()
    is_default: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def __post_init__(self):
        if not self.id:
            raise ValueError("System view id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("System view name cannot be empty")
        object.__setattr__(self, "component_positions", MappingProxyType(dict(self.component_positions)))
        object.__setattr__(self, "visible_components", tuple(dict.fromkeys(self.visible_components)))
        object.__setattr__(self, "visible_interfaces", tuple(dict.fromkeys(self.visible_interfaces)))

    def touched(self, **changes) -> 'SystemView':
        """Copy with changes applied and updated_at bumped."""
        return replace(self, updated_at=utc_now(), **changes)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {
            "id": self.id,
            "name": self.name,
            "projectId": self.project_id,
            "componentPositions": {
                component_id: point.to_dict() for component_id, point in self.component_positions.items()
            },
            "visibleComponents": list(self.visible_components),
            "visibleInterfaces": list(self.visible_interfaces),
            "isDefault": self.is_default,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], project_id: Optional[str] = None) -> 'SystemView':
        """
        Create from dictionary.

        Accepts the older visibleComponentIds/visibleInterfaceIds keys.
        """
        positions = data.get("componentPositions") or {}
        visible = data.get("visibleComponents")
        if visible is None:
            visible = data.get("visibleComponentIds") or ()
        interfaces = data.get("visibleInterfaces")
        if interfaces is None:
            interfaces = data.get("visibleInterfaceIds") or ()
        return cls(
            id=data["id"],
            name=data["name"],
            project_id=data.get("projectId") or project_id or "",
            description=data.get("description"),
            component_positions={cid: Point.from_dict(p) for cid, p in positions.items()},
            visible_components=tuple(visible),
            visible_interfaces=tuple(interfaces),
            is_default=bool(data.get("isDefault", False)),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )


def grid_position(index: int, count: int) -> Point:
    """Cell `index` of a ceil(sqrt(count))-column grid."""
    columns = max(1, math.ceil(math.sqrt(count)))
    row, column = divmod(index, columns)
    return Point(
        GRID_ORIGIN.x + column * GRID_COLUMN_SPACING,
        GRID_ORIGIN.y + row * GRID_ROW_SPACING,
    )


def create_default_view(project_id: str, components: Iterable[Component]) -> SystemView:
    """
    "All Components" view: every component visible. Components that carry a
    legacy position keep it, the rest are laid out on the grid by index.
    """
    components = list(components)
    positions = {}
    for index, component in enumerate(components):
        if component.position is not None:
            positions[component.id] = component.position
        else:
            positions[component.id] = grid_position(index, len(components))

    return SystemView(
        id=generate_id(),
        name=DEFAULT_VIEW_NAME,
        description=DEFAULT_VIEW_DESCRIPTION,
        project_id=project_id,
        component_positions=positions,
        visible_components=tuple(component.id for component in components),
        visible_interfaces=(),
        is_default=True,
    )


def create_empty_view(project_id: str, name: str, description: Optional[str] = None) -> SystemView:
    """Seed for a curated view: nothing visible, no positions."""
    return SystemView(
        id=generate_id(),
        name=name,
        description=description,
        project_id=project_id,
    )


def resolve_position(component: Component, view: Optional[SystemView]) -> Point:
    """
    Where to draw a component: view override, then the component's legacy
    position, then DEFAULT_POSITION.
    """
    if view is not None:
        point = view.component_positions.get(component.id)
        if point is not None:
            return point
    if component.position is not None:
        return component.position
    return DEFAULT_POSITION


def is_visible(component_id: str, view: SystemView) -> bool:
    return component_id in view.visible_components


def is_interface_visible(interface_id: str, view: SystemView) -> bool:
    """An empty interface filter shows every interface."""
    return not view.visible_interfaces or interface_id in view.visible_interfaces


def next_grid_position(view: SystemView) -> Point:
    """First grid cell not already taken by a positioned component."""
    occupied = set(view.component_positions.values())
    count = len(occupied) + 1
    index = 0
    while True:
        candidate = grid_position(index, count)
        if candidate not in occupied:
            return candidate
        index += 1


def with_position(view: SystemView, component_id: str, point: Point) -> SystemView:
    """Copy-on-write update of a single position entry."""
    positions = dict(view.component_positions)
    positions[component_id] = point
    return view.touched(component_positions=positions)


def with_component(view: SystemView, component_id: str, point: Point) -> SystemView:
    """Copy where the component is visible and placed at `point`."""
    positions = dict(view.component_positions)
    positions[component_id] = point
    return view.touched(
        component_positions=positions,
        visible_components=view.visible_components + (component_id,),
    )


def without_components(view: SystemView, component_ids: Iterable[str]) -> SystemView:
    """Copy with the given components dropped from visibility and layout."""
    removed = set(component_ids)
    if not removed.intersection(view.visible_components) and not removed.intersection(view.component_positions):
        return view
    return view.touched(
        component_positions={cid: p for cid, p in view.component_positions.items() if cid not in removed},
        visible_components=tuple(cid for cid in view.visible_components if cid not in removed),
    )

