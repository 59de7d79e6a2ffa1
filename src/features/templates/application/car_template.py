"""
Car template

Automotive starter project: a root system with seven subsystems, each
exposing the bus and port interfaces a real vehicle module would have.
No connections are made; the user wires them up.
"""
from typing import Optional, Sequence, Tuple

from src.features.components.domain.component import Component, ComponentInterface
from src.features.components.domain.component_type import ComponentType, InterfacePosition
from src.features.projects.domain.project import Project
from src.features.system_views.domain.system_view import SystemView
from src.features.templates.domain.template import Template
from src.shared.domain.value_objects.point import Point
from src.shared.utils.identity import generate_id


CAR_TEMPLATE_ID = "car"
CAR_VIEW_NAME = "Vehicle Architecture"
CAR_VIEW_DESCRIPTION = "Vehicle subsystems arranged around the main system"
DEFAULT_CAR_DESCRIPTION = "Complete automotive system breakdown"

ROOT_POSITION = Point(100, 100)

# (name, description, canvas position, [(definition id, interface name, side)])
SUBSYSTEMS: Tuple[Tuple[str, str, Point, Sequence[Tuple[str, str, InterfacePosition]]], ...] = (
    (
        "Engine Subsystem",
        "Internal combustion engine with fuel injection and ignition systems",
        Point(150, 200),
        [("can", "Engine CAN Bus", InterfacePosition.RIGHT), ("uart", "Diagnostic Port", InterfacePosition.BOTTOM)],
    ),
    (
        "Transmission",
        "Automatic transmission system with electronic control",
        Point(400, 200),
        [("can", "Transmission CAN", InterfacePosition.LEFT)],
    ),
    (
        "Electrical System",
        "Main electrical distribution, battery management, and charging system",
        Point(150, 350),
        [("can", "Power Management CAN", InterfacePosition.TOP), ("usbc", "Charging Port", InterfacePosition.BOTTOM)],
    ),
    (
        "Braking System",
        "Anti-lock braking system (ABS) with electronic brake distribution",
        Point(400, 350),
        [("can", "Brake CAN Bus", InterfacePosition.TOP)],
    ),
    (
        "Steering System",
        "Electronic power steering with lane keeping assistance",
        Point(650, 200),
        [("can", "Steering CAN Bus", InterfacePosition.LEFT)],
    ),
    (
        "Infotainment System",
        "Multimedia system with navigation, connectivity, and user interface",
        Point(650, 350),
        [
            ("can", "Infotainment CAN", InterfacePosition.LEFT),
            ("usbc", "USB Media Port", InterfacePosition.BOTTOM),
            ("ethernet", "Internet Connection", InterfacePosition.TOP),
        ],
    ),
    (
        "Body Control Module",
        "Controls lighting, windows, locks, and other body electronics",
        Point(900, 275),
        [("can", "Body CAN Bus", InterfacePosition.LEFT)],
    ),
)


def create_car_project(name: str, description: Optional[str] = None) -> Project:
    """
    Build the car starter project.

    Args:
        name: Project name; the root system is called "<name> System"
        description: Project description, also used for the root system

    Returns:
        Project with 8 components, no connections and one curated default view
    """
    project_id = generate_id()
    root = Component(
        id=generate_id(),
        name=f"{name} System",
        description=description or DEFAULT_CAR_DESCRIPTION,
        type=ComponentType.SYSTEM,
    )

    components = [root]
    positions = {root.id: ROOT_POSITION}
    for subsystem_name, subsystem_description, position, interfaces in SUBSYSTEMS:
        component_id = generate_id()
        components.append(Component(
            id=component_id,
            name=subsystem_name,
            description=subsystem_description,
            type=ComponentType.COMPONENT,
            parent_id=root.id,
            interfaces=tuple(
                ComponentInterface(
                    id=generate_id(),
                    component_id=component_id,
                    interface_definition_id=definition_id,
                    name=interface_name,
                    position=side,
                )
                for definition_id, interface_name, side in interfaces
            ),
        ))
        positions[component_id] = position

    view = SystemView(
        id=generate_id(),
        name=CAR_VIEW_NAME,
        description=CAR_VIEW_DESCRIPTION,
        project_id=project_id,
        component_positions=positions,
        visible_components=tuple(c.id for c in components),
        is_default=True,
    )
    return Project(
        id=project_id,
        name=name,
        description=description,
        components=tuple(components),
        system_views=(view,),
        current_system_view_id=view.id,
    )


CAR_TEMPLATE = Template(
    id=CAR_TEMPLATE_ID,
    name="Car Template",
    description=(
        "Creates a project with automotive components including Engine, Transmission, "
        "Electrical System, Braking, Steering, Infotainment, and Body Control modules "
        "to help you explore the system modeling features."
    ),
    category="Automotive",
    build=create_car_project,
)
