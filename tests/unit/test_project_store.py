"""
Tests for the project store operations.

Every operation is pure; several tests also check the input snapshot is
left untouched.
"""
import pytest

from src.features.components.domain import ComponentType, InterfacePosition
from src.features.connections.domain.compatibility import CompatibilityRule
from src.features.connections.domain.connection import CompatibilityStatus
from src.features.projects.application import project_store as store
from src.features.system_views.application.system_view_commands import get_current_view
from src.features.system_views.domain.system_view import DEFAULT_VIEW_NAME
from src.shared.domain.errors import InterfaceReferenceError
from src.shared.domain.value_objects.point import Point


def _component(project, name):
    return next(c for c in project.components if c.name == name)


def _with_parts(*specs):
    """Project with one component per (name, [definition ids]) spec."""
    project = store.create_project("Sat")
    for name, definitions in specs:
        project = store.add_component(project, {
            "name": name,
            "interfaces": [{"interface_definition_id": d, "name": f"{name} {d}"} for d in definitions],
        })
    return project


def _connect(project, source_name, target_name, source_index=0, target_index=0, rules=None):
    source = _component(project, source_name)
    target = _component(project, target_name)
    return store.create_connection(
        project,
        source.id,
        source.interfaces[source_index].id,
        target.id,
        target.interfaces[target_index].id,
        rules=rules,
    )


class TestCreateProject:
    """Tests for create_project."""

    def test_blank_project(self):
        project = store.create_project("Sat", "Cubesat")
        assert project.name == "Sat"
        assert project.description == "Cubesat"
        assert len(project.components) == 1
        root = project.components[0]
        assert root.type == ComponentType.SYSTEM
        assert root.name == "Sat System"
        assert root.description == "Root system for Sat"

    def test_default_view_contains_root(self):
        project = store.create_project("Sat")
        assert len(project.system_views) == 1
        view = project.system_views[0]
        root = project.components[0]
        assert view.name == DEFAULT_VIEW_NAME
        assert view.is_default is True
        assert view.project_id == project.id
        assert view.visible_components == (root.id,)
        assert view.component_positions[root.id] == Point(100, 100)
        assert project.current_system_view_id == view.id

    def test_ids_are_unique(self):
        a = store.create_project("A")
        b = store.create_project("A")
        assert a.id != b.id
        assert a.components[0].id != b.components[0].id


class TestComponents:
    """Tests for component operations."""

    def test_add_component_fresh_id_and_owned_interfaces(self):
        project = _with_parts(("Radio", ["uart", "can"]))
        radio = _component(project, "Radio")
        assert radio.type == ComponentType.COMPONENT
        assert len(radio.interfaces) == 2
        assert all(i.component_id == radio.id for i in radio.interfaces)
        assert all(not i.is_connected for i in radio.interfaces)

    def test_add_component_is_visible_in_current_view(self):
        project = _with_parts(("Radio", []))
        radio = _component(project, "Radio")
        view = get_current_view(project)
        assert radio.id in view.visible_components
        assert radio.id in view.component_positions

    def test_add_component_uses_given_position(self):
        project = store.add_component(store.create_project("Sat"), {"name": "Panel", "position": {"x": 700, "y": 40}})
        panel = _component(project, "Panel")
        assert get_current_view(project).component_positions[panel.id] == Point(700, 40)

    def test_add_component_without_position_takes_free_cell(self):
        project = _with_parts(("A", []), ("B", []))
        positions = get_current_view(project).component_positions
        assert len(set(positions.values())) == 3

    def test_add_component_does_not_mutate_input(self):
        project = store.create_project("Sat")
        store.add_component(project, {"name": "Radio"})
        assert len(project.components) == 1
        assert len(project.system_views[0].visible_components) == 1

    def test_add_component_with_string_type(self):
        project = store.add_component(store.create_project("Sat"), {"name": "Sub", "type": "system"})
        assert _component(project, "Sub").type == ComponentType.SYSTEM

    def test_update_component(self):
        project = _with_parts(("Radio", []))
        radio = _component(project, "Radio")
        updated = store.update_component(project, radio.id, name="Transceiver", description="S-band")
        assert updated.get_component(radio.id).name == "Transceiver"
        assert updated.get_component(radio.id).description == "S-band"
        assert project.get_component(radio.id).name == "Radio"

    def test_update_component_accepts_mapping(self):
        project = _with_parts(("Radio", []))
        radio = _component(project, "Radio")
        updated = store.update_component(project, radio.id, {"type": "system"})
        assert updated.get_component(radio.id).type == ComponentType.SYSTEM

    def test_update_component_id_is_protected(self):
        project = _with_parts(("Radio", []))
        with pytest.raises(ValueError):
            store.update_component(project, _component(project, "Radio").id, id="other")

    def test_update_unknown_component_is_noop(self):
        project = store.create_project("Sat")
        assert store.update_component(project, "missing", name="X") is project

    def test_remove_unknown_component_is_noop(self):
        project = store.create_project("Sat")
        assert store.remove_component(project, "missing") is project

    def test_remove_component_leaves_views(self):
        project = _with_parts(("Radio", []))
        radio = _component(project, "Radio")
        removed = store.remove_component(project, radio.id)
        assert removed.get_component(radio.id) is None
        for view in removed.system_views:
            assert radio.id not in view.visible_components
            assert radio.id not in view.component_positions

    def test_remove_component_with_two_connections(self):
        project = _with_parts(("Hub", ["can", "can"]), ("A", ["can"]), ("B", ["can"]))
        project = _connect(project, "Hub", "A", source_index=0)
        project = _connect(project, "Hub", "B", source_index=1)
        hub = _component(project, "Hub")

        removed = store.remove_component(project, hub.id)

        assert removed.connections == ()
        for name in ("A", "B"):
            interface = _component(removed, name).interfaces[0]
            assert interface.is_connected is False
            assert interface.connection_id is None

    def test_remove_without_cascade_reparents_children(self):
        project = store.create_project("Sat")
        root = project.components[0]
        project = store.add_component(project, {"name": "Bus", "parent_id": root.id})
        bus = _component(project, "Bus")
        project = store.add_component(project, {"name": "Battery", "parent_id": bus.id})

        removed = store.remove_component(project, bus.id)

        assert _component(removed, "Battery").parent_id == root.id

    def test_remove_with_cascade_removes_descendants(self):
        project = store.create_project("Sat")
        root = project.components[0]
        project = store.add_component(project, {"name": "Bus", "parent_id": root.id})
        bus = _component(project, "Bus")
        project = store.add_component(project, {"name": "Battery", "parent_id": bus.id, "interfaces": [{"interface_definition_id": "can"}]})
        battery = _component(project, "Battery")
        project = store.add_component(project, {"name": "Cell", "parent_id": battery.id})
        project = store.add_component(project, {"name": "Payload", "parent_id": root.id, "interfaces": [{"interface_definition_id": "can"}]})
        project = _connect(project, "Battery", "Payload")

        removed = store.remove_component(project, bus.id, cascade=True)

        assert [c.name for c in removed.components] == ["Sat System", "Payload"]
        assert removed.connections == ()
        assert _component(removed, "Payload").interfaces[0].is_connected is False
        view = get_current_view(removed)
        assert set(view.visible_components) == {root.id, _component(removed, "Payload").id}

    def test_children_and_descendants(self):
        project = store.create_project("Sat")
        root = project.components[0]
        project = store.add_component(project, {"name": "Bus", "parent_id": root.id})
        bus = _component(project, "Bus")
        project = store.add_component(project, {"name": "Battery", "parent_id": bus.id})
        battery = _component(project, "Battery")

        assert [c.name for c in store.get_children(project, root.id)] == ["Bus"]
        assert store.get_descendant_ids(project, root.id) == {bus.id, battery.id}
        assert store.get_descendant_ids(project, battery.id) == set()

    def test_find_helpers(self):
        project = _with_parts(("Radio", ["uart"]))
        radio = _component(project, "Radio")
        assert store.find_component(project, radio.id) == radio
        assert store.find_interface(project, radio.id, radio.interfaces[0].id) == radio.interfaces[0]
        assert store.find_interface(project, radio.id, "missing") is None


class TestInterfaces:
    """Tests for adding and removing component interfaces."""

    def test_add_interface(self):
        project = _with_parts(("Radio", []))
        radio = _component(project, "Radio")
        updated = store.add_interface_to_component(project, radio.id, "spi", "Flash", "bottom")
        interface = updated.get_component(radio.id).interfaces[0]
        assert interface.interface_definition_id == "spi"
        assert interface.name == "Flash"
        assert interface.position == InterfacePosition.BOTTOM
        assert interface.component_id == radio.id
        assert interface.is_connected is False

    def test_add_interface_unknown_component_is_noop(self):
        project = store.create_project("Sat")
        assert store.add_interface_to_component(project, "missing", "spi") is project

    def test_remove_interface_removes_its_connections(self):
        project = _with_parts(("A", ["can"]), ("B", ["can"]))
        project = _connect(project, "A", "B")
        a = _component(project, "A")

        updated = store.remove_interface_from_component(project, a.id, a.interfaces[0].id)

        assert updated.get_component(a.id).interfaces == ()
        assert updated.connections == ()
        assert _component(updated, "B").interfaces[0].is_connected is False

    def test_remove_unknown_interface_is_noop(self):
        project = _with_parts(("A", ["can"]))
        assert store.remove_interface_from_component(project, _component(project, "A").id, "missing") is project


class TestConnections:
    """Tests for connection operations."""

    def test_matching_definitions_are_compatible(self):
        project = _connect(_with_parts(("A", ["can"]), ("B", ["can"])), "A", "B")
        connection = project.connections[0]
        assert connection.compatibility_status == CompatibilityStatus.COMPATIBLE
        assert connection.is_fully_defined is True
        for name in ("A", "B"):
            interface = _component(project, name).interfaces[0]
            assert interface.is_connected is True
            assert interface.connection_id == connection.id

    def test_different_definitions_are_incompatible(self):
        project = _connect(_with_parts(("A", ["can"]), ("B", ["usbc"])), "A", "B")
        connection = project.connections[0]
        assert connection.compatibility_status == CompatibilityStatus.INCOMPATIBLE
        assert connection.is_fully_defined is False

    def test_rule_table(self):
        rules = [CompatibilityRule("can", "can", True)]
        project = _connect(_with_parts(("A", ["uart"]), ("B", ["spi"])), "A", "B", rules=rules)
        assert project.connections[0].compatibility_status == CompatibilityStatus.UNKNOWN

    def test_fully_defined_matches_status(self):
        project = _with_parts(("A", ["can", "uart", "usbc"]), ("B", ["can", "spi", "usbc"]))
        for index in range(3):
            project = _connect(project, "A", "B", source_index=index, target_index=index)
        for connection in project.connections:
            assert connection.is_fully_defined == (connection.compatibility_status == CompatibilityStatus.COMPATIBLE)

    def test_invalid_interface_raises_and_leaves_input(self):
        project = _with_parts(("A", ["can"]), ("B", ["can"]))
        a = _component(project, "A")
        b = _component(project, "B")
        with pytest.raises(InterfaceReferenceError, match="Invalid interface IDs"):
            store.create_connection(project, a.id, a.interfaces[0].id, b.id, "missing")
        assert project.connections == ()
        assert a.interfaces[0].is_connected is False

    def test_interface_reference_error_is_lookup_error(self):
        project = store.create_project("Sat")
        with pytest.raises(LookupError):
            store.create_connection(project, "x", "y", "z", "w")

    def test_reconnecting_overwrites_back_reference(self):
        project = _with_parts(("A", ["can"]), ("B", ["can"]), ("C", ["can"]))
        project = _connect(project, "A", "B")
        first = project.connections[0]
        project = _connect(project, "A", "C")
        second = project.connections[1]

        assert len(project.connections) == 2
        assert _component(project, "A").interfaces[0].connection_id == second.id
        assert _component(project, "B").interfaces[0].connection_id == first.id

    def test_remove_connection_clears_flags(self):
        project = _connect(_with_parts(("A", ["can"]), ("B", ["can"])), "A", "B")
        connection_id = project.connections[0].id

        updated = store.remove_connection(project, connection_id)

        assert updated.connections == ()
        for component in updated.components:
            for interface in component.interfaces:
                assert interface.connection_id != connection_id
                assert interface.is_connected is False

    def test_remove_unknown_connection_is_noop(self):
        project = store.create_project("Sat")
        assert store.remove_connection(project, "missing") is project


class TestAnalysis:
    """Tests for completeness, orphans and compatibility issues."""

    def test_completeness_without_connections(self):
        assert store.calculate_completeness(store.create_project("Sat")) == 0

    def test_completeness_all_compatible(self):
        project = _connect(_with_parts(("A", ["can"]), ("B", ["can"])), "A", "B")
        assert store.calculate_completeness(project) == 100

    def test_completeness_rounds_half_up(self):
        project = _with_parts(("A", ["can", "can"]), ("B", ["can", "usbc"]))
        project = _connect(project, "A", "B", 0, 0)
        project = _connect(project, "A", "B", 1, 1)
        assert store.calculate_completeness(project) == 50

        project = _with_parts(("A", ["can", "can", "can"]), ("B", ["can", "usbc", "uart"]))
        for index in range(3):
            project = _connect(project, "A", "B", index, index)
        assert store.calculate_completeness(project) == 33

    def test_completeness_two_thirds(self):
        project = _with_parts(("A", ["can", "can", "can"]), ("B", ["can", "can", "uart"]))
        for index in range(3):
            project = _connect(project, "A", "B", index, index)
        assert store.calculate_completeness(project) == 67

    def test_orphaned_components(self):
        project = _connect(_with_parts(("A", ["can"]), ("B", ["can"]), ("C", [])), "A", "B")
        assert sorted(c.name for c in store.find_orphaned_components(project)) == ["C", "Sat System"]

    def test_compatibility_issues(self):
        project = _with_parts(("A", ["can", "uart", "usbc"]), ("B", ["can", "spi", "usbc"]))
        project = _connect(project, "A", "B", 0, 0)
        project = _connect(project, "A", "B", 1, 1)
        project = _connect(project, "A", "B", 2, 2, rules=[])

        issues = store.get_compatibility_issues(project)

        assert [(i.connection_id, i.severity, i.message) for i in issues] == [
            (project.connections[1].id, "error", "Incompatible interface types"),
            (project.connections[2].id, "warning", "Unknown compatibility - needs verification"),
        ]
