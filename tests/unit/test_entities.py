"""
Tests for the entity model: construction rules and wire format.
"""
from datetime import datetime, timezone

import pytest

from src.features.components.domain import Component, ComponentInterface, ComponentType, InterfacePosition
from src.features.connections.domain.connection import CompatibilityStatus, Connection
from src.features.interfaces.domain.interface_definition import (
    DEFAULT_ICON,
    DEFAULT_INTERFACES,
    InterfaceDefinition,
    find_definition,
    resolve_icon,
)
from src.features.projects.domain.project import CURRENT_SCHEMA_VERSION, Project
from src.features.system_views.domain.system_view import SystemView
from src.shared.domain.value_objects.point import Point


class TestPoint:
    """Tests for the Point value object."""

    def test_round_trip(self):
        assert Point.from_dict(Point(3, 4.5).to_dict()) == Point(3, 4.5)

    def test_missing_coordinate_rejected(self):
        with pytest.raises(ValueError):
            Point.from_dict({"x": 1})

    def test_non_numeric_rejected(self):
        with pytest.raises(ValueError):
            Point.from_dict({"x": "1", "y": 2})

    def test_bool_rejected(self):
        with pytest.raises(ValueError):
            Point.from_dict({"x": True, "y": 2})

    def test_points_are_hashable(self):
        assert len({Point(1, 2), Point(1, 2), Point(2, 1)}) == 2


class TestInterfaceCatalog:
    """Tests for interface definitions and icon fallback."""

    def test_default_catalog(self):
        ids = [d.id for d in DEFAULT_INTERFACES]
        assert ids == ["uart", "can", "usbc", "i2c", "spi", "ethernet"]
        for definition in DEFAULT_INTERFACES:
            assert definition.icon == definition.id

    def test_resolve_icon_known(self):
        assert resolve_icon(DEFAULT_INTERFACES, "can") == "can"

    def test_resolve_icon_dangling_reference(self):
        assert resolve_icon(DEFAULT_INTERFACES, "deleted-protocol") == DEFAULT_ICON
        assert find_definition(DEFAULT_INTERFACES, "deleted-protocol") is None

    def test_wire_keys(self):
        definition = InterfaceDefinition("pcie", "PCIe", "Peripheral bus", "pcie", "Bus", ("pcie",))
        data = definition.to_dict()
        assert data["compatibleWith"] == ["pcie"]
        assert data["category"] == "Bus"
        assert InterfaceDefinition.from_dict(data) == definition

    def test_missing_icon_defaults(self):
        definition = InterfaceDefinition.from_dict({"id": "x", "name": "X"})
        assert definition.icon == DEFAULT_ICON

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            InterfaceDefinition("x", " ")

    def test_non_string_name_rejected(self):
        with pytest.raises(ValueError):
            InterfaceDefinition.from_dict({"id": "x", "name": 42})


class TestComponent:
    """Tests for Component and ComponentInterface."""

    def _component(self):
        interface = ComponentInterface(
            id="i1",
            component_id="c1",
            interface_definition_id="can",
            name="CAN",
            position=InterfacePosition.LEFT,
        )
        return Component(id="c1", name="ECU", interfaces=[interface], parent_id="root")

    def test_interfaces_coerced_to_tuple(self):
        assert isinstance(self._component().interfaces, tuple)

    def test_get_interface(self):
        component = self._component()
        assert component.get_interface("i1").name == "CAN"
        assert component.get_interface("missing") is None

    def test_wire_keys(self):
        data = self._component().to_dict()
        assert data["parentId"] == "root"
        interface = data["interfaces"][0]
        assert interface["componentId"] == "c1"
        assert interface["interfaceDefinitionId"] == "can"
        assert interface["position"] == "left"
        assert interface["isConnected"] is False
        assert "connectionId" not in interface
        assert "position" not in data

    def test_round_trip(self):
        component = self._component()
        assert Component.from_dict(component.to_dict()) == component

    def test_connected_and_disconnected(self):
        interface = self._component().interfaces[0]
        connected = interface.connected_to("conn-1")
        assert connected.is_connected and connected.connection_id == "conn-1"
        assert interface.is_connected is False
        cleared = connected.disconnected()
        assert cleared.is_connected is False and cleared.connection_id is None

    def test_type_from_string(self):
        assert ComponentType.from_string("SYSTEM") == ComponentType.SYSTEM
        with pytest.raises(ValueError):
            ComponentType.from_string("subsystem")

    def test_root(self):
        assert Component(id="r", name="Root", type=ComponentType.SYSTEM).is_root()


class TestConnection:
    """Tests for Connection."""

    def _connection(self, status=CompatibilityStatus.COMPATIBLE):
        return Connection("k1", "c1", "i1", "c2", "i2", status)

    def test_fully_defined_derived_from_status(self):
        assert self._connection().is_fully_defined is True
        assert self._connection(CompatibilityStatus.UNKNOWN).is_fully_defined is False
        assert self._connection(CompatibilityStatus.INCOMPATIBLE).is_fully_defined is False

    def test_stored_flag_is_not_trusted(self):
        data = self._connection(CompatibilityStatus.INCOMPATIBLE).to_dict()
        data["isFullyDefined"] = True
        assert Connection.from_dict(data).is_fully_defined is False

    def test_involves(self):
        connection = self._connection()
        assert connection.involves_component("c2")
        assert connection.involves_interface("i1")
        assert not connection.involves_component("c3")

    def test_empty_endpoint_rejected(self):
        with pytest.raises(ValueError):
            Connection("k1", "c1", "", "c2", "i2")


class TestSystemView:
    """Tests for SystemView."""

    def test_positions_are_read_only(self):
        view = SystemView(id="v", name="V", project_id="p", component_positions={"c": Point(1, 2)})
        with pytest.raises(TypeError):
            view.component_positions["c"] = Point(0, 0)

    def test_visible_components_deduplicated_in_order(self):
        view = SystemView(id="v", name="V", project_id="p", visible_components=("b", "a", "b"))
        assert view.visible_components == ("b", "a")

    def test_round_trip(self):
        created = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        view = SystemView(
            id="v",
            name="Power",
            project_id="p",
            description="Power rails",
            component_positions={"c": Point(10, 20)},
            visible_components=("c",),
            visible_interfaces=("i",),
            is_default=True,
            created_at=created,
            updated_at=created,
        )
        assert SystemView.from_dict(view.to_dict()) == view

    def test_legacy_keys_accepted(self):
        view = SystemView.from_dict(
            {"id": "v", "name": "Old", "visibleComponentIds": ["a"], "visibleInterfaceIds": ["i"]},
            project_id="p",
        )
        assert view.visible_components == ("a",)
        assert view.visible_interfaces == ("i",)
        assert view.project_id == "p"

    def test_naive_timestamp_treated_as_utc(self):
        view = SystemView.from_dict({"id": "v", "name": "V", "createdAt": "2024-01-01T00:00:00"}, "p")
        assert view.created_at.tzinfo is not None


class TestProject:
    """Tests for the Project aggregate."""

    def test_round_trip(self):
        component = Component(id="c1", name="Root", type=ComponentType.SYSTEM)
        view = SystemView(id="v1", name="All", project_id="p1", visible_components=("c1",), is_default=True)
        project = Project(
            id="p1",
            name="Rover",
            description="Mars rover",
            components=[component],
            system_views=[view],
            current_system_view_id="v1",
        )
        data = project.to_dict()
        assert data["schemaVersion"] == CURRENT_SCHEMA_VERSION
        assert data["currentSystemViewId"] == "v1"
        assert Project.from_dict(data) == project

    def test_legacy_active_view_key(self):
        project = Project.from_dict({"id": "p", "name": "P", "activeSystemViewId": "v"})
        assert project.current_system_view_id == "v"
        assert project.schema_version == 1

    def test_lookups(self):
        interface = ComponentInterface("i1", "c1", "can", "CAN")
        project = Project(id="p", name="P", components=(Component(id="c1", name="A", interfaces=(interface,)),))
        assert project.get_interface("c1", "i1") == interface
        assert project.get_interface("c2", "i1") is None
        assert project.get_connection("nope") is None
        assert project.get_system_view("nope") is None

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Project(id="p", name="")
