"""
Tests for system views: default layout, position resolution and the
project-level view commands.
"""
from dataclasses import replace

import pytest

from src.features.components.domain import Component
from src.features.projects.application import project_store as store
from src.features.system_views.application import system_view_commands as views
from src.features.system_views.domain.system_view import (
    DEFAULT_POSITION,
    DEFAULT_VIEW_NAME,
    create_default_view,
    grid_position,
    is_interface_visible,
    next_grid_position,
    resolve_position,
)
from src.shared.domain.errors import DefaultViewRemovalError
from src.shared.domain.value_objects.point import Point


def _project_with_curated_view():
    project = store.add_component(store.create_project("Rover"), {"name": "Arm"})
    project = views.add_view(project, {"name": "Power", "description": "Power rails"})
    return project, project.system_views[1]


class TestGridLayout:
    """Tests for the default grid layout."""

    def test_single_component_at_origin(self):
        assert grid_position(0, 1) == Point(100, 100)

    def test_columns_follow_square_root(self):
        # 5 components -> 3 columns
        assert grid_position(2, 5) == Point(600, 100)
        assert grid_position(3, 5) == Point(100, 250)
        assert grid_position(4, 5) == Point(350, 250)

    def test_default_view_lays_out_every_component(self):
        components = [Component(id=f"c{i}", name=f"C{i}") for i in range(4)]
        view = create_default_view("p", components)
        assert view.name == DEFAULT_VIEW_NAME
        assert view.is_default is True
        assert view.visible_components == ("c0", "c1", "c2", "c3")
        assert view.component_positions["c3"] == Point(350, 250)

    def test_default_view_keeps_legacy_positions(self):
        components = [Component(id="a", name="A", position=Point(7, 9)), Component(id="b", name="B")]
        view = create_default_view("p", components)
        assert view.component_positions["a"] == Point(7, 9)
        assert view.component_positions["b"] == grid_position(1, 2)

    def test_next_grid_position_skips_taken_cells(self):
        view = create_default_view("p", [Component(id="a", name="A")])
        assert next_grid_position(view) == Point(350, 100)


class TestResolvePosition:
    """Tests for the position fallback chain."""

    def test_view_override_wins(self):
        component = Component(id="a", name="A", position=Point(1, 1))
        view = create_default_view("p", [replace(component, position=Point(5, 5))])
        assert resolve_position(component, view) == Point(5, 5)

    def test_legacy_position_when_not_in_view(self):
        component = Component(id="a", name="A", position=Point(1, 1))
        assert resolve_position(component, create_default_view("p", [])) == Point(1, 1)

    def test_default_position_last(self):
        assert resolve_position(Component(id="a", name="A"), None) == DEFAULT_POSITION


class TestEnsureHasSystemViews:
    """Tests for ensure_has_system_views."""

    def test_creates_default_view(self):
        project = replace(store.create_project("Rover"), system_views=(), current_system_view_id=None)
        ensured = views.ensure_has_system_views(project)
        assert len(ensured.system_views) == 1
        assert ensured.current_system_view_id == ensured.system_views[0].id
        assert ensured.system_views[0].visible_components == (project.components[0].id,)

    def test_repoints_dangling_current_view(self):
        project = replace(store.create_project("Rover"), current_system_view_id="gone")
        ensured = views.ensure_has_system_views(project)
        assert ensured.current_system_view_id == project.system_views[0].id

    def test_idempotent(self):
        project = replace(store.create_project("Rover"), system_views=(), current_system_view_id=None)
        once = views.ensure_has_system_views(project)
        assert views.ensure_has_system_views(once) is once


class TestViewCommands:
    """Tests for add/update/remove and visibility commands."""

    def test_add_view_is_not_default(self):
        project, power = _project_with_curated_view()
        assert power.name == "Power"
        assert power.is_default is False
        assert power.project_id == project.id
        assert power.visible_components == ()

    def test_update_view(self):
        project, power = _project_with_curated_view()
        updated = views.update_view(project, power.id, name="Power Distribution")
        view = updated.get_system_view(power.id)
        assert view.name == "Power Distribution"
        assert view.updated_at >= power.updated_at

    def test_update_view_rejects_protected_fields(self):
        project, power = _project_with_curated_view()
        with pytest.raises(ValueError):
            views.update_view(project, power.id, is_default=True)

    def test_update_unknown_view_is_noop(self):
        project, _ = _project_with_curated_view()
        assert views.update_view(project, "missing", name="X") is project

    def test_remove_default_view_raises(self):
        project, _ = _project_with_curated_view()
        with pytest.raises(DefaultViewRemovalError):
            views.remove_view(project, project.system_views[0].id)

    def test_remove_current_view_reassigns(self):
        project, power = _project_with_curated_view()
        project = views.set_current_view(project, power.id)
        removed = views.remove_view(project, power.id)
        assert len(removed.system_views) == 1
        assert removed.current_system_view_id == removed.system_views[0].id

    def test_set_current_view_same_id_is_noop(self):
        project, _ = _project_with_curated_view()
        assert views.set_current_view(project, project.current_system_view_id) is project

    def test_get_current_view_falls_back_to_first(self):
        project, _ = _project_with_curated_view()
        project = replace(project, current_system_view_id="gone")
        assert views.get_current_view(project).id == project.system_views[0].id

    def test_update_position_leaves_other_entries(self):
        project, _ = _project_with_curated_view()
        default = project.system_views[0]
        root, arm = project.components
        moved = views.update_position_in_view(project, default.id, arm.id, {"x": 5, "y": 6})
        positions = moved.get_system_view(default.id).component_positions
        assert positions[arm.id] == Point(5, 6)
        assert positions[root.id] == default.component_positions[root.id]

    def test_show_and_hide_component(self):
        project, power = _project_with_curated_view()
        arm = project.components[1]

        shown = views.set_component_visibility(project, power.id, arm.id, True)
        view = shown.get_system_view(power.id)
        assert view.visible_components == (arm.id,)
        assert view.component_positions[arm.id] == Point(100, 100)

        hidden = views.set_component_visibility(shown, power.id, arm.id, False)
        view = hidden.get_system_view(power.id)
        assert view.visible_components == ()
        assert arm.id in view.component_positions

    def test_visibility_unchanged_is_noop(self):
        project, power = _project_with_curated_view()
        assert views.set_component_visibility(project, power.id, project.components[1].id, False) is project

    def test_visibility_unknown_component_is_noop(self):
        project, power = _project_with_curated_view()
        assert views.set_component_visibility(project, power.id, "missing", True) is project

    def test_interface_filter(self):
        project, power = _project_with_curated_view()
        filtered = views.set_interface_filter(project, power.id, ["i1"])
        view = filtered.get_system_view(power.id)
        assert is_interface_visible("i1", view)
        assert not is_interface_visible("i2", view)
        assert is_interface_visible("i2", power)
