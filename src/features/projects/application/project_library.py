"""
Project Library

The persisted collection of projects, the interface catalog and the
current-project pointer, each held in its own debounced storage key.

Callers read snapshots from the library and mutate them only through
project store / system view functions; apply() runs such a function
against a stored project and saves the result.
"""
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from src.application.events.event_bus import EventBus
from src.application.events.events import (
    CurrentProjectChanged,
    ErrorOccurred,
    InterfacesChanged,
    ProjectCreated,
    ProjectDeleted,
    ProjectUpdated,
)
from src.features.interfaces.domain.interface_definition import DEFAULT_INTERFACES, InterfaceDefinition
from src.features.projects.application import project_store
from src.features.projects.application.project_normalization import validate_and_migrate_project
from src.features.projects.domain.project import Project
from src.features.templates.application.template_registry import TemplateRegistry, create_default_registry
from src.shared.application.persistence.persistence_engine import PersistenceEngine
from src.utils.message import Log


PROJECTS_KEY = "projects"
INTERFACES_KEY = "interfaces"
CURRENT_PROJECT_ID_KEY = "current-project-id"

STORAGE_KEYS = {
    "PROJECTS": PROJECTS_KEY,
    "INTERFACES": INTERFACES_KEY,
    "CURRENT_PROJECT_ID": CURRENT_PROJECT_ID_KEY,
}

# Fields update_interface may change
UPDATABLE_INTERFACE_FIELDS = frozenset({"name", "description", "icon", "category", "compatible_with"})


def encode_projects(projects: Tuple[Project, ...]) -> list:
    return [project.to_dict() for project in projects]


def decode_projects(data: Any) -> Tuple[Project, ...]:
    """Stored project list; irreparable records are discarded."""
    if not isinstance(data, list):
        raise TypeError(f"expected a list of projects, got {type(data).__name__}")
    projects = []
    for record in data:
        project = validate_and_migrate_project(record)
        if project is not None:
            projects.append(project)
    return tuple(projects)


def encode_interfaces(interfaces: Tuple[InterfaceDefinition, ...]) -> list:
    return [definition.to_dict() for definition in interfaces]


def decode_interfaces(data: Any) -> Tuple[InterfaceDefinition, ...]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of interfaces, got {type(data).__name__}")
    definitions = []
    for record in data:
        try:
            definitions.append(InterfaceDefinition.from_dict(record))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            Log.warning(f"ProjectLibrary: Discarding malformed interface definition: {e}")
    return tuple(definitions)


def decode_project_id(data: Any) -> Optional[str]:
    if data is not None and not isinstance(data, str):
        raise TypeError(f"expected a project id, got {type(data).__name__}")
    return data


class ProjectLibrary:
    """
    Persisted projects, interface catalog and current-project pointer.

    Every write goes through the engine's debounced values, so bursts of
    edits cost one durable write per debounce window per key.
    """

    def __init__(
        self,
        engine: PersistenceEngine,
        event_bus: Optional[EventBus] = None,
        registry: Optional[TemplateRegistry] = None,
        default_template_id: Optional[str] = None,
    ):
        self._engine = engine
        self._event_bus = event_bus
        self._registry = registry or create_default_registry()
        self._default_template_id = default_template_id

        self._projects = engine.value(PROJECTS_KEY, default=(), encoder=encode_projects, decoder=decode_projects)
        self._interfaces = engine.value(
            INTERFACES_KEY,
            default=DEFAULT_INTERFACES,
            encoder=encode_interfaces,
            decoder=decode_interfaces,
        )
        self._current_project_id = engine.value(CURRENT_PROJECT_ID_KEY, default=None, decoder=decode_project_id)

        for debounced in (self._projects, self._interfaces, self._current_project_id):
            debounced.write_failed.connect(self._on_write_failed)

        Log.info(f"ProjectLibrary: Loaded {len(self._projects.value)} project(s)")

    @property
    def templates(self) -> TemplateRegistry:
        return self._registry

    # =========================================================================
    # Projects
    # =========================================================================

    def projects(self) -> Tuple[Project, ...]:
        return self._projects.value

    def get_project(self, project_id: str) -> Optional[Project]:
        for project in self._projects.value:
            if project.id == project_id:
                return project
        return None

    def save_project(self, project: Project, template_id: Optional[str] = None) -> Project:
        """
        Replace the stored project with the same id, or append it.

        template_id is reported on ProjectCreated when the project is new.
        """
        existing = self.get_project(project.id)
        if existing is project:
            return project

        def _save(projects: Tuple[Project, ...]) -> Tuple[Project, ...]:
            if any(p.id == project.id for p in projects):
                return tuple(project if p.id == project.id else p for p in projects)
            return projects + (project,)

        self._projects.set(_save)
        if existing is None:
            self._publish(ProjectCreated(project_id=project.id, data={"name": project.name, "template_id": template_id}))
        else:
            self._publish(ProjectUpdated(project_id=project.id))
        return project

    def delete_project(self, project_id: str) -> bool:
        """
        Remove a project. Clears the current project pointer when it pointed
        at the removed project.

        Returns:
            False if no such project
        """
        if self.get_project(project_id) is None:
            return False

        self._projects.set(lambda projects: tuple(p for p in projects if p.id != project_id))
        Log.info(f"ProjectLibrary: Deleted project '{project_id}'")
        self._publish(ProjectDeleted(project_id=project_id))
        if self.current_project_id() == project_id:
            self.set_current_project_id(None)
        return True

    def create_project(self, name: str, description: Optional[str] = None, select: bool = True) -> Project:
        """Create, store and (by default) select a blank project."""
        project = project_store.create_project(name, description)
        self.save_project(project)
        if select:
            self.set_current_project_id(project.id)
        return project

    def create_from_template(
        self,
        template_id: str,
        name: str,
        description: Optional[str] = None,
        select: bool = True,
    ) -> Project:
        """
        Create, store and (by default) select a project built from a template.

        Raises:
            TemplateNotFoundError: If the template id is not registered
        """
        project = project_store.create_from_template(template_id, name, description, registry=self._registry)
        self.save_project(project, template_id=template_id)
        if select:
            self.set_current_project_id(project.id)
        return project

    def create_default_project(self, name: str, description: Optional[str] = None, select: bool = True) -> Project:
        """
        New project from the configured default template, or a blank one when
        no default is configured or it is not registered.
        """
        template_id = self._default_template_id
        if template_id is None or template_id not in self._registry:
            return self.create_project(name, description, select=select)
        return self.create_from_template(template_id, name, description, select=select)

    def apply(self, project_id: str, operation: Callable[..., Project], *args, **kwargs) -> Optional[Project]:
        """
        Run a store/view operation on a stored project and save the result.

        Exceptions raised by the operation propagate and nothing is saved.

        Returns:
            The new snapshot, or None if the project is not in the library
        """
        project = self.get_project(project_id)
        if project is None:
            Log.debug(f"ProjectLibrary: apply({getattr(operation, '__name__', operation)}) ignored unknown project '{project_id}'")
            return None

        updated = operation(project, *args, **kwargs)
        if updated is project:
            return project
        if updated.id != project.id:
            raise ValueError(f"Operation changed the project id ({project.id} -> {updated.id})")

        self._projects.set(lambda projects: tuple(updated if p.id == project_id else p for p in projects))
        self._publish(ProjectUpdated(
            project_id=project_id,
            data={"operation": getattr(operation, "__name__", str(operation))},
        ))
        return updated

    # =========================================================================
    # Current project
    # =========================================================================

    def current_project_id(self) -> Optional[str]:
        return self._current_project_id.value

    def set_current_project_id(self, project_id: Optional[str]) -> None:
        if self._current_project_id.value == project_id:
            return
        self._current_project_id.set(project_id)
        self._publish(CurrentProjectChanged(project_id=project_id))

    def current_project(self) -> Optional[Project]:
        """The selected project, None if nothing (or a deleted project) is selected."""
        project_id = self.current_project_id()
        if project_id is None:
            return None
        return self.get_project(project_id)

    # =========================================================================
    # Interface catalog
    # =========================================================================

    def interfaces(self) -> Tuple[InterfaceDefinition, ...]:
        return self._interfaces.value

    def get_interface(self, interface_id: str) -> Optional[InterfaceDefinition]:
        for definition in self._interfaces.value:
            if definition.id == interface_id:
                return definition
        return None

    def add_interface(self, definition: Union[InterfaceDefinition, Mapping[str, Any]]) -> InterfaceDefinition:
        """
        Add a definition to the catalog.

        Raises:
            ValueError: If a definition with the same id already exists
        """
        if not isinstance(definition, InterfaceDefinition):
            definition = InterfaceDefinition.from_dict(definition)
        if self.get_interface(definition.id) is not None:
            raise ValueError(f"Interface '{definition.id}' already exists")

        self._interfaces.set(lambda catalog: catalog + (definition,))
        self._publish(InterfacesChanged(data={"action": "added", "interface_id": definition.id}))
        return definition

    def update_interface(self, interface_id: str, changes: Optional[Mapping[str, Any]] = None, **kwargs) -> Optional[InterfaceDefinition]:
        """
        Merge field changes into a definition. Unknown id is a no-op.

        Raises:
            ValueError: If a field outside UPDATABLE_INTERFACE_FIELDS is given
        """
        changes = dict(changes or {}, **kwargs)
        unknown = set(changes) - UPDATABLE_INTERFACE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update interface field(s): {', '.join(sorted(unknown))}")

        definition = self.get_interface(interface_id)
        if definition is None:
            return None
        if "compatible_with" in changes:
            changes["compatible_with"] = tuple(changes["compatible_with"] or ())

        updated = replace(definition, **changes)
        self._interfaces.set(lambda catalog: tuple(updated if d.id == interface_id else d for d in catalog))
        self._publish(InterfacesChanged(data={"action": "updated", "interface_id": interface_id}))
        return updated

    def remove_interface(self, interface_id: str) -> bool:
        """
        Remove a definition. Component interfaces referencing it are left
        alone; they fall back to the default icon.
        """
        if self.get_interface(interface_id) is None:
            return False
        self._interfaces.set(lambda catalog: tuple(d for d in catalog if d.id != interface_id))
        self._publish(InterfacesChanged(data={"action": "removed", "interface_id": interface_id}))
        return True

    # =========================================================================
    # Persistence
    # =========================================================================

    def flush(self) -> bool:
        """Write every pending key now."""
        return self._engine.flush_all()

    def _on_write_failed(self, key: str, message: str):
        self._publish(ErrorOccurred(data={"message": message, "key": key}))

    def _publish(self, event):
        if self._event_bus is not None:
            self._event_bus.publish(event)
