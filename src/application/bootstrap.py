"""
Application Bootstrap

Centralized service initialization and dependency injection.
Provides a single point for setting up the application architecture.
"""
import atexit
from typing import Any, Callable, Optional

from src.application.events.event_bus import EventBus
from src.application.settings.app_settings import AppSettings
from src.features.projects.application.project_library import ProjectLibrary
from src.features.templates.application.template_registry import TemplateRegistry, create_default_registry
from src.infrastructure.persistence.sqlite.database import Database
from src.infrastructure.persistence.sqlite.key_value_store_impl import SQLiteKeyValueStore
from src.shared.application.persistence.persistence_engine import PersistenceEngine
from src.shared.domain.repositories.key_value_store import KeyValueStore
from src.utils.message import Log


class ServiceContainer:
    """Container for all application services"""

    def __init__(
        self,
        settings: AppSettings,
        database: Optional[Database],
        store: KeyValueStore,
        engine: PersistenceEngine,
        event_bus: EventBus,
        templates: TemplateRegistry,
        library: ProjectLibrary,
    ):
        self.settings = settings
        self.database = database
        self.store = store
        self.engine = engine
        self.event_bus = event_bus
        self.templates = templates
        self.library = library
        self._shut_down = False

    def shutdown(self) -> None:
        """
        Flush pending writes, then close the database. Idempotent.
        """
        if self._shut_down:
            return
        self._shut_down = True
        Log.info("ServiceContainer: Starting shutdown")

        if not self.engine.shutdown():
            Log.warning("ServiceContainer: Some pending writes could not be flushed")

        if self.database is not None:
            self.database.close()

        Log.info("ServiceContainer: Shutdown complete")

    def is_shut_down(self) -> bool:
        return self._shut_down


def initialize_services(
    settings: Optional[AppSettings] = None,
    store: Optional[KeyValueStore] = None,
    timer_factory: Optional[Callable[[], Any]] = None,
    clock: Optional[Callable[[], float]] = None,
    install_exit_hooks: bool = True,
) -> ServiceContainer:
    """
    Initialize all application services.

    Args:
        settings: Application settings. If None, read from the environment.
        store: Key-value store to persist into. If None, a SQLite store is
            opened at settings.database_path (platform default when empty).
        timer_factory: Debounce timer factory (tests)
        clock: Monotonic clock (tests)
        install_exit_hooks: Flush on application quit / process exit

    Returns:
        ServiceContainer with all initialized services

    Raises:
        ValueError: If the settings do not validate
    """
    if settings is None:
        settings = AppSettings.from_env()

    validation = settings.validate()
    if not validation:
        raise ValueError(f"Invalid application settings: {'; '.join(validation.errors)}")

    Log.configure(level=settings.log_level, file_logging=settings.log_to_file)

    database = None
    if store is None:
        db_path = settings.resolved_database_path()
        Log.info(f"Initializing services with database: {db_path}")
        database = Database(db_path)
        store = SQLiteKeyValueStore(database)

    event_bus = EventBus()
    templates = create_default_registry()
    if settings.default_template_id not in templates:
        Log.warning(f"Bootstrap: Default template '{settings.default_template_id}' is not registered; new projects start blank")

    engine = PersistenceEngine(
        store,
        debounce_ms=settings.save_debounce_ms,
        timer_factory=timer_factory,
        clock=clock,
        install_exit_hooks=install_exit_hooks,
    )
    library = ProjectLibrary(
        engine,
        event_bus=event_bus,
        registry=templates,
        default_template_id=settings.default_template_id,
    )

    container = ServiceContainer(
        settings=settings,
        database=database,
        store=store,
        engine=engine,
        event_bus=event_bus,
        templates=templates,
        library=library,
    )

    if install_exit_hooks:
        # Registered after the engine's own hook, so it runs first
        atexit.register(container.shutdown)

    Log.info("Service container created successfully")
    return container
