"""
Persistence Engine

Owns the durable store and hands out one DebouncedValue per key, so every
key has a single writer. Pending values are flushed when the Qt
application is about to quit and again from an atexit hook, so a write
made just before shutdown is not lost.
"""
import atexit
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QObject, QCoreApplication

from src.shared.application.persistence.debounced_value import DEFAULT_DEBOUNCE_MS, DebouncedValue
from src.shared.domain.repositories.key_value_store import KeyValueStore
from src.utils.message import Log


class PersistenceEngine(QObject):
    """
    Registry of debounced values over one KeyValueStore.

    Usage:
        engine = PersistenceEngine(store)
        projects = engine.value("projects", default=())
        projects.set(lambda current: current + (new_project,))
        ...
        engine.shutdown()
    """

    def __init__(
        self,
        store: KeyValueStore,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        timer_factory: Optional[Callable[[], Any]] = None,
        clock: Optional[Callable[[], float]] = None,
        install_exit_hooks: bool = True,
        parent=None,
    ):
        super().__init__(parent)
        self._store = store
        self._debounce_ms = debounce_ms
        self._timer_factory = timer_factory
        self._clock = clock
        self._values: Dict[str, DebouncedValue] = {}
        self._shut_down = False
        self._app = None
        self._atexit_registered = False

        if install_exit_hooks:
            self._install_exit_hooks()

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def debounce_ms(self) -> int:
        return self._debounce_ms

    def value(
        self,
        key: str,
        default: Any = None,
        encoder: Optional[Callable[[Any], Any]] = None,
        decoder: Optional[Callable[[Any], Any]] = None,
    ) -> DebouncedValue:
        """
        The DebouncedValue for key, created on first use.

        Later calls for the same key return the existing instance; their
        default/encoder/decoder arguments are ignored.
        """
        existing = self._values.get(key)
        if existing is not None:
            return existing

        debounced = DebouncedValue(
            self._store,
            key,
            default=default,
            encoder=encoder,
            decoder=decoder,
            debounce_ms=self._debounce_ms,
            timer_factory=self._timer_factory,
            clock=self._clock,
        )
        self._values[key] = debounced
        Log.debug(f"PersistenceEngine: Registered key '{key}'")
        return debounced

    def keys(self) -> List[str]:
        return list(self._values)

    def has_pending_writes(self) -> bool:
        return any(v.has_pending_write() for v in self._values.values())

    def flush_all(self) -> bool:
        """
        Flush every pending value.

        Returns:
            False if any write failed
        """
        ok = True
        for debounced in self._values.values():
            if not debounced.flush():
                ok = False
        return ok

    def shutdown(self) -> bool:
        """Flush and close every value, then detach the exit hooks. Idempotent."""
        if self._shut_down:
            return True
        ok = True
        for debounced in self._values.values():
            if not debounced.close():
                ok = False
        self._remove_exit_hooks()
        self._shut_down = True
        Log.info(f"PersistenceEngine: Shut down ({len(self._values)} key(s))")
        return ok

    def is_shut_down(self) -> bool:
        return self._shut_down

    # =========================================================================
    # Exit hooks
    # =========================================================================

    def _install_exit_hooks(self):
        app = QCoreApplication.instance()
        if app is not None:
            app.aboutToQuit.connect(self._on_about_to_quit)
            self._app = app
        atexit.register(self._on_process_exit)
        self._atexit_registered = True

    def _remove_exit_hooks(self):
        if self._app is not None:
            try:
                self._app.aboutToQuit.disconnect(self._on_about_to_quit)
            except TypeError:
                # Already disconnected
                pass
            self._app = None
        if self._atexit_registered:
            atexit.unregister(self._on_process_exit)
            self._atexit_registered = False

    def _on_about_to_quit(self):
        Log.debug("PersistenceEngine: Application quitting, flushing pending writes")
        self.flush_all()

    def _on_process_exit(self):
        if not self._shut_down:
            self.flush_all()
