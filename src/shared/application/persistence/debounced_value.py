"""
Debounced Value

A per-key write-through cache over a KeyValueStore. The in-memory value is
updated synchronously on every write; durable writes are coalesced so a
burst of updates costs at most one write per debounce window.

Write state machine:
    Idle --set--> Persisted              first write, flushed immediately
    Persisted --set--> Persisted         window since last flush has elapsed
    Persisted --set--> Dirty             within the window: timer (re)armed
    Dirty --set--> Dirty                 timer re-armed, latest value kept
    Dirty --timeout/flush/close--> Persisted
"""
import json
import sqlite3
import time
from typing import Any, Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal, QTimer

from src.shared.domain.repositories.key_value_store import KeyValueStore
from src.utils.message import Log


DEFAULT_DEBOUNCE_MS = 150

# Errors a durable write may raise; anything else is a programming error
WRITE_ERRORS = (sqlite3.Error, OSError, TypeError, ValueError)
READ_ERRORS = (sqlite3.Error, OSError)
DECODE_ERRORS = (ValueError, TypeError, KeyError, AttributeError)


def _identity(value: Any) -> Any:
    return value


class DebouncedValue(QObject):
    """
    Debounced durable value for one storage key.

    Reading never raises: a missing, unreadable or unparsable stored value
    yields the default. Writing never raises either: failures are logged,
    reported through write_failed and the value stays pending.

    Signals:
        value_changed(object): in-memory value replaced
        flushed(str): key written to the store
        write_failed(str, str): key, error message
    """

    value_changed = pyqtSignal(object)
    flushed = pyqtSignal(str)
    write_failed = pyqtSignal(str, str)

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        default: Any = None,
        encoder: Optional[Callable[[Any], Any]] = None,
        decoder: Optional[Callable[[Any], Any]] = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        timer_factory: Optional[Callable[[], Any]] = None,
        clock: Optional[Callable[[], float]] = None,
        parent=None,
    ):
        """
        Args:
            store: Durable key-value store
            key: Storage key
            default: Value used when nothing (valid) is stored
            encoder: value -> JSON-able object
            decoder: JSON object -> value; may raise to reject stored data
            debounce_ms: Minimum spacing between durable writes
            timer_factory: Zero-arg callable returning a single-shot timer
                with the QTimer interface (defaults to QTimer)
            clock: Monotonic clock in seconds (defaults to time.monotonic)
            parent: Parent QObject
        """
        super().__init__(parent)
        self._store = store
        self._key = key
        self._default = default
        self._encoder = encoder or _identity
        self._decoder = decoder or _identity
        self._debounce_ms = max(0, int(debounce_ms))
        self._clock = clock or time.monotonic

        self._timer = timer_factory() if timer_factory is not None else QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)

        self._pending = False
        self._last_flush: Optional[float] = None
        self._closed = False
        self._value = self._load()

    # =========================================================================
    # Access
    # =========================================================================

    @property
    def key(self) -> str:
        return self._key

    @property
    def value(self) -> Any:
        return self._value

    @property
    def default(self) -> Any:
        return self._default

    def has_pending_write(self) -> bool:
        return self._pending

    def is_closed(self) -> bool:
        return self._closed

    def set(self, value_or_updater: Any) -> Any:
        """
        Replace the value.

        Args:
            value_or_updater: New value, or a callable receiving the current
                value and returning the new one

        Returns:
            The new value
        """
        if callable(value_or_updater):
            value = value_or_updater(self._value)
        else:
            value = value_or_updater

        self._value = value
        self._pending = True
        self.value_changed.emit(value)

        if self._closed or self._window_elapsed():
            self._timer.stop()
            self._write()
        else:
            self._timer.start(self._debounce_ms)
        return value

    # =========================================================================
    # Persistence
    # =========================================================================

    def flush(self) -> bool:
        """
        Write a pending value now. No-op when nothing is pending.

        Returns:
            False if a pending write failed
        """
        self._timer.stop()
        if not self._pending:
            return True
        return self._write()

    def close(self) -> bool:
        """Flush and stop scheduling. Later writes go straight to the store."""
        if self._closed:
            return not self._pending or self._write()
        result = self.flush()
        self._closed = True
        return result

    def reload(self) -> Any:
        """Drop any pending write and re-read the stored value."""
        self._timer.stop()
        self._pending = False
        self._value = self._load()
        self.value_changed.emit(self._value)
        return self._value

    def _window_elapsed(self) -> bool:
        if self._last_flush is None:
            return True
        return (self._clock() - self._last_flush) * 1000.0 >= self._debounce_ms

    def _on_timeout(self):
        if self._pending:
            self._write()

    def _write(self) -> bool:
        try:
            text = json.dumps(self._encoder(self._value))
            self._store.set(self._key, text)
        except WRITE_ERRORS as e:
            Log.error(f"DebouncedValue: Error writing '{self._key}' to storage: {e}")
            self.write_failed.emit(self._key, str(e))
            return False

        self._pending = False
        self._last_flush = self._clock()
        self.flushed.emit(self._key)
        return True

    def _load(self) -> Any:
        try:
            text = self._store.get(self._key)
        except READ_ERRORS as e:
            Log.error(f"DebouncedValue: Error reading '{self._key}' from storage: {e}")
            return self._default
        if text is None:
            return self._default

        try:
            return self._decoder(json.loads(text))
        except DECODE_ERRORS as e:
            Log.error(f"DebouncedValue: Error parsing stored value for '{self._key}': {e}")
            return self._default

    def __repr__(self) -> str:
        state = "dirty" if self._pending else "clean"
        return f"DebouncedValue({self._key!r}, {state})"
