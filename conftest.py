"""
Shared pytest fixtures.

Debounce timing is driven by FakeQTimer and FakeClock, so no Qt event
loop is needed: tests advance the clock and fire timers explicitly.
"""
from typing import List

import pytest
from PyQt6.QtCore import QCoreApplication

from src.infrastructure.persistence.memory.key_value_store_impl import MemoryKeyValueStore
from src.infrastructure.persistence.sqlite.database import Database
from src.infrastructure.persistence.sqlite.key_value_store_impl import SQLiteKeyValueStore
from src.shared.application.persistence.persistence_engine import PersistenceEngine


class FakeQTimer:
    """Minimal QTimer stand-in for unit tests."""

    def __init__(self):
        self._single_shot = False
        self._interval = 0
        self._active = False
        self._callback = None
        self.start_count = 0

    def setSingleShot(self, val):
        self._single_shot = val

    def isSingleShot(self):
        return self._single_shot

    def setInterval(self, ms):
        self._interval = ms

    def interval(self):
        return self._interval

    def start(self, ms=None):
        if ms is not None:
            self._interval = ms
        self._active = True
        self.start_count += 1

    def isActive(self):
        return self._active

    def stop(self):
        self._active = False

    def fire(self):
        """Simulate timer expiry."""
        self._active = False
        if self._callback:
            self._callback()

    @property
    def timeout(self):
        """Return an object with .connect()."""
        parent = self

        class _Sig:
            def connect(self, cb):
                parent._callback = cb

            def disconnect(self):
                parent._callback = None

        return _Sig()


class FakeClock:
    """Monotonic clock advanced by hand, in seconds."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance_ms(self, ms: float):
        self.now += ms / 1000.0


class FakeTimerFactory:
    """timer_factory that remembers every timer it created."""

    def __init__(self):
        self.timers: List[FakeQTimer] = []

    def __call__(self) -> FakeQTimer:
        timer = FakeQTimer()
        self.timers.append(timer)
        return timer

    def fire_active(self):
        """Fire every armed timer, as the event loop would after the window."""
        for timer in list(self.timers):
            if timer.isActive():
                timer.fire()


@pytest.fixture(scope="session")
def qapp():
    """Ensure a QCoreApplication exists for PyQt signals"""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def timers():
    return FakeTimerFactory()


@pytest.fixture
def memory_store():
    return MemoryKeyValueStore()


@pytest.fixture
def database(tmp_path):
    db = Database(str(tmp_path / "require_test.db"))
    yield db
    db.close()


@pytest.fixture
def sqlite_store(database):
    return SQLiteKeyValueStore(database)


@pytest.fixture
def engine(qapp, memory_store, timers, clock):
    engine = PersistenceEngine(
        memory_store,
        debounce_ms=150,
        timer_factory=timers,
        clock=clock,
        install_exit_hooks=False,
    )
    yield engine
    engine.shutdown()
