"""Event system for application layer"""

from src.application.events.events import (
    DomainEvent,
    # Project events
    ProjectCreated,
    ProjectUpdated,
    ProjectDeleted,
    CurrentProjectChanged,
    # Interface catalog events
    InterfacesChanged,
    # Error events
    ErrorOccurred,
)
from src.application.events.event_bus import EventBus

__all__ = [
    'DomainEvent',
    'EventBus',
    # Project events
    'ProjectCreated',
    'ProjectUpdated',
    'ProjectDeleted',
    'CurrentProjectChanged',
    # Interface catalog events
    'InterfacesChanged',
    # Error events
    'ErrorOccurred',
]
