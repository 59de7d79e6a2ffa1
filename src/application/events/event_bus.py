"""
Event Bus

Synchronous publish/subscribe for domain events, so observers can follow
library changes without the library knowing about them.

Handlers run on the publishing thread in subscription order. A failing
handler is logged and the remaining handlers still run.
"""
from typing import Callable, Dict, List, Type, Union

from src.application.events.events import DomainEvent
from src.utils.message import Log


Handler = Callable[[DomainEvent], None]
EventKey = Union[str, Type[DomainEvent]]


def event_name_of(key: EventKey) -> str:
    """Event name for a name string or DomainEvent subclass."""
    if isinstance(key, str):
        return key
    return getattr(key, "name", None) or key.__name__


class EventBus:
    """
    Usage:
        bus = EventBus()
        bus.subscribe(ProjectCreated, on_created)   # or "ProjectCreated"
        bus.publish(ProjectCreated(project_id="..."))
    """

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {}

    def subscribe(self, event: EventKey, handler: Handler) -> None:
        """Register handler for an event name. Subscribing twice is a no-op."""
        handlers = self._handlers.setdefault(event_name_of(event), [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event: EventKey, handler: Handler) -> None:
        name = event_name_of(event)
        handlers = self._handlers.get(name, [])
        if handler in handlers:
            handlers.remove(handler)
        if not handlers:
            self._handlers.pop(name, None)

    def publish(self, event: DomainEvent) -> None:
        # Snapshot so handlers may unsubscribe while being called
        handlers = list(self._handlers.get(event.name, ()))
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                Log.error(f"EventBus: Handler for '{event.name}' failed: {e}")
