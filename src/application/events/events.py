"""
Domain Events

Events that represent significant occurrences in the project library.
Used for loose coupling between the library and whoever displays it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional


@dataclass
class DomainEvent:
    """Base class for all domain events"""
    name: ClassVar[str] = "DomainEvent"
    project_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)


# Project Events
@dataclass
class ProjectCreated(DomainEvent):
    """
    A project was added to the library.

    Data fields:
        - name: Project name
        - template_id: Template the project was built from, None for blank projects
    """
    name: ClassVar[str] = "ProjectCreated"


@dataclass
class ProjectUpdated(DomainEvent):
    """
    A stored project snapshot was replaced.

    Data fields:
        - operation: Name of the store operation that produced it, if any
    """
    name: ClassVar[str] = "ProjectUpdated"


@dataclass
class ProjectDeleted(DomainEvent):
    name: ClassVar[str] = "ProjectDeleted"


@dataclass
class CurrentProjectChanged(DomainEvent):
    """project_id is the newly selected project, None when cleared."""
    name: ClassVar[str] = "CurrentProjectChanged"


# Interface catalog events
@dataclass
class InterfacesChanged(DomainEvent):
    """
    The interface catalog changed.

    Data fields:
        - action: "added" | "updated" | "removed"
        - interface_id: Affected definition id
    """
    name: ClassVar[str] = "InterfacesChanged"


# Error events
@dataclass
class ErrorOccurred(DomainEvent):
    """
    Data fields:
        - message: Error description
        - key: Storage key involved, if any
    """
    name: ClassVar[str] = "ErrorOccurred"
