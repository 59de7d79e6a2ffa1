"""
Connection entity

An edge joining two component interfaces. Connections do not own their
endpoints; the endpoint interfaces carry is_connected/connection_id
back-references that the project store keeps in sync with this list.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping


class CompatibilityStatus(Enum):
    """Compatibility verdict for the two endpoint interface definitions."""
    COMPATIBLE = "compatible"
    INCOMPATIBLE = "incompatible"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Connection:
    """
    Connection entity - links two component interfaces.

    Invariants:
    - Both endpoints resolve to interfaces present in the project
    - is_fully_defined is derived: True exactly when the status is COMPATIBLE
    """
    id: str
    source_component_id: str
    source_interface_id: str
    target_component_id: str
    target_interface_id: str
    compatibility_status: CompatibilityStatus = CompatibilityStatus.UNKNOWN

    def __post_init__(self):
        if not self.id:
            raise ValueError("Connection id cannot be empty")
        if not self.source_component_id:
            raise ValueError("Source component ID cannot be empty")
        if not self.source_interface_id:
            raise ValueError("Source interface ID cannot be empty")
        if not self.target_component_id:
            raise ValueError("Target component ID cannot be empty")
        if not self.target_interface_id:
            raise ValueError("Target interface ID cannot be empty")

    @property
    def is_fully_defined(self) -> bool:
        return self.compatibility_status == CompatibilityStatus.COMPATIBLE

    def involves_component(self, component_id: str) -> bool:
        return component_id in (self.source_component_id, self.target_component_id)

    def involves_interface(self, interface_id: str) -> bool:
        return interface_id in (self.source_interface_id, self.target_interface_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "sourceComponentId": self.source_component_id,
            "sourceInterfaceId": self.source_interface_id,
            "targetComponentId": self.target_component_id,
            "targetInterfaceId": self.target_interface_id,
            "isFullyDefined": self.is_fully_defined,
            "compatibilityStatus": self.compatibility_status.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Connection':
        """Create from dictionary; isFullyDefined is recomputed, not trusted."""
        return cls(
            id=data["id"],
            source_component_id=data["sourceComponentId"],
            source_interface_id=data["sourceInterfaceId"],
            target_component_id=data["targetComponentId"],
            target_interface_id=data["targetInterfaceId"],
            compatibility_status=CompatibilityStatus(data.get("compatibilityStatus") or "unknown"),
        )

    def __str__(self) -> str:
        return (
            f"{self.source_component_id}.{self.source_interface_id} -> "
            f"{self.target_component_id}.{self.target_interface_id}"
        )
