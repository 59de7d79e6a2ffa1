"""
Interface definition entity

A reusable named protocol/connector type in the global catalog
(e.g. "CAN", "USB-C"). Component interfaces reference definitions by id.
The reference is weak: deleting a definition leaves dangling references,
which consumers tolerate by falling back to DEFAULT_ICON.
"""
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Tuple


DEFAULT_ICON = "interface"


@dataclass(frozen=True)
class InterfaceDefinition:
    """
    Catalog entry for an interface type.

    compatible_with is informational only; connection compatibility is
    decided by the compatibility engine.
    """
    id: str
    name: str
    description: str = ""
    icon: str = DEFAULT_ICON
    category: Optional[str] = None
    compatible_with: Tuple[str, ...] = ()

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise ValueError("Interface id cannot be empty")
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Interface name cannot be empty")

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
        }
        if self.category is not None:
            data["category"] = self.category
        if self.compatible_with:
            data["compatibleWith"] = list(self.compatible_with)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'InterfaceDefinition':
        """Create from dictionary"""
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            icon=data.get("icon") or DEFAULT_ICON,
            category=data.get("category"),
            compatible_with=tuple(data.get("compatibleWith") or ()),
        )


DEFAULT_INTERFACES: Tuple[InterfaceDefinition, ...] = (
    InterfaceDefinition("uart", "UART", "Universal Asynchronous Receiver-Transmitter", "uart"),
    InterfaceDefinition("can", "CAN Bus", "Controller Area Network protocol", "can"),
    InterfaceDefinition("usbc", "USB-C", "Universal Serial Bus Type-C", "usbc"),
    InterfaceDefinition("i2c", "I2C", "Inter-Integrated Circuit protocol", "i2c"),
    InterfaceDefinition("spi", "SPI", "Serial Peripheral Interface", "spi"),
    InterfaceDefinition("ethernet", "Ethernet", "Wired network interface", "ethernet"),
)


def find_definition(catalog: Iterable[InterfaceDefinition], definition_id: str) -> Optional[InterfaceDefinition]:
    """Look up a definition by id, None if it was deleted or never existed."""
    for definition in catalog:
        if definition.id == definition_id:
            return definition
    return None


def resolve_icon(catalog: Iterable[InterfaceDefinition], definition_id: str) -> str:
    """Icon for a definition id, DEFAULT_ICON for dangling references."""
    definition = find_definition(catalog, definition_id)
    return definition.icon if definition is not None else DEFAULT_ICON
