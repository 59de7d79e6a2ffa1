"""
Compatibility engine

Decides whether two interface definitions can be joined by a connection.

The contract is the identity rule: two definitions are compatible exactly
when their ids are equal. A rule table can be supplied instead; it is
matched in either direction and yields UNKNOWN when no rule applies.
"""
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from src.features.connections.domain.connection import CompatibilityStatus


@dataclass(frozen=True)
class CompatibilityRule:
    """Explicit verdict for a pair of interface definitions."""
    source_interface_id: str
    target_interface_id: str
    is_compatible: bool
    message: Optional[str] = None

    def matches(self, definition_a: str, definition_b: str) -> bool:
        return (
            (self.source_interface_id == definition_a and self.target_interface_id == definition_b)
            or (self.source_interface_id == definition_b and self.target_interface_id == definition_a)
        )


DEFAULT_COMPATIBILITY_RULES: Tuple[CompatibilityRule, ...] = tuple(
    CompatibilityRule(definition_id, definition_id, True)
    for definition_id in ("usbc", "uart", "can", "i2c", "spi", "ethernet")
)


def check_compatibility(
    definition_a: str,
    definition_b: str,
    rules: Optional[Iterable[CompatibilityRule]] = None,
) -> CompatibilityStatus:
    """
    Compatibility of two interface definition ids.

    Args:
        definition_a: Interface definition id of one endpoint
        definition_b: Interface definition id of the other endpoint
        rules: Optional rule table; None applies the identity rule

    Returns:
        CompatibilityStatus (symmetric in its two arguments)
    """
    if rules is None:
        if definition_a == definition_b:
            return CompatibilityStatus.COMPATIBLE
        return CompatibilityStatus.INCOMPATIBLE

    for rule in rules:
        if rule.matches(definition_a, definition_b):
            return CompatibilityStatus.COMPATIBLE if rule.is_compatible else CompatibilityStatus.INCOMPATIBLE
    return CompatibilityStatus.UNKNOWN
