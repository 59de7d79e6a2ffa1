"""
Point value object

A 2D canvas coordinate used for component placement in system views.
"""
from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Point:
    """Immutable 2D coordinate."""
    x: float
    y: float

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization"""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Point':
        """
        Create from dictionary.

        Raises:
            ValueError: If x or y is missing or not numeric
        """
        try:
            x = data["x"]
            y = data["y"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid point: {data!r}") from e
        if isinstance(x, bool) or isinstance(y, bool) or not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
            raise ValueError(f"Invalid point coordinates: {data!r}")
        return cls(x=x, y=y)

    def __str__(self) -> str:
        return f"({self.x}, {self.y})"
