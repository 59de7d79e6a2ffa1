"""
Key-Value Store Interface

Defines the contract for the durable string key -> text value store that
backs the persistence engine.
"""
from abc import ABC, abstractmethod
from typing import List, Optional


class KeyValueStore(ABC):
    """Repository interface for durable key-value persistence."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return stored text for key, or None if missing."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Persist text for key (overwrite)."""
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Missing keys are ignored."""
        raise NotImplementedError

    @abstractmethod
    def keys(self) -> List[str]:
        """All stored keys."""
        raise NotImplementedError

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None
