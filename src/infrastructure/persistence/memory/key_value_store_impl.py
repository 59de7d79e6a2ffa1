"""
In-memory implementation of KeyValueStore

Process-local store for tests and throwaway sessions. Nothing survives
the process.
"""
from typing import Dict, List, Mapping, Optional

from src.shared.domain.repositories.key_value_store import KeyValueStore


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store."""

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})
        self.write_count = 0

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise TypeError(f"MemoryKeyValueStore stores text, got {type(value).__name__}")
        self._data[key] = value
        self.write_count += 1

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return sorted(self._data)
