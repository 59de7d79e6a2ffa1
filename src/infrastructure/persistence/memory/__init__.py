"""In-process persistence implementations."""
from src.infrastructure.persistence.memory.key_value_store_impl import MemoryKeyValueStore

__all__ = ['MemoryKeyValueStore']
