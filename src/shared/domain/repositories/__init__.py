"""
Shared domain repositories used across multiple features.
"""
from src.shared.domain.repositories.key_value_store import KeyValueStore

__all__ = [
    'KeyValueStore',
]
