"""
SQLite persistence implementation

Core database utilities and the durable key-value store.
"""
from src.infrastructure.persistence.sqlite.database import Database, TransactionContext
from src.infrastructure.persistence.sqlite.key_value_store_impl import SQLiteKeyValueStore

__all__ = [
    'Database',
    'TransactionContext',
    'SQLiteKeyValueStore',
]
