"""
SQLite implementation of KeyValueStore

Persists JSON text documents under string keys in the kv_store table.
"""
from typing import List, Optional
from datetime import datetime

from src.infrastructure.persistence.sqlite.database import Database
from src.shared.domain.repositories.key_value_store import KeyValueStore
from src.utils.message import Log


class SQLiteKeyValueStore(KeyValueStore):
    """
    Durable key-value store.

    Values are opaque text; encoding is the caller's concern.
    """

    def __init__(self, database: Database):
        """
        Initialize store with database.

        Args:
            database: Database instance to use
        """
        self.db = database

    def set(self, key: str, value: str) -> None:
        """
        Set the text stored under key.

        Args:
            key: Storage key
            value: Text to store
        """
        now = datetime.now().isoformat()
        with self.db.transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO kv_store (key, value, created_at, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """, (key, value, now, now))
        Log.debug(f"SQLiteKeyValueStore: Stored '{key}' ({len(value)} chars)")

    def get(self, key: str) -> Optional[str]:
        """
        Get the text stored under key.

        Returns:
            Stored text or None if the key is missing
        """
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                SELECT value FROM kv_store WHERE key = ?
            """, (key,))
            row = cursor.fetchone()
            return row[0] if row is not None else None

    def delete(self, key: str) -> None:
        with self.db.transaction() as conn:
            conn.cursor().execute("""
                DELETE FROM kv_store WHERE key = ?
            """, (key,))
        Log.debug(f"SQLiteKeyValueStore: Deleted '{key}'")

    def keys(self) -> List[str]:
        with self.db.get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT key FROM kv_store ORDER BY key")
            return [row[0] for row in cursor.fetchall()]
