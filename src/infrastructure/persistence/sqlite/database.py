"""
Application SQLite database

Owns the connection to the file that backs the durable key-value store.
Every persisted document (projects, interface catalog, current project id)
is a JSON text value under a string key in the kv_store table.
"""
import sqlite3
from pathlib import Path
from typing import Optional

from src.utils.message import Log


IN_MEMORY = ":memory:"


class Database:
    """
    SQLite database holding the kv_store table.

    Pass ":memory:" for a throwaway in-process database.
    """

    CURRENT_SCHEMA_VERSION = 1

    def __init__(self, db_path: Optional[str] = None):
        if db_path is None:
            raise ValueError("Database path is required for file-based operation")

        if str(db_path) == IN_MEMORY:
            self.db_path = None
            target = IN_MEMORY
        else:
            self.db_path = Path(db_path)
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self.db_path)

        self._connection = sqlite3.connect(target, check_same_thread=False)
        self._connection.row_factory = sqlite3.Row
        self._closed = False
        self._init_schema()

    @property
    def location(self) -> str:
        return str(self.db_path) if self.db_path else IN_MEMORY

    def _init_schema(self):
        with self.transaction() as conn:
            conn.execute("CREATE TABLE IF NOT EXISTS schema_version (version INTEGER PRIMARY KEY)")
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
                )
            """)
            if conn.execute("SELECT COUNT(*) FROM schema_version").fetchone()[0] == 0:
                conn.execute("INSERT INTO schema_version (version) VALUES (?)", (self.CURRENT_SCHEMA_VERSION,))
        Log.info(f"Database: Opened {self.location}")

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get_connection(self) -> sqlite3.Connection:
        return self._connection

    def transaction(self) -> 'TransactionContext':
        """Commit on success, roll back on error."""
        return TransactionContext(self._connection)

    def get_schema_version(self) -> int:
        row = self._connection.execute("SELECT version FROM schema_version LIMIT 1").fetchone()
        return row[0] if row else 1

    def clear_all_data(self) -> None:
        """Remove every stored key."""
        with self.transaction() as conn:
            conn.execute("DELETE FROM kv_store")
        Log.warning(f"Database: Cleared {self.location}")

    def close(self) -> None:
        """Close the connection. Idempotent."""
        if self._closed:
            return
        self._connection.close()
        self._closed = True
        Log.info(f"Database: Closed {self.location}")


class TransactionContext:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def __enter__(self) -> sqlite3.Connection:
        return self.conn

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.conn.commit()
        else:
            self.conn.rollback()
            Log.error(f"Database: Transaction rolled back: {exc_val}")
        return False
