"""
Key-value stores for calculator state.

Handles persistence of serialized session values by key.
"""

import logging
import sqlite3
from datetime import datetime
from typing import Dict, List, Optional

from .db import get_connection, resolve_db_path

logger = logging.getLogger(__name__)


class SqliteStateStore:
    """Persistence port backed by a SQLite table.

    Each key holds one serialized value; saving a key replaces its value.
    """

    def __init__(self, db_path: Optional[str] = None):
        """Initialize the store with a database path.

        Args:
            db_path: Path to SQLite database file (defaults to $HOSTING_CALC_DB
                or ".hosting-calc.db")
        """
        self.db_path = resolve_db_path(db_path)

    def initialize_schema(self) -> None:
        """Create the calculator_state table if it doesn't exist."""
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS calculator_state (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
        finally:
            conn.close()

    def load(self, key: str) -> Optional[str]:
        """Load the value stored under a key.

        Returns:
            The stored string, or None if the key (or the table) is missing
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute(
                "SELECT value FROM calculator_state WHERE key = ?",
                (key,)
            )
            row = cursor.fetchone()
            return row[0] if row else None
        except sqlite3.OperationalError as e:
            if "no such table" in str(e).lower():
                logger.debug("State table missing in %s; nothing stored yet", self.db_path)
                return None
            raise
        finally:
            conn.close()

    def save(self, key: str, value: str) -> None:
        """Store a value under a key, replacing any previous value.

        The schema is created on first write.
        """
        self.initialize_schema()
        conn = get_connection(self.db_path)
        try:
            conn.execute("""
                INSERT INTO calculator_state (key, value, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """, (key, value, datetime.now().isoformat()))
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> bool:
        """Remove a key.

        Returns:
            True if a value was removed
        """
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("DELETE FROM calculator_state WHERE key = ?", (key,))
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.OperationalError as e:
            if "no such table" in str(e).lower():
                return False
            raise
        finally:
            conn.close()

    def keys(self) -> List[str]:
        """Stored keys in alphabetical order."""
        conn = get_connection(self.db_path)
        try:
            cursor = conn.execute("SELECT key FROM calculator_state ORDER BY key")
            return [row[0] for row in cursor.fetchall()]
        except sqlite3.OperationalError as e:
            if "no such table" in str(e).lower():
                return []
            raise
        finally:
            conn.close()


class MemoryStateStore:
    """Persistence port held in a dict, for tests and one-shot estimates."""

    def __init__(self, values: Optional[Dict[str, str]] = None):
        self.values: Dict[str, str] = dict(values or {})

    def load(self, key: str) -> Optional[str]:
        return self.values.get(key)

    def save(self, key: str, value: str) -> None:
        self.values[key] = value

    def delete(self, key: str) -> bool:
        return self.values.pop(key, None) is not None

    def keys(self) -> List[str]:
        return sorted(self.values)


# Global store instance
_default_store: Optional[SqliteStateStore] = None


def get_store(db_path: Optional[str] = None) -> SqliteStateStore:
    """Get a store instance.

    Returns a shared SqliteStateStore for the default database; an explicit
    path always gets a fresh store.

    Args:
        db_path: Path to SQLite database file

    Returns:
        An instance of SqliteStateStore
    """
    global _default_store
    if db_path is not None:
        return SqliteStateStore(db_path)
    if _default_store is None:
        _default_store = SqliteStateStore()
    return _default_store
