"""
Key-value byte storage backends for the credential store.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
import sqlite3
import logging

logger = logging.getLogger(__name__)

# Default database location
DEFAULT_DB_PATH = Path.home() / ".passkeep" / "passkeep.db"


class KeyValueBackend(ABC):
    """
    Opaque key-value byte store.

    The credential store only ever reads and fully rewrites one key,
    so implementations need no partial-write support.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """Store value under key, replacing any prior value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""
        ...


class MemoryBackend(KeyValueBackend):
    """Dict-backed store, used for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] = None):
        self._data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class SQLiteBackend(KeyValueBackend):
    """
    SQLite-backed key-value table.

    One row per key in a ``kv_store`` table. Each call opens its own
    connection and commits before returning.
    """

    def __init__(self, db_path: Path = None):
        """
        Initialize backend.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self._ensure_db()

    def _ensure_db(self) -> None:
        """Create database and table if needed."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value BLOB
                )
            """)
            conn.commit()
        finally:
            conn.close()

        logger.debug(f"Key-value store ready at {self.db_path}")

    def get(self, key: str) -> Optional[bytes]:
        conn = sqlite3.connect(str(self.db_path))
        try:
            cursor = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            )
            row = cursor.fetchone()
        finally:
            conn.close()

        if not row or row[0] is None:
            return None
        value = row[0]
        # Rows written by other tools may hold TEXT instead of BLOB
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set(self, key: str, value: bytes) -> None:
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute(
                "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                (key, sqlite3.Binary(value))
            )
            conn.commit()
        finally:
            conn.close()

    def delete(self, key: str) -> None:
        conn = sqlite3.connect(str(self.db_path))
        try:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            conn.commit()
        finally:
            conn.close()
