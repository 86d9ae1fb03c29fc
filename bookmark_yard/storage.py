"""Key-value persistence for client UI state."""
import aiosqlite
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol


# Default database location
DEFAULT_DB_PATH = Path.home() / ".bookmark-yard" / "state.db"


class KeyValueStore(Protocol):
    """Opaque string key-value store, the equivalent of browser local storage."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store that lives as long as the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SqliteKeyValueStore:
    """Async SQLite store that keeps UI state across sessions."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize the store.

        Args:
            db_path: Path to SQLite database. Defaults to ~/.bookmark-yard/state.db
        """
        self.db_path = db_path or DEFAULT_DB_PATH
        self._connection: Optional[aiosqlite.Connection] = None

    async def initialize(self) -> None:
        """Initialize the database, creating the table if needed."""
        # Ensure parent directory exists
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row

        await self._connection.execute("""
            CREATE TABLE IF NOT EXISTS ui_state (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                last_updated TIMESTAMP
            )
        """)

        await self._connection.commit()

    async def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    async def get(self, key: str) -> Optional[str]:
        """Get the stored value for a key.

        Args:
            key: Storage key

        Returns:
            Stored value or None if not found
        """
        if not self._connection:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        cursor = await self._connection.execute(
            "SELECT value FROM ui_state WHERE key = ?",
            (key,)
        )
        row = await cursor.fetchone()

        if row is None:
            return None

        return row["value"]

    async def set(self, key: str, value: str) -> None:
        """Insert or replace the value for a key.

        Args:
            key: Storage key
            value: Serialized value
        """
        if not self._connection:
            raise RuntimeError("Database not initialized. Call initialize() first.")

        now = datetime.now(timezone.utc).isoformat()

        await self._connection.execute("""
            INSERT INTO ui_state (key, value, last_updated)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                last_updated = excluded.last_updated
        """, (key, value, now))

        await self._connection.commit()


# Global store instance
_state_store: Optional[SqliteKeyValueStore] = None


async def get_state_store(db_path: Optional[Path] = None) -> SqliteKeyValueStore:
    """Get or create the global state store instance.

    Args:
        db_path: Database path used when the store is first created

    Returns:
        Initialized SqliteKeyValueStore
    """
    global _state_store

    if _state_store is None:
        _state_store = SqliteKeyValueStore(db_path)
        await _state_store.initialize()

    return _state_store
