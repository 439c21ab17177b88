from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

import aiosqlite

from tasktrack.domain.common.errors import PersistenceError
from tasktrack.domain.tasks.ports import KeyValueStore

logger = logging.getLogger(__name__)


class SqliteKeyValueStore(KeyValueStore):
    """
    kv_store table: one row per key.
    - opens a new connection per operation
    - set() is a single upsert statement committed on its own, so a value
      is either fully replaced or untouched
    """

    def __init__(self, path: str, timeout: float = 5.0) -> None:
        self._path = path
        self._timeout = timeout

    @property
    def path(self) -> str:
        return self._path

    def _connect(self) -> aiosqlite.Connection:
        return aiosqlite.connect(self._path, timeout=self._timeout)

    def _now_iso(self) -> str:
        return datetime.now(timezone.utc).isoformat()

    async def init(self) -> None:
        try:
            async with self._connect() as db:
                await db.execute("PRAGMA journal_mode=WAL;")
                await db.executescript(
                    """
                    CREATE TABLE IF NOT EXISTS kv_store (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    );
                    """
                )
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise PersistenceError(f"Cannot initialise database at {self._path}: {exc}") from exc

    async def get(self, key: str) -> Optional[str]:
        try:
            async with self._connect() as db:
                db.row_factory = aiosqlite.Row
                cur = await db.execute("SELECT value FROM kv_store WHERE key = ?;", (key,))
                row = await cur.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise PersistenceError(f"Cannot read key {key!r}: {exc}") from exc
        return row["value"] if row else None

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._connect() as db:
                await db.execute(
                    """
                    INSERT INTO kv_store(key, value, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at;
                    """,
                    (key, value, self._now_iso()),
                )
                await db.commit()
        except (aiosqlite.Error, OSError, UnicodeError) as exc:
            raise PersistenceError(f"Cannot write key {key!r}: {exc}") from exc
        logger.debug("Stored %d bytes under %r", len(value), key)
