"""SQLite-backed key/value persistence for catalog, transaction log and counter."""

from __future__ import annotations

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from billing.config import DB_PATH
from billing.errors import StorageError

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueStore:
    """Stores JSON-serializable blobs under string keys.

    ``set_many`` writes every key inside one SQLite transaction, so either all
    values land or none do.
    """

    def __init__(self, db_path: str | Path = DB_PATH) -> None:
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.db_path)

    def bootstrap_schema(self) -> None:
        """Create the key/value table if it does not already exist."""
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        """
                        CREATE TABLE IF NOT EXISTS kv_store (
                            key TEXT PRIMARY KEY,
                            value TEXT NOT NULL,
                            updated_at TEXT NOT NULL
                        )
                        """
                    )
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Cannot open store at {self.db_path}: {exc}") from exc

    def get(self, key: str) -> Any | None:
        """Return the decoded value for ``key`` or None when it was never set."""
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Cannot read {key!r}: {exc}") from exc

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError as exc:
            raise StorageError(f"Stored value for {key!r} is not valid JSON: {exc}") from exc

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, Any]) -> None:
        """Persist several keys atomically."""
        try:
            encoded = [(key, json.dumps(value, ensure_ascii=False)) for key, value in values.items()]
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value is not JSON serializable: {exc}") from exc

        updated_at = _utc_now_iso()
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.executemany(
                        """
                        INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                        ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
                        """,
                        [(key, blob, updated_at) for key, blob in encoded],
                    )
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            raise StorageError(f"Cannot write {', '.join(values)}: {exc}") from exc
        logger.debug("store_write keys=%s", list(values))
