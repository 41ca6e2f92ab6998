"""
haulbook.storage.sqlite
~~~~~~~~~~~~~~~~~~~~~~~
SQLite-backed blob store.

Table
-----
blobs — ``key`` (primary key), ``value`` (the whole serialised blob),
        ``updated_at`` (UTC ISO timestamp of the last write)

The entry collection still lives in a single row and is overwritten
wholesale; SQLite only replaces the file as the medium.

Default path: ``<cfg.home>/<cfg.project>/haulbook.db``, resolved when the
store is opened.
"""

from __future__ import annotations

import sqlite3
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..exceptions import StorageUnavailableError
from .project import resolve_project

_SCHEMA_VERSION = 1


class SQLiteBlobStore:
    """Persistent SQLite storage implementing ``BlobStore``."""

    def __init__(self, db_path: Path | str | None = None) -> None:
        self.db_path = Path(db_path) if db_path else resolve_project().db_path
        self._lock = threading.Lock()
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._init_schema()
        except (OSError, sqlite3.Error) as exc:
            raise StorageUnavailableError(
                f"Cannot open SQLite database {self.db_path}", cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "SQLiteBlobStore":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    # ------------------------------------------------------------------
    # Schema
    # ------------------------------------------------------------------

    def _init_schema(self) -> None:
        with self._lock:
            version = self._conn.execute("PRAGMA user_version").fetchone()[0]
            if version == 0:
                self._conn.executescript("""
                    CREATE TABLE IF NOT EXISTS blobs (
                        key        TEXT PRIMARY KEY,
                        value      TEXT NOT NULL,
                        updated_at TEXT NOT NULL
                    );
                """)
                self._conn.execute(f"PRAGMA user_version = {_SCHEMA_VERSION}")
                self._conn.commit()

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    # ------------------------------------------------------------------
    # BlobStore
    # ------------------------------------------------------------------

    def read(self, key: str) -> Optional[str]:
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT value FROM blobs WHERE key = ?", (key,)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                f"Cannot read blob {key!r} from {self.db_path}", key=key, cause=exc,
            ) from exc
        return row[0] if row else None

    def write(self, key: str, data: str) -> None:
        try:
            with self._lock:
                self._conn.execute(
                    """INSERT INTO blobs (key, value, updated_at) VALUES (?, ?, ?)
                       ON CONFLICT(key) DO UPDATE
                       SET value = excluded.value, updated_at = excluded.updated_at""",
                    (key, data, self._now()),
                )
                self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageUnavailableError(
                f"Cannot write blob {key!r} to {self.db_path}", key=key, cause=exc,
            ) from exc
