"""
haulbook.storage.entries
~~~~~~~~~~~~~~~~~~~~~~~~
The entry store — create / list / update / delete over a single blob.

Persistence contract
--------------------
The whole collection is one JSON array stored under one key. Every mutation

  1. reads the entire blob,
  2. applies the change in memory,
  3. writes the entire blob back.

There is no partial write and no transaction log. Two writers in different
processes therefore race with last-write-wins at collection granularity;
haulbook assumes a single writer. Inside one process each operation holds a
lock, so threaded callers (the web UI's worker pool) are serialised.

Reading is forgiving: a missing, empty, undecodable or non-array blob is an
empty collection, and malformed items inside the array are skipped. Only a
failing medium surfaces, as ``StorageUnavailableError``.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional

from ..ids import generate_id
from ..models import Entry, normalise_fields, utcnow, ZERO
from .base import BlobStore

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

DEFAULT_KEY = "logistics_entries"


class EntryStore:
    """``EntryRepository`` implementation over any ``BlobStore``."""

    def __init__(
        self,
        blobs: BlobStore,
        *,
        key: str = DEFAULT_KEY,
        id_factory: Callable[[], str] = generate_id,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.blobs = blobs
        self.key = key
        self._new_id = id_factory
        self._clock = clock
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "EntryStore":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def close(self) -> None:
        self.blobs.close()

    # ------------------------------------------------------------------
    # Whole-collection I/O
    # ------------------------------------------------------------------

    def _load(self) -> List[Entry]:
        raw = self.blobs.read(self.key)
        if raw is None or not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("Stored entries under %r are corrupt (%s); treating as empty.", self.key, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Stored entries under %r are not a list; treating as empty.", self.key)
            return []

        entries: List[Entry] = []
        for item in data:
            if not isinstance(item, dict) or not item.get("id"):
                logger.warning("Skipping malformed stored entry: %.80r", item)
                continue
            entries.append(Entry.from_dict(item))
        return entries

    def _save(self, entries: List[Entry]) -> None:
        payload = json.dumps([e.to_dict() for e in entries], ensure_ascii=False)
        self.blobs.write(self.key, payload)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_all(self) -> List[Entry]:
        """All entries in insertion order."""
        with self._lock:
            return self._load()

    def get(self, entry_id: str) -> Optional[Entry]:
        with self._lock:
            return next((e for e in self._load() if e.id == entry_id), None)

    def __len__(self) -> int:
        return len(self.list_all())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, fields: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Entry:
        """
        Append a new entry built from ``fields`` (and/or keyword arguments).

        ``id`` and ``created_at`` are assigned here; any supplied values for
        them are ignored. Without a usable ``sr_no`` the entry gets the next
        serial number (collection size + 1).
        """
        values = normalise_fields({**(fields or {}), **kwargs})
        with self._lock:
            entries = self._load()
            if values.get("sr_no") is None:
                values["sr_no"] = len(entries) + 1
            values.setdefault("quantity", ZERO)
            entry = Entry(id=self._new_id(), created_at=self._clock(), **values)
            entries.append(entry)
            self._save(entries)
        logger.info("Created entry %s (%s, %s)", entry.id, entry.vehicle_no, entry.date)
        return entry

    def update(self, entry_id: str, fields: Mapping[str, Any]) -> bool:
        """
        Merge ``fields`` over the entry with ``entry_id`` and persist.

        Unknown ids are a no-op and nothing is written. The return value is
        informational only.
        """
        changes = normalise_fields(fields)
        if "sr_no" in changes and changes["sr_no"] is None:
            del changes["sr_no"]
        with self._lock:
            entries = self._load()
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    entries[index] = entry.replace(**changes)
                    self._save(entries)
                    logger.info("Updated entry %s: %s", entry_id, sorted(changes))
                    return True
        logger.debug("Update of unknown entry %s ignored", entry_id)
        return False

    def delete(self, entry_id: str) -> bool:
        """Remove the entry with ``entry_id``; unknown ids change nothing."""
        with self._lock:
            entries = self._load()
            remaining = [e for e in entries if e.id != entry_id]
            self._save(remaining)
        deleted = len(remaining) != len(entries)
        if deleted:
            logger.info("Deleted entry %s", entry_id)
        return deleted
