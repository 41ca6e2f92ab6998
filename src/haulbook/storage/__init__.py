"""
haulbook.storage
~~~~~~~~~~~~~~~~
Pluggable persistence layer for ledger entries.

Default backend: JSON blob files under ``~/.haulbook/<project>/entries/``.

Usage::

    from haulbook.storage import get_store

    store = get_store()                         # configured backend
    store.create({"vehicleNo": "mh01ab1234", "quantity": "12"})
    for e in store.list_all():
        print(e.sr_no, e.vehicle_no, e.amount)
"""

from __future__ import annotations

from pathlib import Path

from ..config import Config, cfg
from ..exceptions import ConfigurationError
from .base import BlobStore, EntryRepository
from .entries import DEFAULT_KEY, EntryStore
from .files import FileBlobStore
from .memory import MemoryBlobStore
from .project import resolve_project
from .sqlite import SQLiteBlobStore


def open_blob_store(
    backend: str = "json",
    *,
    project: str | None = None,
    home: Path | None = None,
) -> BlobStore:
    """Open the blob store for ``backend`` inside the project's directory."""
    layout = resolve_project(project, home=home)
    if backend == "json":
        return FileBlobStore(layout.entries_dir)
    if backend == "sqlite":
        return SQLiteBlobStore(db_path=layout.db_path)
    if backend == "memory":
        return MemoryBlobStore()
    raise ConfigurationError(f"Unknown storage backend {backend!r}.")


def get_store(
    backend: str | None = None,
    *,
    project: str | None = None,
    home: Path | str | None = None,
    config: Config | None = None,
) -> EntryStore:
    """Return an ``EntryStore`` over the configured (or given) backend."""
    config = config or cfg
    blobs = open_blob_store(
        backend or config.backend,
        project=project or config.project,
        home=Path(home) if home else config.home,
    )
    return EntryStore(blobs, key=config.storage_key)


__all__ = [
    "BlobStore",
    "DEFAULT_KEY",
    "EntryRepository",
    "EntryStore",
    "FileBlobStore",
    "MemoryBlobStore",
    "SQLiteBlobStore",
    "get_store",
    "open_blob_store",
]
