"""
haulbook.storage.base
~~~~~~~~~~~~~~~~~~~~~
Abstract persistence port and entry repository interface.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, runtime_checkable

from ..models import Entry


@runtime_checkable
class BlobStore(Protocol):
    """
    Named-blob persistence: the narrow port the entry store writes through.

    Implementations return ``None`` for a missing key and raise
    ``StorageUnavailableError`` only when the medium itself fails.
    """

    def read(self, key: str) -> Optional[str]:
        """Return the blob stored under ``key``, or ``None`` if there is none."""
        ...

    def write(self, key: str, data: str) -> None:
        """Replace the blob under ``key`` with ``data`` in one step."""
        ...

    def close(self) -> None:
        """Release files / connections."""
        ...


@runtime_checkable
class EntryRepository(Protocol):
    """Storage abstraction for the entry collection."""

    def list_all(self) -> list[Entry]:
        """All entries in insertion order; empty if nothing (readable) is stored."""
        ...

    def get(self, entry_id: str) -> Optional[Entry]:
        """Fetch one entry by id."""
        ...

    def create(self, fields: Mapping[str, Any]) -> Entry:
        """Assign id + timestamp, coerce the fields, append and persist."""
        ...

    def update(self, entry_id: str, fields: Mapping[str, Any]) -> bool:
        """
        Merge ``fields`` over the entry and persist.

        Unknown ids are a silent no-op; the return value only reports whether
        the id was found.
        """
        ...

    def delete(self, entry_id: str) -> bool:
        """Remove the entry if present. Deleting twice is the same as once."""
        ...

    def close(self) -> None:
        """Release the underlying blob store."""
        ...
