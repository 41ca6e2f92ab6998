"""
haulbook.storage.memory
~~~~~~~~~~~~~~~~~~~~~~~
In-process blob store. Nothing survives the process; used by tests and by
callers embedding haulbook in something that persists elsewhere.
"""

from __future__ import annotations

from typing import Dict, Optional


class MemoryBlobStore:
    """Dict-backed ``BlobStore``."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._blobs: Dict[str, str] = dict(initial or {})

    def __enter__(self) -> "MemoryBlobStore":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def read(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def write(self, key: str, data: str) -> None:
        self._blobs[key] = data

    def close(self) -> None:
        pass
