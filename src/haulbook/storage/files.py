"""
haulbook.storage.files
~~~~~~~~~~~~~~~~~~~~~~
Directory-backed blob store — the default backend.

Each key is one UTF-8 file, ``<directory>/<key>.json``. Writes go to a
temporary file in the same directory which is then renamed over the target,
so a crash mid-write leaves the previous blob intact.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from ..config import BLOB_KEY_RE
from ..exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class FileBlobStore:
    """Persistent ``BlobStore`` keeping one file per key."""

    def __init__(self, directory: Path | str) -> None:
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot create storage directory {self.directory}", cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Context manager
    # ------------------------------------------------------------------

    def __enter__(self) -> "FileBlobStore":
        return self

    def __exit__(self, *_) -> None:
        self.close()

    def close(self) -> None:
        pass

    # ------------------------------------------------------------------
    # BlobStore
    # ------------------------------------------------------------------

    def path_for(self, key: str) -> Path:
        if not BLOB_KEY_RE.match(key):
            raise ValueError(f"Invalid blob key: {key!r}")
        return self.directory / f"{key}.json"

    def read(self, key: str) -> Optional[str]:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as exc:
            # Undecodable bytes are corrupt content, not a broken medium.
            logger.warning("Blob %s is not valid UTF-8: %s", path, exc)
            return ""
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot read {path}", key=key, cause=exc,
            ) from exc

    def write(self, key: str, data: str) -> None:
        path = self.path_for(key)
        tmp_name: Optional[str] = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self.directory,
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(data)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as exc:
            raise StorageUnavailableError(
                f"Cannot write {path}", key=key, cause=exc,
            ) from exc
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
