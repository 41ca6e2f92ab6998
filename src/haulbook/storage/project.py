"""
haulbook.storage.project
~~~~~~~~~~~~~~~~~~~~~~~~
Maps a project (ledger) name to where its entries live:

  <home>/<project>/entries/       — JSON blob directory (default backend)
  <home>/<project>/haulbook.db    — SQLite database (``backend=sqlite``)

``home`` is ``cfg.home`` (``~/.haulbook``) unless a caller passes one.
Project names are single path components, so a ledger can never resolve
outside its home directory.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from ..config import cfg
from ..exceptions import ConfigurationError

DB_FILENAME = "haulbook.db"

# Lowercase alphanumeric + hyphens + underscores, 1–64 chars
_NAME_RE = re.compile(r"^[a-z0-9][a-z0-9_-]{0,63}$")


@dataclass(frozen=True)
class ProjectLayout:
    name:        str
    root:        Path   # <home>/<name>/
    entries_dir: Path   # root/entries/
    db_path:     Path   # root/haulbook.db


def validate_project_name(name: str) -> str | None:
    """Return an error message for an unusable project name, else ``None``."""
    if not name or not name.strip():
        return "Project name cannot be empty."
    if not _NAME_RE.match(name):
        return (
            f"Invalid project name {name!r}: use lowercase letters, digits, "
            "hyphens and underscores, starting with a letter or digit (max 64)."
        )
    return None


def resolve_project(project: str | None = None, *, home: Path | None = None) -> ProjectLayout:
    """
    Resolve ``project`` (default: ``cfg.project``) under ``home``
    (default: ``cfg.home``).

    Raises:
        ConfigurationError: the name is not a valid project name.
    """
    name = project or cfg.project
    error = validate_project_name(name)
    if error:
        raise ConfigurationError(error)

    root = Path(home or cfg.home) / name
    return ProjectLayout(
        name=name,
        root=root,
        entries_dir=root / "entries",
        db_path=root / DB_FILENAME,
    )


__all__ = ["ProjectLayout", "resolve_project", "validate_project_name"]
