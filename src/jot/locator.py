"""Resolve "which note do you mean" into a single file.

Two addressing modes, never combined:

- **prefix**: the leading characters of a note id (``2025-01-01-1``)
- **last index**: recency rank, ``1`` being the newest note

Filenames are timestamps, so sorting them by name sorts notes
chronologically.  Nothing here writes to disk.
"""

from __future__ import annotations

from pathlib import Path

from jot.exc import (
    AmbiguousPrefix,
    IndexOutOfBounds,
    InvalidTarget,
    NoteNotFound,
    ordinal,
    ordinal_suffix,
)

__all__ = [
    "find_by_last_index",
    "find_by_prefix",
    "list_entries",
    "ordinal",
    "ordinal_suffix",
    "resolve_target",
]


def list_entries(notebook_dir: Path) -> list[Path]:
    """Return the note files of *notebook_dir*, sorted by filename."""
    return sorted((p for p in notebook_dir.iterdir() if p.is_file()), key=lambda p: p.name)


def find_by_prefix(notebook_dir: Path, prefix: str) -> Path:
    matches = [p for p in list_entries(notebook_dir) if p.name.startswith(prefix)]
    if not matches:
        raise NoteNotFound(prefix)
    if len(matches) > 1:
        raise AmbiguousPrefix(prefix, [p.name for p in matches])
    return matches[0]


def find_by_last_index(notebook_dir: Path, index: int) -> Path:
    """Return the *index*-th most recent note (1 = newest)."""
    if index < 1:
        raise InvalidTarget("--last index must be 1 or greater.")
    entries = list_entries(notebook_dir)
    total = len(entries)
    if index > total:
        raise IndexOutOfBounds(index, total)
    return entries[total - index]


def resolve_target(
    notebook_dir: Path,
    id_prefix: str | None = None,
    last: int | None = None,
) -> Path:
    """Resolve exactly one of *id_prefix* / *last* to a note path."""
    if last is not None:
        if id_prefix is not None:
            raise InvalidTarget("Cannot use an ID prefix and the --last flag at the same time.")
        return find_by_last_index(notebook_dir, last)
    if id_prefix is not None:
        return find_by_prefix(notebook_dir, id_prefix)
    raise InvalidTarget("Provide either an ID prefix or --last.")
