"""NoteStore: the interface every collaborator goes through.

Command handlers, the interactive shell and export/import never touch note
files directly.  They resolve a notebook, locate or list notes, and write
them back through this class.  Every call re-reads the directory; there is
no cache and no index, so a note changed by another process is picked up on
the next call.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path

from loguru import logger

from jot.config import NOTE_SUFFIX, StoreConfig
from jot.crypto import DecryptReport, EncryptionGate, decrypt_store, init_encryption
from jot.db import NotebookStats
from jot.exc import InvalidDateSpec
from jot.frontmatter import Frontmatter, normalise_tags
from jot.locator import list_entries, resolve_target
from jot.note import Note, new_note_id
from jot.parser import parse_note, write_note
from jot.paths import StorePaths
from jot.tasks import has_pending_tasks, task_line

DATE_FORMAT = "%Y-%m-%d"


def parse_date_spec(spec: str) -> tuple[date, date]:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD..YYYY-MM-DD`` into an inclusive range."""
    start_str, sep, end_str = spec.partition("..")
    try:
        start = datetime.strptime(start_str.strip(), DATE_FORMAT).date()
        end = datetime.strptime(end_str.strip(), DATE_FORMAT).date() if sep else start
    except ValueError as exc:
        raise InvalidDateSpec(spec) from exc
    return start, end


def _date_of(path: Path) -> date | None:
    try:
        return datetime.strptime(path.name[:10], DATE_FORMAT).date()
    except ValueError:
        return None


class NoteStore:
    """Notebooks of timestamped Markdown notes, optionally encrypted at rest."""

    def __init__(self, config: StoreConfig | None = None) -> None:
        self.config = config or StoreConfig.from_env()
        self.paths = StorePaths(self.config)
        self.gate = EncryptionGate(self.paths)

    # ------------------------------------------------------------------
    # Notebooks
    # ------------------------------------------------------------------

    def active_notebook(self, override: str | None = None) -> str:
        return self.paths.active_notebook_name(override)

    def notebook_dir(self, notebook: str | None = None) -> Path:
        """Directory of *notebook*, or of the active notebook when omitted."""
        return self.paths.active_notebook_dir(notebook)

    def notebooks(self) -> list[str]:
        return self.paths.list_notebooks()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def parse(self, path: Path, notebook: str | None = None) -> Note:
        return parse_note(path, notebook or path.parent.name, self.gate)

    def list_notes(self, notebook: str | None = None) -> list[Note]:
        """Parse every note in *notebook*, oldest first.

        Fails on the first file that cannot be parsed.
        """
        name = self.active_notebook(notebook)
        return [self.parse(p, name) for p in list_entries(self.paths.notebook_dir(name))]

    def all_notes(self) -> list[Note]:
        notes: list[Note] = []
        for name in self.notebooks():
            notes.extend(self.list_notes(name))
        return notes

    def locate(
        self,
        notebook: str | None = None,
        id_prefix: str | None = None,
        last: int | None = None,
    ) -> Path:
        return resolve_target(self.notebook_dir(notebook), id_prefix, last)

    def load(
        self,
        notebook: str | None = None,
        id_prefix: str | None = None,
        last: int | None = None,
    ) -> Note:
        path = self.locate(notebook, id_prefix, last)
        return self.parse(path, path.parent.name)

    def read_raw(self, path: Path) -> str:
        """Full decrypted text of a note file, frontmatter included."""
        return self.gate.read(path)

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, note: Note) -> None:
        """Rewrite the whole file of *note* from its frontmatter and content."""
        write_note(note.path, note.frontmatter, note.content, self.gate)

    def create(
        self,
        content: str,
        *,
        tags: Iterable[str] | None = None,
        notebook: str | None = None,
        now: datetime | None = None,
    ) -> Note:
        """Write a new note stamped with *now* and return it.

        An existing note with the same id (same second) is overwritten.
        """
        name = self.active_notebook(notebook)
        note_id = new_note_id(now)
        path = self.paths.notebook_dir(name) / f"{note_id}{NOTE_SUFFIX}"
        fm = Frontmatter(tags=normalise_tags(tags or []))
        write_note(path, fm, content, self.gate)
        logger.debug("Saved {} to notebook '{}'", path.name, name)
        return self.parse(path, name)

    def jot_down(
        self,
        message: str,
        tags: Iterable[str] | None = None,
        *,
        notebook: str | None = None,
        now: datetime | None = None,
    ) -> Note:
        return self.create(message, tags=tags, notebook=notebook, now=now)

    def add_task(self, message: str, *, notebook: str | None = None, now: datetime | None = None) -> Note:
        return self.create(task_line(message), notebook=notebook, now=now)

    def create_from_template(
        self,
        expanded: str,
        *,
        notebook: str | None = None,
        now: datetime | None = None,
    ) -> Note:
        """Write a note whose text was expanded from a template by the caller."""
        return self.create(expanded, notebook=notebook, now=now)

    def read_template(self, name: str | None = None) -> str | None:
        """Raw text of a template, or ``None`` when it does not exist."""
        path = self.paths.template_path(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def delete(self, path: Path) -> None:
        path.unlink()
        logger.debug("Deleted {}", path.name)

    # ------------------------------------------------------------------
    # Tags / pinning
    # ------------------------------------------------------------------

    def _rewrite(self, note: Note, frontmatter: Frontmatter) -> None:
        # the in-memory note only changes once the file has been written
        write_note(note.path, frontmatter, note.content, self.gate)
        note.frontmatter = frontmatter

    def _retag(self, note: Note, tags: Iterable[str]) -> Note:
        self._rewrite(note, replace(note.frontmatter, tags=normalise_tags(tags)))
        return note

    def add_tags(self, note: Note, tags: Iterable[str]) -> Note:
        return self._retag(note, [*note.frontmatter.tags, *tags])

    def remove_tags(self, note: Note, tags: Iterable[str]) -> Note:
        drop = set(tags)
        return self._retag(note, [t for t in note.frontmatter.tags if t not in drop])

    def set_tags(self, note: Note, tags: Iterable[str]) -> Note:
        return self._retag(note, tags)

    def set_pinned(self, note: Note, pinned: bool) -> bool:
        """Pin or unpin *note*.  Returns ``False`` when nothing changed."""
        if note.frontmatter.pinned == pinned:
            return False
        self._rewrite(note, replace(note.frontmatter, pinned=pinned))
        return True

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def recent(
        self,
        notebook: str | None = None,
        count: int = 10,
        *,
        pinned_only: bool = False,
        with_pending_tasks: bool = False,
    ) -> list[Note]:
        """Newest notes first, optionally only pinned or with open tasks."""
        notes = self.list_notes(notebook)
        if pinned_only:
            notes = [n for n in notes if n.frontmatter.pinned]
        if with_pending_tasks:
            notes = [n for n in notes if has_pending_tasks(n)]
        notes.sort(key=lambda n: n.id, reverse=True)
        return notes[:count]

    def search(self, query: str, notebook: str | None = None, *, all_notebooks: bool = False) -> list[Note]:
        """Case-insensitive substring search over note content."""
        q = query.lower()
        notes = self.all_notes() if all_notebooks else self.list_notes(notebook)
        return [n for n in notes if q in n.content.lower()]

    def with_tags(self, tags: Iterable[str], notebook: str | None = None) -> list[Note]:
        """Notes carrying at least one of *tags*."""
        wanted = set(tags)
        return [n for n in self.list_notes(notebook) if wanted.intersection(n.frontmatter.tags)]

    def between(self, start: date, end: date, notebook: str | None = None) -> list[Note]:
        """Notes whose id date falls within ``[start, end]``, oldest first.

        Files whose name does not start with a date are ignored.
        """
        name = self.active_notebook(notebook)
        matches = []
        for path in list_entries(self.paths.notebook_dir(name)):
            day = _date_of(path)
            if day is not None and start <= day <= end:
                matches.append(self.parse(path, name))
        return matches

    def on_date(self, day: date, notebook: str | None = None) -> list[Note]:
        return self.between(day, day, notebook)

    def on(self, spec: str, notebook: str | None = None) -> list[Note]:
        start, end = parse_date_spec(spec)
        return self.between(start, end, notebook)

    def today(self, notebook: str | None = None, *, today: date | None = None) -> list[Note]:
        return self.on_date(today or date.today(), notebook)

    def yesterday(self, notebook: str | None = None, *, today: date | None = None) -> list[Note]:
        return self.on_date((today or date.today()) - timedelta(days=1), notebook)

    def this_week(self, notebook: str | None = None, *, today: date | None = None) -> list[Note]:
        """Notes from the Sunday starting this week up to *today*."""
        today = today or date.today()
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        return self.between(week_start, today, notebook)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def stats(self, notebook: str | None = None, *, all_notebooks: bool = False) -> NotebookStats:
        notes = self.all_notes() if all_notebooks else self.list_notes(notebook)
        return NotebookStats(notes)

    # ------------------------------------------------------------------
    # Encryption
    # ------------------------------------------------------------------

    def enable_encryption(self) -> str | None:
        return init_encryption(self.paths)

    def decrypt_all(self) -> DecryptReport:
        """Permanently decrypt the whole store.  Callers must confirm first."""
        return decrypt_store(self.paths)
