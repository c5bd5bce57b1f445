"""jot: notebooks of timestamped Markdown notes with optional encryption."""

from jot.config import StoreConfig
from jot.crypto import EncryptionGate
from jot.db import NotebookStats
from jot.exc import JotError
from jot.frontmatter import Frontmatter
from jot.locator import resolve_target
from jot.note import Note
from jot.parser import parse_note, serialize_note
from jot.paths import StorePaths
from jot.store import NoteStore
from jot.tasks import Task, TaskStats, extract_tasks

__all__ = [
    "EncryptionGate",
    "Frontmatter",
    "JotError",
    "Note",
    "NoteStore",
    "NotebookStats",
    "StoreConfig",
    "StorePaths",
    "Task",
    "TaskStats",
    "extract_tasks",
    "parse_note",
    "resolve_target",
    "serialize_note",
]
