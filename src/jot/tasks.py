"""Checklist task extraction.

Tasks are derived from note content on every parse and never stored
separately.  A line (after trimming) is a task when it starts with one of
two literal markers:

- ``- [ ] `` for an open task
- ``- [x] `` for a completed task

Completing a task means editing the note text itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jot.note import Note

PENDING_MARKER = "- [ ] "
COMPLETED_MARKER = "- [x] "


# ---------------------------------------------------------------------------
# Data model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Task:
    description: str
    completed: bool = False

    def to_dict(self) -> dict:
        return {"description": self.description, "completed": self.completed}


@dataclass(frozen=True)
class TaskStats:
    pending: int = 0
    completed: int = 0

    @classmethod
    def from_tasks(cls, tasks: list[Task]) -> "TaskStats":
        done = sum(1 for t in tasks if t.completed)
        return cls(pending=len(tasks) - done, completed=done)

    @property
    def total(self) -> int:
        return self.pending + self.completed

    def __add__(self, other: "TaskStats") -> "TaskStats":
        return TaskStats(self.pending + other.pending, self.completed + other.completed)


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


def extract_tasks(content: str) -> list[Task]:
    """Return every task in *content*, in the order they appear."""
    tasks: list[Task] = []
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith(PENDING_MARKER):
            tasks.append(Task(stripped[len(PENDING_MARKER) :], completed=False))
        elif stripped.startswith(COMPLETED_MARKER):
            tasks.append(Task(stripped[len(COMPLETED_MARKER) :], completed=True))
    return tasks


def has_pending_tasks(note: "Note") -> bool:
    return any(not t.completed for t in note.tasks)


def task_line(description: str) -> str:
    """Render *description* as an open task line."""
    return f"{PENDING_MARKER}{description}"
