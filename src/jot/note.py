"""Core Note dataclass."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

from jot.frontmatter import Frontmatter
from jot.tasks import Task

ID_FORMAT = "%Y-%m-%d-%H%M%S"


def new_note_id(now: datetime | None = None) -> str:
    """Return the id for a note created at *now*.

    Two notes created within the same second get the same id.
    """
    return (now or datetime.now()).strftime(ID_FORMAT)


@dataclass
class Note:
    """A single jot, as read from disk."""

    id: str
    path: Path
    #: Name of the containing notebook; never written into the file
    notebook: str
    frontmatter: Frontmatter = field(default_factory=Frontmatter)
    content: str = ""
    tasks: list[Task] = field(default_factory=list)

    @property
    def first_line(self) -> str:
        return self.content.splitlines()[0].strip() if self.content else ""

    @property
    def created(self) -> datetime | None:
        """Creation time encoded in the id, if the id follows the usual format."""
        try:
            return datetime.strptime(self.id, ID_FORMAT)
        except ValueError:
            return None

    @property
    def tags(self) -> list[str]:
        return self.frontmatter.tags

    @property
    def pinned(self) -> bool:
        return self.frontmatter.pinned

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "notebook": self.notebook,
            "tags": list(self.frontmatter.tags),
            "pinned": self.frontmatter.pinned,
            "content": self.content,
            "tasks": [t.to_dict() for t in self.tasks],
        }
