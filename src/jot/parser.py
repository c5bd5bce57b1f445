"""Turn note files into :class:`Note` values and back."""

from __future__ import annotations

import re
from pathlib import Path
from typing import TYPE_CHECKING

from jot.config import NOTE_SUFFIX
from jot.frontmatter import DELIMITER, Frontmatter, decode_frontmatter, encode_frontmatter
from jot.note import Note
from jot.tasks import extract_tasks

if TYPE_CHECKING:
    from jot.crypto import EncryptionGate


# YAML front-matter block: delimiter lines of exactly three dashes; the
# closing one may end the file
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)


def note_id_from_path(path: Path) -> str:
    name = path.name
    return name[: -len(NOTE_SUFFIX)] if name.endswith(NOTE_SUFFIX) else path.stem


def split_frontmatter(text: str, path: Path | None = None) -> tuple[Frontmatter, str]:
    """Split a metadata block from body text.

    Returns ``(frontmatter, content)`` with *content* trimmed when a block was
    found.  Text that does not open with a ``---`` line, or opens with one but
    never closes it, is all content and gets default frontmatter.
    """
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return Frontmatter(), text
    fm = decode_frontmatter(match.group(1), path)
    return fm, text[match.end() :].strip()


def serialize_note(frontmatter: Frontmatter, content: str) -> str:
    """Render a note file body.

    Default frontmatter produces no block, unless the content itself opens
    with a block and would otherwise be read back as metadata.
    """
    if frontmatter.is_default and not _FRONTMATTER_RE.match(content):
        return content
    return f"{DELIMITER}\n{encode_frontmatter(frontmatter)}{DELIMITER}\n\n{content}"


def parse_note(path: Path, notebook: str, gate: "EncryptionGate") -> Note:
    """Read *path* through *gate* and return a fully-populated :class:`Note`."""
    text = gate.read(path)
    frontmatter, content = split_frontmatter(text, path)
    return Note(
        id=note_id_from_path(path),
        path=path,
        notebook=notebook,
        frontmatter=frontmatter,
        content=content,
        tasks=extract_tasks(content),
    )


def write_note(path: Path, frontmatter: Frontmatter, content: str, gate: "EncryptionGate") -> None:
    """Replace the whole of *path* with the serialized note."""
    gate.write(path, serialize_note(frontmatter, content))
