"""YAML frontmatter codec.

A note may open with a metadata block::

    ---
    tags:
    - idea
    - work
    pinned: true
    ---

    Body text.

Only ``tags`` and ``pinned`` are understood.  ``pinned`` is left out of the
encoded block when false, and a note whose frontmatter is entirely default
gets no block at all.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from jot.exc import FrontmatterError

DELIMITER = "---"


def normalise_tags(tags: Iterable[str]) -> list[str]:
    """Sort and de-duplicate *tags*."""
    return sorted(set(tags))


def _coerce_tags(raw: Any, path: Path | None) -> list[str]:
    if raw is None:
        return []
    # "tags: a, b" is accepted as shorthand for a list
    if isinstance(raw, str):
        return [t.strip() for t in raw.split(",") if t.strip()]
    if isinstance(raw, list):
        return [str(t) for t in raw if t is not None]
    raise FrontmatterError(path, f"'tags' must be a list, got {type(raw).__name__}")


@dataclass
class Frontmatter:
    tags: list[str] = field(default_factory=list)
    pinned: bool = False

    @property
    def is_default(self) -> bool:
        return not self.tags and not self.pinned

    @classmethod
    def from_mapping(cls, data: Any, path: Path | None = None) -> "Frontmatter":
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise FrontmatterError(path, f"expected a mapping, got {type(data).__name__}")
        pinned = data.get("pinned", False)
        if pinned is None:
            pinned = False
        if not isinstance(pinned, bool):
            raise FrontmatterError(path, f"'pinned' must be true or false, got {pinned!r}")
        return cls(tags=_coerce_tags(data.get("tags"), path), pinned=pinned)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"tags": list(self.tags)}
        if self.pinned:
            data["pinned"] = True
        return data


def decode_frontmatter(text: str, path: Path | None = None) -> Frontmatter:
    """Decode the YAML between the two delimiters."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise FrontmatterError(path, str(exc)) from exc
    return Frontmatter.from_mapping(data, path)


def encode_frontmatter(fm: Frontmatter) -> str:
    """Encode *fm* as YAML, newline-terminated, without delimiters."""
    return yaml.safe_dump(
        fm.to_dict(),
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
    )
