"""Exceptions raised by the note store."""

from __future__ import annotations

from pathlib import Path


def ordinal_suffix(n: int) -> str:
    """Return the English ordinal suffix for *n* (``st``, ``nd``, ``rd``, ``th``)."""
    if 11 <= n % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")


def ordinal(n: int) -> str:
    return f"{n}{ordinal_suffix(n)}"


class JotError(Exception):
    """Base class for every error the store raises."""


class ConfigurationError(JotError):
    """The root directory cannot be determined or created."""


# ---------------------------------------------------------------------------
# Addressing
# ---------------------------------------------------------------------------


class AddressingError(JotError):
    """A user-supplied target does not resolve to exactly one note."""


class InvalidTarget(AddressingError):  # noqa: N818
    """The target itself is malformed (both modes given, index 0, ...)."""


class NoteNotFound(AddressingError):  # noqa: N818
    def __init__(self, prefix: str):
        self.prefix = prefix
        super().__init__(f"No jot found with the prefix '{prefix}'")


class AmbiguousPrefix(AddressingError):  # noqa: N818
    def __init__(self, prefix: str, matches: list[str]):
        self.prefix = prefix
        self.matches = matches
        listing = "\n".join(matches)
        super().__init__(f"Prefix '{prefix}' is not unique. Multiple jots found:\n{listing}")


class IndexOutOfBounds(AddressingError):  # noqa: N818
    def __init__(self, index: int, total: int):
        self.index = index
        self.total = total
        if total == 0:
            msg = "No jots exist to act upon."
        else:
            msg = (
                f"Index out of bounds. You asked for the {ordinal(index)} last jot, "
                f"but only {total} exist."
            )
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Notebooks
# ---------------------------------------------------------------------------


class NotebookNotFound(JotError):  # noqa: N818
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Notebook '{name}' not found. Create it with `jot notebook new {name}`.")


class NotebookExists(JotError):  # noqa: N818
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Notebook '{name}' already exists.")


class InvalidNotebookName(JotError):  # noqa: N818
    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Invalid notebook name: '{name}'. Names cannot be empty, contain slashes or be dots."
        )


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


class FrontmatterError(JotError):
    """The metadata block of a note cannot be decoded."""

    def __init__(self, path: Path | str | None, reason: str):
        self.path = Path(path) if path is not None else None
        self.reason = reason
        where = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Failed to parse YAML frontmatter{where}: {reason}")


class CryptoError(JotError):
    """Bad identity, bad recipient, or ciphertext that does not decrypt."""


class UnreadableNote(JotError):  # noqa: N818
    """A note file holds bytes that are not UTF-8 text."""

    def __init__(self, path: Path | str, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path} is not valid UTF-8 text: {reason}")


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


class InvalidDateSpec(JotError):  # noqa: N818
    def __init__(self, spec: str):
        self.spec = spec
        super().__init__(
            f"Invalid date '{spec}'. Use YYYY-MM-DD or YYYY-MM-DD..YYYY-MM-DD."
        )
