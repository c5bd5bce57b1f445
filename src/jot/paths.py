"""Path resolution for the on-disk store layout.

Layout, relative to the root directory::

    notebooks/<name>/<YYYY-MM-DD-HHMMSS>.md
    templates/<name>.md
    identity.txt
    config.toml
    entries/            # legacy, migrated to notebooks/default on first use

Every accessor creates the directory it returns.  This includes
:meth:`StorePaths.notebook_dir`, so jotting into a notebook that does not
exist yet provisions it.  Only :meth:`StorePaths.require_notebook` insists on
the notebook already existing.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from jot.config import (
    APP_DIR_NAME,
    CONFIG_FILE_NAME,
    IDENTITY_FILE_NAME,
    LEGACY_ENTRIES_DIR_NAME,
    NOTE_SUFFIX,
    NOTEBOOKS_DIR_NAME,
    TEMPLATES_DIR_NAME,
    StoreConfig,
)
from jot.exc import (
    ConfigurationError,
    InvalidNotebookName,
    NotebookExists,
    NotebookNotFound,
)


def _ensure_dir(path: Path) -> Path:
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigurationError(f"Could not create directory {path}: {exc}") from exc
        logger.debug("Created directory {}", path)
    return path


def migrate_legacy_layout(root: Path) -> bool:
    """Move a pre-notebook ``entries/`` directory to ``notebooks/default``.

    Runs only when ``entries/`` exists and ``notebooks/`` does not, so calling
    it on every access is safe.  Returns ``True`` when a migration happened.
    """
    legacy = root / LEGACY_ENTRIES_DIR_NAME
    notebooks = root / NOTEBOOKS_DIR_NAME
    if not legacy.is_dir() or notebooks.exists():
        return False

    logger.info("jot now supports notebooks!")
    logger.info("Migrating your existing notes to the 'default' notebook...")
    _ensure_dir(notebooks)
    target = notebooks / "default"
    try:
        legacy.rename(target)
    except OSError as exc:
        raise ConfigurationError(f"Failed to move notes from {legacy} to {target}: {exc}") from exc
    logger.info("Migration complete. Your notes are now in the 'default' notebook.")
    return True


def validate_notebook_name(name: str) -> str:
    if not name or "/" in name or "\\" in name or name in {".", ".."}:
        raise InvalidNotebookName(name)
    return name


class StorePaths:
    """Resolves every directory and file the store touches."""

    def __init__(self, config: StoreConfig) -> None:
        self.config = config

    # ------------------------------------------------------------------
    # Directories
    # ------------------------------------------------------------------

    def root_dir(self) -> Path:
        """Return the root data directory, creating and migrating it as needed."""
        if self.config.root_override is not None:
            root = self.config.root_override
        elif self.config.config_dir is not None:
            root = self.config.config_dir / APP_DIR_NAME
        else:
            raise ConfigurationError("Could not find a valid config directory.")
        _ensure_dir(root)
        migrate_legacy_layout(root)
        return root

    def notebooks_root(self) -> Path:
        return _ensure_dir(self.root_dir() / NOTEBOOKS_DIR_NAME)

    def notebook_dir(self, name: str) -> Path:
        return _ensure_dir(self.notebooks_root() / validate_notebook_name(name))

    def templates_dir(self) -> Path:
        return _ensure_dir(self.root_dir() / TEMPLATES_DIR_NAME)

    def template_path(self, name: str | None = None) -> Path:
        """Path of the template called *name* (``default`` when omitted)."""
        filename = name or "default"
        if not filename.endswith(NOTE_SUFFIX):
            filename += NOTE_SUFFIX
        return self.templates_dir() / filename

    # ------------------------------------------------------------------
    # Encryption material
    # ------------------------------------------------------------------

    def identity_path(self) -> Path:
        return self.root_dir() / IDENTITY_FILE_NAME

    def config_path(self) -> Path:
        return self.root_dir() / CONFIG_FILE_NAME

    # ------------------------------------------------------------------
    # Active notebook
    # ------------------------------------------------------------------

    def active_notebook_name(self, override: str | None = None) -> str:
        """Pick the notebook by priority: *override*, environment, default.

        A notebook named by the environment that does not exist falls back to
        the default notebook with a warning instead of failing.
        """
        if override:
            return override
        env_name = self.config.active_notebook
        if env_name:
            if self.notebook_exists(env_name):
                return env_name
            logger.warning(
                "Active notebook '{}' does not exist; falling back to '{}'.",
                env_name,
                self.config.default_notebook,
            )
        return self.config.default_notebook

    def active_notebook_dir(self, override: str | None = None) -> Path:
        return self.notebook_dir(self.active_notebook_name(override))

    # ------------------------------------------------------------------
    # Notebook management
    # ------------------------------------------------------------------

    def notebook_exists(self, name: str) -> bool:
        try:
            validate_notebook_name(name)
        except InvalidNotebookName:
            return False
        return (self.notebooks_root() / name).is_dir()

    def list_notebooks(self) -> list[str]:
        """Return the names of every notebook, sorted."""
        return sorted(p.name for p in self.notebooks_root().iterdir() if p.is_dir())

    def create_notebook(self, name: str) -> Path:
        validate_notebook_name(name)
        path = self.notebooks_root() / name
        if path.exists():
            raise NotebookExists(name)
        return _ensure_dir(path)

    def require_notebook(self, name: str) -> Path:
        """Return the directory of *name*, failing when it does not exist yet."""
        if not self.notebook_exists(name):
            raise NotebookNotFound(name)
        return self.notebooks_root() / name
