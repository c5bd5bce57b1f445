"""Store configuration, built once at process start.

Two environment variables feed the store:

``JOT_DIR``
    Overrides the root data directory.
``JOT_ACTIVE_NOTEBOOK``
    Names the notebook used when a call does not pass one explicitly.

They are read exactly once, by :meth:`StoreConfig.from_env`; everything below
the entry point receives the resulting :class:`StoreConfig` instead of looking
at ``os.environ`` itself.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from jot.exc import ConfigurationError

ROOT_DIR_ENV = "JOT_DIR"
ACTIVE_NOTEBOOK_ENV = "JOT_ACTIVE_NOTEBOOK"

APP_DIR_NAME = "jot"
NOTEBOOKS_DIR_NAME = "notebooks"
TEMPLATES_DIR_NAME = "templates"
LEGACY_ENTRIES_DIR_NAME = "entries"
IDENTITY_FILE_NAME = "identity.txt"
CONFIG_FILE_NAME = "config.toml"
RECIPIENT_KEY = "recipient"
NOTE_SUFFIX = ".md"
DEFAULT_NOTEBOOK = "default"


@dataclass(frozen=True)
class StoreConfig:
    """Where the store lives and which notebook is active."""

    root_override: Path | None = None
    config_dir: Path | None = None
    active_notebook: str | None = None
    default_notebook: str = DEFAULT_NOTEBOOK

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StoreConfig":
        """Build a config from *environ* (``os.environ`` when omitted).

        Empty values count as unset.  Without a root override the platform
        config directory is resolved here too, from the same *environ*.
        """
        env = os.environ if environ is None else environ
        root = env.get(ROOT_DIR_ENV) or None
        active = env.get(ACTIVE_NOTEBOOK_ENV) or None
        return cls(
            root_override=Path(root).expanduser() if root else None,
            config_dir=None if root else default_config_dir(env),
            active_notebook=active,
        )


def default_config_dir(environ: Mapping[str, str] | None = None) -> Path:
    """Return the platform's per-user configuration directory."""
    env = os.environ if environ is None else environ
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise ConfigurationError(f"Could not find a valid config directory: {exc}") from exc

    if sys.platform == "win32":
        appdata = env.get("APPDATA")
        return Path(appdata) if appdata else home / "AppData" / "Roaming"
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    xdg = env.get("XDG_CONFIG_HOME")
    return Path(xdg) if xdg else home / ".config"
