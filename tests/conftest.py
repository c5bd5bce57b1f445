"""Shared fixtures: a store rooted in a temporary directory."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from loguru import logger

from jot.config import StoreConfig
from jot.store import NoteStore


@pytest.fixture()
def root(tmp_path: Path) -> Path:
    return tmp_path / "jot-root"


@pytest.fixture()
def config(root: Path) -> StoreConfig:
    return StoreConfig(root_override=root)


@pytest.fixture()
def store(config: StoreConfig) -> NoteStore:
    return NoteStore(config)


@pytest.fixture()
def populated(store: NoteStore) -> NoteStore:
    """A ``default`` notebook with four notes over three days, plus ``work``."""
    store.jot_down("First thought", ["idea"], now=datetime(2025, 1, 1, 10, 0, 0))
    store.jot_down(
        "Second thought about Python",
        ["python", "idea"],
        now=datetime(2025, 1, 1, 20, 0, 0),
    )
    store.add_task("water the plants", now=datetime(2025, 1, 2, 9, 30, 0))
    store.jot_down("Third thought", now=datetime(2025, 1, 5, 12, 0, 0))
    store.jot_down(
        "Standup notes mention python",
        ["meeting"],
        notebook="work",
        now=datetime(2025, 1, 3, 9, 0, 0),
    )
    return store


@pytest.fixture()
def log_messages():
    """Collect loguru messages emitted during the test."""
    messages: list[str] = []
    handler_id = logger.add(messages.append, format="{level}: {message}", level="DEBUG")
    yield messages
    logger.remove(handler_id)
