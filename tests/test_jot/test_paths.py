"""Unit tests for jot.paths."""

from pathlib import Path

import pytest

from jot.config import StoreConfig
from jot.exc import InvalidNotebookName, NotebookExists, NotebookNotFound
from jot.paths import StorePaths, migrate_legacy_layout


@pytest.fixture()
def paths(config: StoreConfig) -> StorePaths:
    return StorePaths(config)


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------


class TestDirectories:
    def test_root_dir_is_created(self, paths: StorePaths, root: Path):
        assert not root.exists()
        assert paths.root_dir() == root
        assert root.is_dir()

    def test_notebooks_root(self, paths: StorePaths, root: Path):
        assert paths.notebooks_root() == root / "notebooks"
        assert (root / "notebooks").is_dir()

    def test_notebook_dir_is_provisioned_on_read(self, paths: StorePaths, root: Path):
        nb = paths.notebook_dir("ideas")
        assert nb == root / "notebooks" / "ideas"
        assert nb.is_dir()

    def test_templates_dir_is_sibling_of_notebooks(self, paths: StorePaths, root: Path):
        assert paths.templates_dir() == root / "templates"
        assert paths.templates_dir().parent == paths.notebooks_root().parent

    def test_template_path_appends_suffix(self, paths: StorePaths, root: Path):
        assert paths.template_path("daily") == root / "templates" / "daily.md"
        assert paths.template_path("daily.md") == root / "templates" / "daily.md"
        assert paths.template_path() == root / "templates" / "default.md"

    def test_key_file_locations(self, paths: StorePaths, root: Path):
        assert paths.identity_path() == root / "identity.txt"
        assert paths.config_path() == root / "config.toml"


# ---------------------------------------------------------------------------
# Active notebook
# ---------------------------------------------------------------------------


class TestActiveNotebook:
    def test_defaults_to_default(self, paths: StorePaths, root: Path):
        assert paths.active_notebook_name() == "default"
        assert paths.active_notebook_dir() == root / "notebooks" / "default"

    def test_explicit_override_wins(self, root: Path):
        paths = StorePaths(StoreConfig(root_override=root, active_notebook="work"))
        paths.create_notebook("work")
        assert paths.active_notebook_name("personal") == "personal"

    def test_environment_notebook_used_when_it_exists(self, root: Path):
        paths = StorePaths(StoreConfig(root_override=root, active_notebook="work"))
        paths.create_notebook("work")
        assert paths.active_notebook_name() == "work"

    def test_missing_environment_notebook_falls_back_with_warning(
        self, root: Path, log_messages: list[str]
    ):
        paths = StorePaths(StoreConfig(root_override=root, active_notebook="wrok"))
        assert paths.active_notebook_name() == "default"
        assert any(m.startswith("WARNING") and "wrok" in m for m in log_messages)

    def test_fallback_does_not_create_the_missing_notebook(self, root: Path):
        paths = StorePaths(StoreConfig(root_override=root, active_notebook="wrok"))
        paths.active_notebook_dir()
        assert not (root / "notebooks" / "wrok").exists()


# ---------------------------------------------------------------------------
# Notebook management
# ---------------------------------------------------------------------------


class TestNotebookManagement:
    def test_create_and_list(self, paths: StorePaths):
        paths.create_notebook("work")
        paths.create_notebook("personal")
        assert paths.list_notebooks() == ["personal", "work"]

    def test_create_existing_raises(self, paths: StorePaths):
        paths.create_notebook("work")
        with pytest.raises(NotebookExists):
            paths.create_notebook("work")

    @pytest.mark.parametrize("name", ["", ".", "..", "a/b", "a\\b"])
    def test_invalid_names_rejected(self, paths: StorePaths, name: str):
        with pytest.raises(InvalidNotebookName):
            paths.create_notebook(name)

    def test_notebook_dir_rejects_traversal(self, paths: StorePaths):
        with pytest.raises(InvalidNotebookName):
            paths.notebook_dir("../outside")

    def test_require_notebook_fails_when_missing(self, paths: StorePaths):
        with pytest.raises(NotebookNotFound, match="ghost"):
            paths.require_notebook("ghost")

    def test_require_notebook_returns_existing(self, paths: StorePaths, root: Path):
        paths.create_notebook("work")
        assert paths.require_notebook("work") == root / "notebooks" / "work"


# ---------------------------------------------------------------------------
# Legacy migration
# ---------------------------------------------------------------------------


def _make_legacy(root: Path) -> Path:
    entries = root / "entries"
    entries.mkdir(parents=True)
    (entries / "2024-05-01-080000.md").write_text("old note", encoding="utf-8")
    (entries / "2024-05-02-080000.md").write_text("older note", encoding="utf-8")
    return entries


class TestLegacyMigration:
    def test_entries_move_to_default_notebook(self, paths: StorePaths, root: Path):
        _make_legacy(root)
        paths.root_dir()
        default = root / "notebooks" / "default"
        assert not (root / "entries").exists()
        assert sorted(p.name for p in default.iterdir()) == [
            "2024-05-01-080000.md",
            "2024-05-02-080000.md",
        ]

    def test_migration_is_idempotent(self, root: Path):
        _make_legacy(root)
        assert migrate_legacy_layout(root) is True
        assert migrate_legacy_layout(root) is False
        files = list((root / "notebooks" / "default").iterdir())
        assert len(files) == 2
        assert (root / "notebooks" / "default" / "2024-05-01-080000.md").read_text() == "old note"

    def test_no_migration_when_notebooks_exist(self, root: Path):
        _make_legacy(root)
        (root / "notebooks").mkdir()
        assert migrate_legacy_layout(root) is False
        assert (root / "entries").is_dir()

    def test_migration_logs_notice(self, root: Path, log_messages: list[str]):
        _make_legacy(root)
        migrate_legacy_layout(root)
        assert any("Migration complete" in m for m in log_messages)

    def test_fresh_root_is_noop(self, tmp_path: Path):
        assert migrate_legacy_layout(tmp_path) is False
        assert not (tmp_path / "notebooks").exists()
