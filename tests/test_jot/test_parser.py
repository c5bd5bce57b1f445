"""Unit tests for jot.parser."""

import textwrap
from pathlib import Path

import pytest

from jot.crypto import EncryptionGate
from jot.exc import FrontmatterError
from jot.frontmatter import Frontmatter
from jot.parser import note_id_from_path, parse_note, serialize_note, split_frontmatter, write_note
from jot.paths import StorePaths
from jot.tasks import Task

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _write(directory: Path, name: str, content: str) -> Path:
    path = directory / f"{name}.md"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


@pytest.fixture()
def gate(config) -> EncryptionGate:
    return EncryptionGate(StorePaths(config))


@pytest.fixture()
def notebook(gate: EncryptionGate) -> Path:
    return gate.paths.notebook_dir("default")


# ---------------------------------------------------------------------------
# split_frontmatter
# ---------------------------------------------------------------------------


class TestSplitFrontmatter:
    def test_no_block(self):
        fm, content = split_frontmatter("Just some text.\n")
        assert fm.is_default
        assert content == "Just some text.\n"

    def test_block_is_split_and_content_trimmed(self):
        fm, content = split_frontmatter("---\ntags: [a]\n---\n\n  Body here.\n\n")
        assert fm.tags == ["a"]
        assert content == "Body here."

    def test_block_not_at_start_is_content(self):
        text = "Intro\n---\ntags: [a]\n---\nMore."
        fm, content = split_frontmatter(text)
        assert fm.is_default
        assert content == text

    def test_unclosed_block_is_content(self):
        text = "---\ntags: [a]\nno closing delimiter"
        fm, content = split_frontmatter(text)
        assert fm.is_default
        assert content == text

    def test_empty_block(self):
        fm, content = split_frontmatter("---\n---\nBody.")
        assert fm.is_default
        assert content == "Body."

    def test_malformed_block_names_file(self, tmp_path: Path):
        path = tmp_path / "broken.md"
        with pytest.raises(FrontmatterError, match="broken.md"):
            split_frontmatter("---\n: broken: [yaml\n---\nBody.", path)

    def test_horizontal_rule_is_content(self):
        text = "----------\nTitle\n"
        fm, content = split_frontmatter(text)
        assert fm.is_default
        assert content == text

    def test_dashes_inside_a_line_do_not_close_the_block(self):
        fm, content = split_frontmatter("---\ntags:\n- a---b\n---\nbody")
        assert fm.tags == ["a---b"]
        assert content == "body"

    def test_closing_delimiter_at_end_of_file(self):
        fm, content = split_frontmatter("---\ntags: [a]\n---")
        assert fm.tags == ["a"]
        assert content == ""


# ---------------------------------------------------------------------------
# serialize_note
# ---------------------------------------------------------------------------


class TestSerializeNote:
    def test_default_frontmatter_writes_no_block(self):
        assert serialize_note(Frontmatter(), "hello") == "hello"

    def test_tags_written_without_pinned(self):
        text = serialize_note(Frontmatter(tags=["a", "b"]), "hello")
        assert text == "---\ntags:\n- a\n- b\n---\n\nhello"
        assert "pinned" not in text

    def test_pinned_written(self):
        text = serialize_note(Frontmatter(pinned=True), "hello")
        assert text == "---\ntags: []\npinned: true\n---\n\nhello"

    def test_unclosed_opening_delimiter_stays_plain(self):
        assert serialize_note(Frontmatter(), "---\nnot metadata") == "---\nnot metadata"

    def test_content_shaped_like_a_block_gets_a_block(self):
        body = "---\nfoo: 1\n---\nbody"
        text = serialize_note(Frontmatter(), body)
        assert text != body
        fm, content = split_frontmatter(text)
        assert fm.is_default
        assert content == body

    @pytest.mark.parametrize(
        "fm, content",
        [
            (Frontmatter(), "plain body"),
            (Frontmatter(tags=["work"]), "tagged body\nsecond line"),
            (Frontmatter(pinned=True), "pinned body"),
            (Frontmatter(tags=["a", "b"], pinned=True), "# Heading\n\n- [ ] task"),
            (Frontmatter(tags=["a---b"]), "body"),
            (Frontmatter(), "----------\nTitle under a rule"),
            (Frontmatter(tags=["x"]), "---\nrule after the block"),
        ],
    )
    def test_round_trip(self, fm: Frontmatter, content: str):
        parsed_fm, parsed_content = split_frontmatter(serialize_note(fm, content))
        assert parsed_fm == fm
        assert parsed_content == content


# ---------------------------------------------------------------------------
# parse_note / write_note
# ---------------------------------------------------------------------------


class TestParseNote:
    def test_full_note(self, gate: EncryptionGate, notebook: Path):
        path = _write(notebook, "2025-01-01-100000", """\
            ---
            tags: [setup]
            pinned: true
            ---

            Things to do
            - [ ] install
            - [x] download
        """)
        note = parse_note(path, "default", gate)
        assert note.id == "2025-01-01-100000"
        assert note.path == path
        assert note.notebook == "default"
        assert note.frontmatter == Frontmatter(tags=["setup"], pinned=True)
        assert note.content == "Things to do\n- [ ] install\n- [x] download"
        assert note.tasks == [Task("install", False), Task("download", True)]
        assert note.first_line == "Things to do"

    def test_note_without_frontmatter(self, gate: EncryptionGate, notebook: Path):
        path = _write(notebook, "2025-01-02-090000", "Just text.")
        note = parse_note(path, "default", gate)
        assert note.frontmatter.is_default
        assert note.content == "Just text."
        assert note.tasks == []

    def test_created_parsed_from_id(self, gate: EncryptionGate, notebook: Path):
        path = _write(notebook, "2025-01-02-090510", "x")
        created = parse_note(path, "default", gate).created
        assert (created.year, created.hour, created.minute, created.second) == (2025, 9, 5, 10)

    def test_malformed_metadata_names_file(self, gate: EncryptionGate, notebook: Path):
        path = _write(notebook, "2025-01-03-000000", "---\npinned: [oops\n---\nbody")
        with pytest.raises(FrontmatterError) as info:
            parse_note(path, "default", gate)
        assert info.value.path == path

    def test_write_then_parse(self, gate: EncryptionGate, notebook: Path):
        path = notebook / "2025-01-04-000000.md"
        write_note(path, Frontmatter(tags=["x"]), "body", gate)
        note = parse_note(path, "default", gate)
        assert note.frontmatter.tags == ["x"]
        assert note.content == "body"

    def test_write_replaces_whole_file(self, gate: EncryptionGate, notebook: Path):
        path = notebook / "2025-01-04-000000.md"
        write_note(path, Frontmatter(tags=["x"]), "a much longer first body", gate)
        write_note(path, Frontmatter(), "short", gate)
        assert path.read_text(encoding="utf-8") == "short"


def test_note_id_from_path():
    assert note_id_from_path(Path("/x/2025-01-01-000000.md")) == "2025-01-01-000000"
