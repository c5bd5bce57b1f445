"""NotebookStats: ad-hoc query view over parsed notes.

Uses DuckDB (in-memory) as a query engine over the notes' tags, pinned
state and task counts.  The table is rebuilt from freshly parsed notes every
time a :class:`NotebookStats` is created; nothing is persisted, so the
directory stays the only source of truth.

Usage::

    stats = NotebookStats(store.list_notes("work"))

    stats.note_count()
    stats.tag_counts(limit=5)      # polars DataFrame: tag, note_count
    stats.task_summary()           # TaskStats(pending=..., completed=...)
"""

from __future__ import annotations

from collections.abc import Iterable

import duckdb
import polars as pl

from jot.note import Note
from jot.tasks import TaskStats


class NotebookStats:
    """In-memory DuckDB database over one or more notebooks."""

    def __init__(self, notes: Iterable[Note]) -> None:
        self.conn: duckdb.DuckDBPyConnection = duckdb.connect(":memory:")
        self._create_schema()
        self._load_notes(notes)

    # ------------------------------------------------------------------
    # Build
    # ------------------------------------------------------------------

    def _create_schema(self) -> None:
        self.conn.execute("""
            CREATE TABLE notes (
                id          VARCHAR,
                notebook    VARCHAR,
                tags        VARCHAR[],
                pinned      BOOLEAN,
                pending     INTEGER,
                completed   INTEGER
            )
        """)

    def _load_notes(self, notes: Iterable[Note]) -> None:
        rows = []
        for note in notes:
            tasks = TaskStats.from_tasks(note.tasks)
            rows.append(
                (
                    note.id,
                    note.notebook,
                    list(note.frontmatter.tags),
                    note.frontmatter.pinned,
                    tasks.pending,
                    tasks.completed,
                )
            )
        if rows:
            self.conn.executemany(
                "INSERT INTO notes VALUES (?, ?, CAST(? AS VARCHAR[]), ?, ?, ?)", rows
            )

    # ------------------------------------------------------------------
    # Query
    # ------------------------------------------------------------------

    def query(self, sql: str) -> pl.DataFrame:
        """Run a raw SQL query and return a Polars DataFrame."""
        return self.conn.execute(sql).pl()

    def note_count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM notes").fetchone()[0]

    def tag_counts(self, limit: int | None = 5) -> pl.DataFrame:
        """Return the most common tags, most frequent first."""
        sql = """
            SELECT tag, COUNT(*) AS note_count
            FROM (SELECT unnest(tags) AS tag FROM notes)
            GROUP BY tag
            ORDER BY note_count DESC, tag
        """
        if limit is not None:
            return self.conn.execute(sql + " LIMIT ?", [limit]).pl()
        return self.conn.execute(sql).pl()

    def task_summary(self) -> TaskStats:
        pending, completed = self.conn.execute(
            "SELECT COALESCE(SUM(pending), 0), COALESCE(SUM(completed), 0) FROM notes"
        ).fetchone()
        return TaskStats(pending=int(pending), completed=int(completed))

    def pinned_count(self) -> int:
        return self.conn.execute("SELECT COUNT(*) FROM notes WHERE pinned").fetchone()[0]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        self.conn.close()

    def __enter__(self) -> "NotebookStats":
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
