"""SQLite archive of saved poems and the running poem counter."""

from __future__ import annotations

import json
import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

from computer_poet.core import GeneratedPoem
from computer_poet.utils.observability import get_logger

from ..services.poem_formatter import export_filename, format_poem_text

DB_PATH_ENV = "COMPUTER_POET_DB"
DEFAULT_DB_PATH = "poems.db"


def _ensure_parent_directory(path: str) -> None:
    directory = os.path.dirname(os.path.abspath(path))
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _row_to_dict(row: sqlite3.Row) -> Dict[str, Any]:
    record = dict(row)
    try:
        record["options"] = json.loads(record.get("options") or "{}")
    except json.JSONDecodeError:
        record["options"] = {}
    record["lines"] = [line for line in (record.get("content") or "").split("\n") if line]
    return record


class SQLitePoemArchive:
    """Stores saved poems; the poem number is the row id.

    ``":memory:"`` keeps a single shared connection so the archive survives
    between calls, which is what the tests use.
    """

    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path or os.environ.get(DB_PATH_ENV) or DEFAULT_DB_PATH
        self._lock = threading.RLock()
        self._shared: Optional[sqlite3.Connection] = None
        self._schema_ready = False
        self._logger = get_logger(__name__).bind(component="poem_archive", db_path=self.db_path)

    def _open(self) -> sqlite3.Connection:
        if self.db_path == ":memory:":
            if self._shared is None:
                self._shared = sqlite3.connect(self.db_path, check_same_thread=False)
                self._shared.row_factory = sqlite3.Row
            return self._shared
        _ensure_parent_directory(self.db_path)
        connection = sqlite3.connect(self.db_path)
        connection.row_factory = sqlite3.Row
        return connection

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            connection = self._open()
            try:
                yield connection
                if connection.in_transaction:
                    connection.commit()
            except Exception as exc:
                if connection.in_transaction:
                    connection.rollback()
                self._logger.error("SQLite operation failed", context={"error": str(exc)})
                raise
            finally:
                if connection is not self._shared:
                    connection.close()

    def _initialise_schema(self, connection: sqlite3.Connection) -> None:
        connection.execute(
            """
            CREATE TABLE IF NOT EXISTS poems (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                content TEXT NOT NULL,
                style TEXT,
                options TEXT,
                created_at TEXT
            )
            """
        )
        self._schema_ready = True

    def ensure_database(self) -> int:
        """Create the schema if needed and return the number of saved poems."""

        with self._connect() as conn:
            self._initialise_schema(conn)
            (count,) = conn.execute("SELECT COUNT(*) FROM poems").fetchone()
        row_count = int(count)
        self._logger.info("Poem archive ready", context={"row_count": row_count})
        return row_count

    def _ready(self) -> None:
        if not self._schema_ready:
            self.ensure_database()

    def next_poem_number(self) -> int:
        """Number the next saved poem will receive."""

        self._ready()
        with self._connect() as conn:
            row = conn.execute("SELECT seq FROM sqlite_sequence WHERE name = 'poems'").fetchone()
            if row is None:
                (highest,) = conn.execute("SELECT COALESCE(MAX(id), 0) FROM poems").fetchone()
                return int(highest) + 1
            return int(row[0]) + 1

    def save_poem(self, poem: GeneratedPoem, title: str) -> int:
        """Store ``poem`` under ``title`` and return its poem number."""

        title = (title or "").strip() or "无题"
        self._ready()
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO poems (title, content, style, options, created_at) VALUES (?, ?, ?, ?, ?)",
                (
                    title,
                    "\n".join(poem.lines),
                    poem.options.style.value,
                    json.dumps(poem.options.as_dict(), ensure_ascii=False),
                    poem.created_at.isoformat(timespec="seconds"),
                ),
            )
            number = int(cursor.lastrowid)
        poem.title = title
        self._logger.info("Poem saved", context={"poem_number": number, "title": title})
        return number

    def fetch_poem(self, number: int) -> Optional[Dict[str, Any]]:
        self._ready()
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM poems WHERE id = ?", (int(number),)).fetchone()
        return _row_to_dict(row) if row is not None else None

    def list_recent(self, limit: int = 10) -> List[Dict[str, Any]]:
        self._ready()
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM poems ORDER BY id DESC LIMIT ?", (max(0, int(limit)),)
            ).fetchall()
        return [_row_to_dict(row) for row in rows]

    def export_text(self, number: int, directory: Path | str) -> Path:
        """Write poem ``number`` to ``directory/cpNNNNNN.txt`` and return the path."""

        record = self.fetch_poem(number)
        if record is None:
            raise LookupError(f"No saved poem with number {number}")
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / export_filename(number)
        path.write_text(
            format_poem_text(record["lines"], record["title"], number),
            encoding="utf-8",
        )
        self._logger.info("Poem exported", context={"poem_number": number, "path": str(path)})
        return path

    def close(self) -> None:
        with self._lock:
            if self._shared is not None:
                self._shared.close()
                self._shared = None
                self._schema_ready = False


__all__ = ["SQLitePoemArchive", "DB_PATH_ENV", "DEFAULT_DB_PATH"]
