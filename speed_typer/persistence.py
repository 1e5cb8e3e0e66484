from __future__ import annotations

import logging
import os
import sqlite3
import time
from pathlib import Path

from .errors import ResultsLogError
from .results import SessionRecord

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1
RESULTS_DB_ENV = "SPEED_TYPER_DB"


def default_db_path() -> Path:
    explicit = os.environ.get(RESULTS_DB_ENV)
    if explicit:
        return Path(explicit).expanduser()
    return Path.home() / ".speed_typer_results.sqlite3"


def open_db(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    conn.execute("PRAGMA foreign_keys=ON;")
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    _migrate(conn)
    return conn


def _utc_now_iso() -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(time.time()))


def _migrate(conn: sqlite3.Connection) -> None:
    row = conn.execute("PRAGMA user_version;").fetchone()
    ver = int(row[0]) if row else 0
    if ver >= SCHEMA_VERSION:
        return

    with conn:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS session_result (
                id INTEGER PRIMARY KEY,
                completed_at_utc TEXT NOT NULL,
                prompt_policy TEXT NOT NULL,
                prompt_text TEXT NOT NULL,
                word_count INTEGER NOT NULL,
                time_limit_s INTEGER,
                sentence_count INTEGER,
                death_mode INTEGER NOT NULL,
                pace_wpm INTEGER,
                finish_reason TEXT NOT NULL,
                elapsed_s REAL NOT NULL,
                wpm REAL NOT NULL,
                raw_wpm REAL NOT NULL,
                accuracy REAL NOT NULL,
                std_dev REAL NOT NULL,
                correct_chars INTEGER NOT NULL,
                total_chars INTEGER NOT NULL,
                keystrokes INTEGER NOT NULL
            );
            """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS keystroke (
                id INTEGER PRIMARY KEY,
                result_id INTEGER NOT NULL REFERENCES session_result(id) ON DELETE CASCADE,
                seq INTEGER NOT NULL,
                target_index INTEGER NOT NULL,
                action TEXT NOT NULL,
                typed TEXT,
                classification TEXT NOT NULL,
                outcome TEXT NOT NULL,
                at_ms INTEGER NOT NULL
            );
            """
        )
        conn.execute("CREATE INDEX IF NOT EXISTS idx_keystroke_result_seq ON keystroke(result_id, seq);")
        conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_session_result_completed ON session_result(completed_at_utc);"
        )
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION};")


class SqliteResultsLog:
    """Result sink appending one row per finished session (plus its keystrokes)."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def record(self, record: SessionRecord) -> None:
        try:
            conn = open_db(self._path)
            try:
                result_id = _insert_result(conn=conn, record=record)
            finally:
                conn.close()
        except (sqlite3.Error, OSError) as exc:
            raise ResultsLogError(f"failed to write {self._path}: {exc}") from exc
        logger.info("saved result %d to %s", result_id, self._path)


def _insert_result(*, conn: sqlite3.Connection, record: SessionRecord) -> int:
    r = record.result
    with conn:
        cur = conn.execute(
            """
            INSERT INTO session_result(
                completed_at_utc, prompt_policy, prompt_text,
                word_count, time_limit_s, sentence_count, death_mode, pace_wpm,
                finish_reason, elapsed_s, wpm, raw_wpm, accuracy, std_dev,
                correct_chars, total_chars, keystrokes
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                _utc_now_iso(),
                str(record.prompt_policy.value),
                record.prompt_text,
                int(record.word_count),
                record.time_limit_s,
                record.sentence_count,
                1 if record.death_mode else 0,
                record.pace_wpm,
                str(r.reason.value),
                float(r.elapsed_s),
                float(r.wpm),
                float(r.raw_wpm),
                float(r.accuracy),
                float(r.std_dev),
                int(r.correct_chars),
                int(r.total_chars),
                int(r.keystrokes),
            ),
        )
        result_id = int(cur.lastrowid)

        conn.executemany(
            """
            INSERT INTO keystroke(
                result_id, seq, target_index, action, typed, classification, outcome, at_ms
            )
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    result_id,
                    int(e.seq),
                    int(e.target_index),
                    str(e.action.value),
                    e.char,
                    str(e.classification.value),
                    str(e.outcome.value),
                    int(round(e.timestamp * 1000.0)),
                )
                for e in record.events
            ],
        )

    return result_id


def recent_results(db_path: Path, *, limit: int = 10) -> list[dict[str, object]]:
    """Newest-first rows from session_result, as plain dicts."""

    if limit <= 0:
        return []
    conn = open_db(db_path)
    try:
        conn.row_factory = sqlite3.Row
        rows = conn.execute(
            "SELECT * FROM session_result ORDER BY completed_at_utc DESC, id DESC LIMIT ?",
            (int(limit),),
        ).fetchall()
        return [dict(row) for row in rows]
    finally:
        conn.close()
