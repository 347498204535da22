"""
Read-only access to an Anki collection and the aggregation queries behind
every report.

The parser functions are registered as SQLite scalar functions so the
per-book report is a single GROUP BY over the notes table:

    SELECT parse_book_name(sfld) AS book, SUM(count_verses(sfld)) ...
    GROUP BY book

Collections exported as .anki21b are zstd-compressed; they are inflated to a
temporary file for the lifetime of the connection.
"""
from __future__ import annotations

import shutil
import sqlite3
import tempfile
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

import zstandard

import date_periods
import stats_config
from bible_data import NEW_TESTAMENT, OLD_TESTAMENT
from date_periods import DatePeriod
from reference_parser import count_verses, extract_book_name
from stats_models import BibleStats, BookStats, DayStats, WeekStats

# Anki card queue values (pylib/anki/consts.py)
QUEUE_TYPE_MANUALLY_BURIED = -3
QUEUE_TYPE_SIBLING_BURIED = -2
QUEUE_TYPE_SUSPENDED = -1
QUEUE_TYPE_NEW = 0
QUEUE_TYPE_LRN = 1
QUEUE_TYPE_REV = 2
QUEUE_TYPE_DAY_LEARN_RELEARN = 3

# Anki card types; a buried card keeps the type it had before burying
CARD_TYPE_NEW = 0
CARD_TYPE_LRN = 1
CARD_TYPE_REV = 2
CARD_TYPE_RELEARNING = 3

ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"

MATURE = stats_config.MATURE_INTERVAL_DAYS


class CollectionError(RuntimeError):
    """The collection is missing or does not contain the expected deck / note type."""


# ── Connection ────────────────────────────────────────────────────────────────

def _sql_text(value) -> str:
    # sfld is declared as integer in Anki's schema; NULL and numbers must not reach the parser as-is
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _sql_parse_book_name(value) -> str | None:
    return extract_book_name(_sql_text(value))


def _sql_count_verses(value) -> int:
    return count_verses(_sql_text(value))


def _sql_date_str(value) -> str | None:
    return None if value is None else date_periods.date_str_from_ms(int(value))


def _sql_week_str(value) -> str | None:
    return None if value is None else date_periods.week_str_from_ms(int(value))


def register_functions(conn: sqlite3.Connection) -> None:
    """Register parse_book_name, count_verses, date_str_from_ms and week_str_from_ms."""
    conn.create_function("parse_book_name", 1, _sql_parse_book_name, deterministic=True)
    conn.create_function("count_verses", 1, _sql_count_verses, deterministic=True)
    conn.create_function("date_str_from_ms", 1, _sql_date_str, deterministic=True)
    conn.create_function("week_str_from_ms", 1, _sql_week_str, deterministic=True)


def _unicase_cmp(a, b) -> int:
    fa = _sql_text(a).casefold()
    fb = _sql_text(b).casefold()
    return (fa > fb) - (fa < fb)


def get_connection(db_path: Path) -> sqlite3.Connection:
    conn = sqlite3.connect(f"{Path(db_path).resolve().as_uri()}?mode=ro", uri=True)
    conn.row_factory = sqlite3.Row
    # Anki declares deck and note type names with its own "unicase" collation
    conn.create_collation("unicase", _unicase_cmp)
    conn.execute("PRAGMA query_only=ON")
    register_functions(conn)
    return conn


def _is_zstd(path: Path) -> bool:
    with path.open("rb") as f:
        return f.read(4) == ZSTD_MAGIC


def _decompress(src: Path, dest: Path) -> None:
    dctx = zstandard.ZstdDecompressor()
    with src.open("rb") as fin, dest.open("wb") as fout:
        dctx.copy_stream(fin, fout)


@contextmanager
def open_collection(path: str | Path) -> Iterator[sqlite3.Connection]:
    """Open a collection read-only, inflating zstd-compressed files first."""
    path = Path(path)
    if not path.is_file():
        raise CollectionError(f"Collection not found: {path}")

    tmpdir = None
    db_path = path
    if _is_zstd(path):
        tmpdir = Path(tempfile.mkdtemp(prefix="ankistats-"))
        db_path = tmpdir / "collection.anki2"
        _decompress(path, db_path)

    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()
        if tmpdir is not None:
            shutil.rmtree(tmpdir, ignore_errors=True)


# ── Lookups ───────────────────────────────────────────────────────────────────

def get_deck_id(conn: sqlite3.Connection, deck_name: str = stats_config.DECK_NAME) -> int:
    row = conn.execute(
        "SELECT id FROM decks WHERE LOWER(name) = LOWER(?)", (deck_name,)
    ).fetchone()
    if row is None:
        raise CollectionError(f"Failed to find deck '{deck_name.replace(chr(0x1f), '::')}'")
    return row["id"]


def get_model_id(conn: sqlite3.Connection, model_name: str = stats_config.NOTE_TYPE_NAME) -> int:
    row = conn.execute(
        "SELECT id FROM notetypes WHERE LOWER(name) = LOWER(?)", (model_name,)
    ).fetchone()
    if row is None:
        raise CollectionError(f"Failed to find note type '{model_name}'")
    return row["id"]


# ── Book statistics ───────────────────────────────────────────────────────────

_BURIED = f"queue IN ({QUEUE_TYPE_SIBLING_BURIED},{QUEUE_TYPE_MANUALLY_BURIED})"
_REVIEW = f"(queue = {QUEUE_TYPE_REV} OR ({_BURIED} AND type = {CARD_TYPE_REV}))"
_LEARNING = (
    f"(queue IN ({QUEUE_TYPE_LRN},{QUEUE_TYPE_DAY_LEARN_RELEARN})"
    f" OR ({_BURIED} AND type IN ({CARD_TYPE_LRN},{CARD_TYPE_RELEARNING})))"
)

_IS_MATURE = f"{_REVIEW} AND ivl >= {MATURE}"
_IS_YOUNG = f"{_LEARNING} OR ({_REVIEW} AND ivl < {MATURE})"
_IS_UNSEEN = f"queue = {QUEUE_TYPE_NEW} OR ({_BURIED} AND type = {CARD_TYPE_NEW})"
_IS_SUSPENDED = f"queue = {QUEUE_TYPE_SUSPENDED}"

BOOK_STATS_QUERY = f"""
    SELECT
        parse_book_name(sfld) AS book,
        SUM(CASE WHEN {_IS_MATURE} THEN 1 ELSE 0 END)    AS mature_passages,
        SUM(CASE WHEN {_IS_YOUNG} THEN 1 ELSE 0 END)     AS young_passages,
        SUM(CASE WHEN {_IS_UNSEEN} THEN 1 ELSE 0 END)    AS unseen_passages,
        SUM(CASE WHEN {_IS_SUSPENDED} THEN 1 ELSE 0 END) AS suspended_passages,
        SUM(CASE WHEN {_IS_MATURE} THEN count_verses(sfld) ELSE 0 END)    AS mature_verses,
        SUM(CASE WHEN {_IS_YOUNG} THEN count_verses(sfld) ELSE 0 END)     AS young_verses,
        SUM(CASE WHEN {_IS_UNSEEN} THEN count_verses(sfld) ELSE 0 END)    AS unseen_verses,
        SUM(CASE WHEN {_IS_SUSPENDED} THEN count_verses(sfld) ELSE 0 END) AS suspended_verses
    FROM cards
    JOIN notes ON notes.id = cards.nid
    WHERE cards.ord = 0 AND notes.mid = ? AND cards.did = ?
    GROUP BY book
    HAVING book IS NOT NULL
"""


def get_all_books_stats(conn: sqlite3.Connection, deck_id: int, model_id: int) -> dict[str, BookStats]:
    """Statistics for every book that has at least one note, keyed by parsed book name."""
    books: dict[str, BookStats] = {}
    for row in conn.execute(BOOK_STATS_QUERY, (model_id, deck_id)):
        stats = BookStats(
            book=row["book"],
            **{k: row[k] or 0 for k in row.keys() if k != "book"},
        )
        books[stats.book] = stats
    return books


def get_bible_stats(conn: sqlite3.Connection) -> BibleStats:
    """Per-book statistics laid out in canonical order; books without notes report zeros."""
    deck_id = get_deck_id(conn)
    model_id = get_model_id(conn)
    grouped = get_all_books_stats(conn, deck_id, model_id)

    stats = BibleStats()
    for book in OLD_TESTAMENT:
        stats.old_testament.add_book(grouped.pop(book, None) or BookStats(book))
    for book in NEW_TESTAMENT:
        stats.new_testament.add_book(grouped.pop(book, None) or BookStats(book))
    stats.unknown_books = [grouped[name] for name in sorted(grouped)]
    return stats


def get_all_references(conn: sqlite3.Connection, deck_id: int, model_id: int) -> list[str]:
    """Every distinct citation (sort field) in the deck, sorted."""
    rows = conn.execute(
        """
        SELECT DISTINCT n.sfld
        FROM notes n
        JOIN cards c ON c.nid = n.id
        WHERE c.did = ? AND n.mid = ?
        ORDER BY n.sfld
        """,
        (deck_id, model_id),
    ).fetchall()
    return [_sql_text(r[0]) for r in rows]


# ── Study time and progress ───────────────────────────────────────────────────

def get_today_study_minutes(conn: sqlite3.Connection, now: datetime | None = None) -> float:
    deck_id = get_deck_id(conn)
    row = conn.execute(
        """
        SELECT COALESCE(SUM(r.time), 0) AS total_ms
        FROM revlog r
        JOIN cards c ON c.id = r.cid
        WHERE c.did = ? AND r.id >= ?
        """,
        (deck_id, date_periods.today_start_ms(now)),
    ).fetchone()
    return row["total_ms"] / 60000.0


def _period_rows(conn: sqlite3.Connection, period: DatePeriod, bucket_fn: str) -> list[tuple]:
    """(bucket, minutes, matured, lost) for every bucket in the period, oldest first."""
    deck_id = get_deck_id(conn)
    model_id = get_model_id(conn)

    minutes = {
        row["bucket"]: row["total_ms"] / 60000.0
        for row in conn.execute(
            f"""
            SELECT {bucket_fn}(r.id) AS bucket, COALESCE(SUM(r.time), 0) AS total_ms
            FROM revlog r
            JOIN cards c ON c.id = r.cid
            WHERE c.did = ? AND r.id >= ? AND r.id < ?
            GROUP BY bucket
            """,
            (deck_id, period.start_ms, period.end_ms),
        )
    }

    progress = {
        row["bucket"]: (row["matured"], row["lost"])
        for row in conn.execute(
            f"""
            SELECT
                {bucket_fn}(r.id) AS bucket,
                COUNT(CASE WHEN r.lastIvl < {MATURE} AND r.ivl >= {MATURE} THEN 1 END) AS matured,
                COUNT(CASE WHEN r.lastIvl >= {MATURE} AND r.ivl < {MATURE} THEN 1 END) AS lost
            FROM revlog r
            JOIN cards c ON c.id = r.cid
            JOIN notes n ON n.id = c.nid
            WHERE c.did = ? AND n.mid = ? AND c.ord = 0
                AND c.queue != {QUEUE_TYPE_SUSPENDED}
                AND r.id >= ? AND r.id < ?
            GROUP BY bucket
            """,
            (deck_id, model_id, period.start_ms, period.end_ms),
        )
    }

    return period.build_results(
        {d: (minutes.get(d, 0.0),) + progress.get(d, (0, 0)) for d in set(minutes) | set(progress)},
        lambda d, values: (d,) + values,
        default=(0.0, 0, 0),
    )


def get_daily_stats(conn: sqlite3.Connection, days: int = 30, now: datetime | None = None) -> list[DayStats]:
    results = []
    cumulative = 0
    for day, minutes, matured, lost in _period_rows(conn, DatePeriod.last_days(days, now), "date_str_from_ms"):
        cumulative += matured - lost
        results.append(DayStats(day, minutes, matured, lost, cumulative))
    return results


def get_weekly_stats(conn: sqlite3.Connection, weeks: int = 12, now: datetime | None = None) -> list[WeekStats]:
    results = []
    cumulative = 0
    for week, minutes, matured, lost in _period_rows(conn, DatePeriod.last_weeks(weeks, now), "week_str_from_ms"):
        cumulative += matured - lost
        results.append(WeekStats(week, minutes, matured, lost, cumulative))
    return results
