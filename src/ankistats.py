"""
Bible memorization statistics from an Anki collection.

Usage:
  python src/ankistats.py books collection.anki2      # per-book mature/young/unseen/suspended
  python src/ankistats.py today collection.anki2      # minutes studied today
  python src/ankistats.py daily collection.anki2      # last 30 days
  python src/ankistats.py weekly --json collection.anki2
  python src/ankistats.py refs collection.anki2 > tests/data/bible_references.txt
  python src/ankistats.py check collection.anki2      # list citations that do not parse

DATABASE_PATH defaults to $ANKI_DATABASE_PATH. The collection is never written.
"""
from __future__ import annotations

import argparse
import json
import sqlite3
import sys
from dataclasses import asdict
from pathlib import Path

# Allow running from project root or src/
sys.path.insert(0, str(Path(__file__).parent))

import anki_db
import stats_config
from anki_db import CollectionError, open_collection
from bible_data import testament_of
from reference_parser import CitationError, try_count_verses, try_extract_book_name
from stats_models import AggregateStats, BibleStats, BookStats

_HEADERS = ["Book", "Mature", "Young", "Unseen", "Suspended"]


# ── Rendering ─────────────────────────────────────────────────────────────────

def format_table(rows: list[list[str]], headers: list[str] = _HEADERS) -> str:
    widths = [max(len(str(r[i])) for r in [headers] + rows) for i in range(len(headers))]
    line = "+-" + "-+-".join("-" * w for w in widths) + "-+"

    def fmt(row):
        cells = [f"{row[0]:<{widths[0]}}"] + [f"{c:>{w}}" for c, w in zip(row[1:], widths[1:])]
        return "| " + " | ".join(cells) + " |"

    out = [line, fmt(headers), line]
    out.extend(fmt(r) for r in rows)
    out.append(line)
    return "\n".join(out)


def _totals_line(label: str, agg: AggregateStats | BibleStats) -> str:
    if isinstance(agg, BibleStats):
        parts = {b: (agg.total(b, "passages"), agg.total(b, "verses"))
                 for b in ("mature", "young", "unseen", "suspended")}
    else:
        parts = {b: (getattr(agg, f"{b}_passages"), getattr(agg, f"{b}_verses"))
                 for b in ("mature", "young", "unseen", "suspended")}
    body = ", ".join(f"{b.capitalize()}={p}/{v}" for b, (p, v) in parts.items())
    return f"{label}: {body}, Total={agg.total_passages()}/{agg.total_verses()}"


def _print_books(book_stats: list[BookStats]) -> None:
    print(format_table([s.display_row() for s in book_stats]))


# ── Commands ──────────────────────────────────────────────────────────────────

def run_books(conn: sqlite3.Connection, args) -> int:
    stats = anki_db.get_bible_stats(conn)
    if args.json:
        print(json.dumps(stats.to_dict(), indent=2))
        return 0

    print("\n=== OLD TESTAMENT ===\n")
    _print_books(stats.old_testament.book_stats)
    print("\n" + _totals_line("OT Totals", stats.old_testament))

    print("\n\n=== NEW TESTAMENT ===\n")
    _print_books(stats.new_testament.book_stats)
    print("\n" + _totals_line("NT Totals", stats.new_testament))

    if stats.unknown_books:
        print("\n\n=== UNRECOGNISED BOOKS ===\n")
        _print_books(stats.unknown_books)

    print("\n\n=== GRAND TOTAL ===")
    print(_totals_line("All", stats))
    return 0


def run_today(conn: sqlite3.Connection, args) -> int:
    minutes = anki_db.get_today_study_minutes(conn)
    print("\n=== TODAY'S STUDY TIME ===\n")
    print(f"Total: {minutes:.2f} minutes ({minutes / 60:.1f} hours)")
    return 0


def _print_period(title: str, rows: list, label_attr: str, unit: str, as_json: bool) -> None:
    if as_json:
        print(json.dumps([asdict(r) for r in rows], indent=2))
        return

    print(f"\n=== {title} ===\n")
    for r in rows:
        label = getattr(r, label_attr)
        if r.minutes > 0:
            print(f"{label}: {r.minutes:8.2f} min ({r.minutes / 60:.1f} hrs)  "
                  f"+{r.matured_passages} -{r.lost_passages}  net {r.cumulative_passages:+d}")
        else:
            print(f"{label}: --- (no study)")

    total = sum(r.minutes for r in rows)
    studied = sum(1 for r in rows if r.minutes > 0)
    avg = total / len(rows) if rows else 0.0
    print("\n--- SUMMARY ---")
    print(f"Total: {total:.2f} minutes ({total / 60:.1f} hours)")
    print(f"Average per {unit}: {avg:.2f} minutes ({avg / 60:.1f} hours)")
    print(f"{unit.capitalize()}s studied: {studied} out of {len(rows)}")


def run_daily(conn: sqlite3.Connection, args) -> int:
    rows = anki_db.get_daily_stats(conn, days=args.days)
    _print_period(f"STUDY TIME - LAST {args.days} DAYS", rows, "date", "day", args.json)
    return 0


def run_weekly(conn: sqlite3.Connection, args) -> int:
    rows = anki_db.get_weekly_stats(conn, weeks=args.weeks)
    _print_period(f"STUDY TIME - LAST {args.weeks} WEEKS", rows, "week_start", "week", args.json)
    return 0


def _references(conn: sqlite3.Connection) -> list[str]:
    return anki_db.get_all_references(conn, anki_db.get_deck_id(conn), anki_db.get_model_id(conn))


def run_refs(conn: sqlite3.Connection, args) -> int:
    for ref in _references(conn):
        print(ref)
    return 0


def check_references(references: list[str]) -> tuple[list[tuple[str, str]], list[tuple[str, str]]]:
    """
    Parse every citation with the raising parsers.
    Returns (failures, unknown_books): (reference, error) and (reference, book) pairs.
    """
    failures: list[tuple[str, str]] = []
    unknown: list[tuple[str, str]] = []
    for ref in references:
        if not ref.strip():
            continue
        try:
            book = try_extract_book_name(ref)
            try_count_verses(ref)
        except CitationError as e:
            failures.append((ref, str(e)))
            continue
        if testament_of(book) is None:
            unknown.append((ref, book))
    return failures, unknown


def run_check(conn: sqlite3.Connection, args) -> int:
    references = _references(conn)
    failures, unknown = check_references(references)

    print(f"References checked: {len(references)}")
    print(f"Failed to parse:    {len(failures)}")
    print(f"Unknown book names: {len(unknown)}")
    for ref, err in failures:
        print(f"  - {ref!r}: {err}")
    for ref, book in unknown:
        print(f"  - {ref!r} -> {book!r}")
    return 1 if failures or unknown else 0


COMMANDS = {
    "books": (run_books, "Show statistics for each Bible book"),
    "today": (run_today, "Show study time for today"),
    "daily": (run_daily, "Show study time and progress for each recent day"),
    "weekly": (run_weekly, "Show study time and progress for each recent week"),
    "refs": (run_refs, "Print every Bible reference in the deck, one per line"),
    "check": (run_check, "Report references that fail to parse or name an unknown book"),
}


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ankistats",
        description="Analyze an Anki collection for Bible verse memorization progress",
    )
    sub = ap.add_subparsers(dest="command", required=True)
    for name, (_, help_text) in COMMANDS.items():
        p = sub.add_parser(name, help=help_text)
        p.add_argument(
            "db_path", nargs="?", default=stats_config.DEFAULT_COLLECTION_PATH,
            metavar="DATABASE_PATH", help="Path to the Anki collection (default: $ANKI_DATABASE_PATH)",
        )
        if name in ("books", "daily", "weekly"):
            p.add_argument("--json", action="store_true", help="Print JSON instead of a report")
        if name == "daily":
            p.add_argument("--days", type=_positive_int, default=30, help="Number of days (default: 30)")
        if name == "weekly":
            p.add_argument("--weeks", type=_positive_int, default=12, help="Number of weeks (default: 12)")
    return ap


def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if not args.db_path:
        ap.error("DATABASE_PATH is required when ANKI_DATABASE_PATH is not set")

    handler, _ = COMMANDS[args.command]
    try:
        with open_collection(args.db_path) as conn:
            return handler(conn, args)
    except (CollectionError, sqlite3.Error) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
