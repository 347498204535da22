"""
Canonical Bible book data: the 66-book Protestant canon.

Each entry:
  name     - canonical display name (what parse_book_name produces)
  order    - canonical ordering (OT 1-39, NT 40-66)
  chapters - number of chapters

The single-chapter books are cited without a chapter number ("Jude 24"),
so the verse counter needs to know them by name.
"""
from __future__ import annotations

from typing import Iterator

BOOKS = [
    # ── Old Testament ────────────────────────────────────────────────────────
    {"name": "Genesis",          "order":  1, "chapters": 50},
    {"name": "Exodus",           "order":  2, "chapters": 40},
    {"name": "Leviticus",        "order":  3, "chapters": 27},
    {"name": "Numbers",          "order":  4, "chapters": 36},
    {"name": "Deuteronomy",      "order":  5, "chapters": 34},
    {"name": "Joshua",           "order":  6, "chapters": 24},
    {"name": "Judges",           "order":  7, "chapters": 21},
    {"name": "Ruth",             "order":  8, "chapters":  4},
    {"name": "1 Samuel",         "order":  9, "chapters": 31},
    {"name": "2 Samuel",         "order": 10, "chapters": 24},
    {"name": "1 Kings",          "order": 11, "chapters": 22},
    {"name": "2 Kings",          "order": 12, "chapters": 25},
    {"name": "1 Chronicles",     "order": 13, "chapters": 29},
    {"name": "2 Chronicles",     "order": 14, "chapters": 36},
    {"name": "Ezra",             "order": 15, "chapters": 10},
    {"name": "Nehemiah",         "order": 16, "chapters": 13},
    {"name": "Esther",           "order": 17, "chapters": 10},
    {"name": "Job",              "order": 18, "chapters": 42},
    {"name": "Psalms",           "order": 19, "chapters": 150},
    {"name": "Proverbs",         "order": 20, "chapters": 31},
    {"name": "Ecclesiastes",     "order": 21, "chapters": 12},
    {"name": "Song of Solomon",  "order": 22, "chapters":  8},
    {"name": "Isaiah",           "order": 23, "chapters": 66},
    {"name": "Jeremiah",         "order": 24, "chapters": 52},
    {"name": "Lamentations",     "order": 25, "chapters":  5},
    {"name": "Ezekiel",          "order": 26, "chapters": 48},
    {"name": "Daniel",           "order": 27, "chapters": 12},
    {"name": "Hosea",            "order": 28, "chapters": 14},
    {"name": "Joel",             "order": 29, "chapters":  3},
    {"name": "Amos",             "order": 30, "chapters":  9},
    {"name": "Obadiah",          "order": 31, "chapters":  1},
    {"name": "Jonah",            "order": 32, "chapters":  4},
    {"name": "Micah",            "order": 33, "chapters":  7},
    {"name": "Nahum",            "order": 34, "chapters":  3},
    {"name": "Habakkuk",         "order": 35, "chapters":  3},
    {"name": "Zephaniah",        "order": 36, "chapters":  3},
    {"name": "Haggai",           "order": 37, "chapters":  2},
    {"name": "Zechariah",        "order": 38, "chapters": 14},
    {"name": "Malachi",          "order": 39, "chapters":  4},

    # ── New Testament ────────────────────────────────────────────────────────
    {"name": "Matthew",          "order": 40, "chapters": 28},
    {"name": "Mark",             "order": 41, "chapters": 16},
    {"name": "Luke",             "order": 42, "chapters": 24},
    {"name": "John",             "order": 43, "chapters": 21},
    {"name": "Acts",             "order": 44, "chapters": 28},
    {"name": "Romans",           "order": 45, "chapters": 16},
    {"name": "1 Corinthians",    "order": 46, "chapters": 16},
    {"name": "2 Corinthians",    "order": 47, "chapters": 13},
    {"name": "Galatians",        "order": 48, "chapters":  6},
    {"name": "Ephesians",        "order": 49, "chapters":  6},
    {"name": "Philippians",      "order": 50, "chapters":  4},
    {"name": "Colossians",       "order": 51, "chapters":  4},
    {"name": "1 Thessalonians",  "order": 52, "chapters":  5},
    {"name": "2 Thessalonians",  "order": 53, "chapters":  3},
    {"name": "1 Timothy",        "order": 54, "chapters":  6},
    {"name": "2 Timothy",        "order": 55, "chapters":  4},
    {"name": "Titus",            "order": 56, "chapters":  3},
    {"name": "Philemon",         "order": 57, "chapters":  1},
    {"name": "Hebrews",          "order": 58, "chapters": 13},
    {"name": "James",            "order": 59, "chapters":  5},
    {"name": "1 Peter",          "order": 60, "chapters":  5},
    {"name": "2 Peter",          "order": 61, "chapters":  3},
    {"name": "1 John",           "order": 62, "chapters":  5},
    {"name": "2 John",           "order": 63, "chapters":  1},
    {"name": "3 John",           "order": 64, "chapters":  1},
    {"name": "Jude",             "order": 65, "chapters":  1},
    {"name": "Revelation",       "order": 66, "chapters": 22},
]

# ── Lookup structures ─────────────────────────────────────────────────────────

OLD_TESTAMENT: tuple[str, ...] = tuple(b["name"] for b in BOOKS if b["order"] <= 39)
NEW_TESTAMENT: tuple[str, ...] = tuple(b["name"] for b in BOOKS if b["order"] > 39)

# canonical name → book info
BY_NAME: dict[str, dict] = {b["name"]: b for b in BOOKS}

# Matched case-insensitively; see is_single_chapter_book()
SINGLE_CHAPTER_BOOKS: frozenset[str] = frozenset(
    {"Obadiah", "Philemon", "2 John", "3 John", "Jude"}
)
_SINGLE_CHAPTER_FOLDED = frozenset(name.casefold() for name in SINGLE_CHAPTER_BOOKS)


def all_books() -> Iterator[str]:
    """Iterate over all 66 book names in canonical order."""
    yield from OLD_TESTAMENT
    yield from NEW_TESTAMENT


def is_single_chapter_book(name: str) -> bool:
    return name.casefold() in _SINGLE_CHAPTER_FOLDED


def testament_of(name: str) -> str | None:
    """Return "OT" or "NT" for a canonical book name, None for anything else."""
    book = BY_NAME.get(name)
    if book is None:
        return None
    return "OT" if book["order"] <= 39 else "NT"


if __name__ == "__main__":
    print(f"Total books: {len(BOOKS)}")
    print(f"Old Testament: {len(OLD_TESTAMENT)}  |  New Testament: {len(NEW_TESTAMENT)}")
    print(f"Single-chapter books: {', '.join(sorted(SINGLE_CHAPTER_BOOKS))}")
