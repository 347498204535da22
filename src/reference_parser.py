"""
Reference parser: pulls the book name and the verse count out of a single
Scripture citation such as "2 Timothy 3:16", "Jude 24-25" or
"Colossians 1:9a-12".

Two layers per operation:

  try_extract_book_name / try_count_verses
      raise a CitationError subclass describing what is wrong with the input.

  extract_book_name / count_verses
      never raise; they print a warning to stderr and return None / 1.
      These are the forms registered as SQLite scalar functions, where an
      exception would abort the whole aggregate scan.

All four are pure functions of their input string.
"""
from __future__ import annotations

import re
import sys
import unicodedata

from bible_data import is_single_chapter_book

# Zero-width and directional formatting marks that show up in exported
# citations (e.g. "Psalm \u202d51\u202c:\u202d3").
_FORMAT_CHARS = frozenset({
    "\u200b",  # zero width space
    "\ufeff",  # zero width no-break space (BOM)
    "\u202a",  # left-to-right embedding
    "\u202b",  # right-to-left embedding
    "\u202c",  # pop directional formatting
    "\u202d",  # left-to-right override
    "\u202e",  # right-to-left override
})

_LEADING_DIGITS_RE = re.compile(r"[0-9]+")

# Verse numbers past a signed 64-bit integer are not numbers SQLite can sum
_MAX_VERSE = 2**63 - 1


# ── Errors ────────────────────────────────────────────────────────────────────

class CitationError(ValueError):
    """A citation string could not be parsed."""

    def __init__(self, message: str, reference: str):
        super().__init__(message)
        self.reference = reference


class NoSpaceFound(CitationError):
    pass


class EmptyBookName(CitationError):
    pass


class NoColonFound(CitationError):
    pass


class NoColonOrSpace(CitationError):
    pass


class InvalidRange(CitationError):
    pass


class InvalidVerse(CitationError):
    pass


# ── Normalizer ────────────────────────────────────────────────────────────────

def normalize(raw: str) -> str:
    """Drop control characters and bidi/zero-width marks, keeping everything else in order."""
    return "".join(
        c for c in raw
        if c not in _FORMAT_CHARS and unicodedata.category(c) != "Cc"
    )


# ── Book name ─────────────────────────────────────────────────────────────────

def _display_book_name(book_name: str) -> str:
    # References say "Psalm 23:1"; the book is displayed as "Psalms"
    if book_name.casefold() == "psalm":
        return "Psalms"
    return book_name


def try_extract_book_name(raw: str) -> str:
    """
    Return the book part of a citation: everything before the last space.

      "Genesis 1:1"    -> "Genesis"
      "2 Timothy 3:16" -> "2 Timothy"
      "Jude 24"        -> "Jude"
      "Psalm 119:105"  -> "Psalms"
    """
    reference = normalize(raw)
    pos = reference.rfind(" ")
    if pos == -1:
        raise NoSpaceFound(
            f"No space found in reference '{reference}' (cannot extract book name)",
            reference,
        )
    book_name = reference[:pos].strip()
    if not book_name:
        raise EmptyBookName(f"No book name found in reference '{reference}'", reference)
    return _display_book_name(book_name)


def extract_book_name(raw: str) -> str | None:
    try:
        return try_extract_book_name(raw)
    except CitationError as e:
        print(f"Warning: {e}", file=sys.stderr)
        return None


# ── Verse count ───────────────────────────────────────────────────────────────

def parse_verse_number(s: str) -> int | None:
    """Parse the leading digits of a verse, ignoring part suffixes ("4a" -> 4)."""
    m = _LEADING_DIGITS_RE.match(s)
    if not m:
        return None
    n = int(m.group())
    return n if n <= _MAX_VERSE else None


def _locator(reference: str) -> str:
    pos = reference.rfind(":")
    if pos != -1:
        return reference[pos + 1:]

    # No chapter separator: only valid as "<single-chapter book> <verses>"
    space_pos = reference.rfind(" ")
    if space_pos == -1:
        raise NoColonOrSpace(f"No colon or space found in reference '{reference}'", reference)
    if not is_single_chapter_book(reference[:space_pos]):
        raise NoColonFound(
            f"No colon found in reference '{reference}' (not a single-chapter book)",
            reference,
        )
    return reference[space_pos + 1:]


def try_count_verses(raw: str) -> int:
    """
    Count the verses a citation covers, inclusive of both ends.

      "Genesis 1:1"        -> 1
      "Romans 5:1-8"       -> 8
      "Colossians 1:9a-12" -> 4
      "Jude 24-25"         -> 2
    """
    reference = normalize(raw)
    verse_part = _locator(reference).strip()

    if "-" in verse_part:
        start_str, _, end_str = verse_part.partition("-")
        start = parse_verse_number(start_str.strip())
        end = parse_verse_number(end_str.strip())
        if start is None or end is None or end < start or end - start >= _MAX_VERSE:
            raise InvalidRange(
                f"Could not parse range '{verse_part}' in reference '{reference}'",
                reference,
            )
        return end - start + 1

    if parse_verse_number(verse_part) is None:
        raise InvalidVerse(
            f"Could not parse verse '{verse_part}' in reference '{reference}'",
            reference,
        )
    return 1


def count_verses(raw: str) -> int:
    try:
        return try_count_verses(raw)
    except CitationError as e:
        print(f"Warning: {e}, treating as 1 verse", file=sys.stderr)
        return 1
