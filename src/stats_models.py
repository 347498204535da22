"""
Report records produced by anki_db and rendered by the CLI.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field

_BUCKETS = ("mature", "young", "unseen", "suspended")


@dataclass
class BookStats:
    book: str
    mature_passages: int = 0
    young_passages: int = 0
    unseen_passages: int = 0
    suspended_passages: int = 0
    mature_verses: int = 0
    young_verses: int = 0
    unseen_verses: int = 0
    suspended_verses: int = 0

    def total_passages(self) -> int:
        return sum(getattr(self, f"{b}_passages") for b in _BUCKETS)

    def total_verses(self) -> int:
        return sum(getattr(self, f"{b}_verses") for b in _BUCKETS)

    def display_row(self) -> list[str]:
        """Book name followed by "passages / verses" for each bucket."""
        return [self.book] + [
            f"{getattr(self, f'{b}_passages')} / {getattr(self, f'{b}_verses')}"
            for b in _BUCKETS
        ]


@dataclass
class AggregateStats:
    """Running totals over a group of books (one testament)."""
    label: str
    mature_passages: int = 0
    young_passages: int = 0
    unseen_passages: int = 0
    suspended_passages: int = 0
    mature_verses: int = 0
    young_verses: int = 0
    unseen_verses: int = 0
    suspended_verses: int = 0
    book_stats: list[BookStats] = field(default_factory=list)

    def add_book(self, stats: BookStats) -> None:
        for b in _BUCKETS:
            for unit in ("passages", "verses"):
                name = f"{b}_{unit}"
                setattr(self, name, getattr(self, name) + getattr(stats, name))
        self.book_stats.append(stats)

    def total_passages(self) -> int:
        return sum(getattr(self, f"{b}_passages") for b in _BUCKETS)

    def total_verses(self) -> int:
        return sum(getattr(self, f"{b}_verses") for b in _BUCKETS)


@dataclass
class BibleStats:
    old_testament: AggregateStats = field(default_factory=lambda: AggregateStats("Old Testament"))
    new_testament: AggregateStats = field(default_factory=lambda: AggregateStats("New Testament"))
    # Grouped book names that are not in the canon (parser output for bad citations)
    unknown_books: list[BookStats] = field(default_factory=list)

    def total(self, bucket: str, unit: str) -> int:
        """Sum one counter across both testaments, e.g. total("mature", "verses")."""
        name = f"{bucket}_{unit}"
        return getattr(self.old_testament, name) + getattr(self.new_testament, name)

    def total_passages(self) -> int:
        return self.old_testament.total_passages() + self.new_testament.total_passages()

    def total_verses(self) -> int:
        return self.old_testament.total_verses() + self.new_testament.total_verses()

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class DayStats:
    date: str
    minutes: float = 0.0
    matured_passages: int = 0
    lost_passages: int = 0
    cumulative_passages: int = 0


@dataclass
class WeekStats:
    week_start: str
    minutes: float = 0.0
    matured_passages: int = 0
    lost_passages: int = 0
    cumulative_passages: int = 0
