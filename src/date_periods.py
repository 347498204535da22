"""
Logical day and week boundaries.

A logical day runs from ROLLOVER_HOUR local time to ROLLOVER_HOUR on the
next calendar day, so a review at 1 AM belongs to the previous day. Weeks
start on Sunday at the same hour. Boundaries are epoch milliseconds, the
unit Anki uses for revlog ids.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Any, Callable
from zoneinfo import ZoneInfo

import stats_config


def _tz() -> ZoneInfo:
    return ZoneInfo(stats_config.TIMEZONE)


def _logical_date(dt: datetime) -> date:
    local = dt.astimezone(_tz())
    return (local - timedelta(hours=stats_config.ROLLOVER_HOUR)).date()


def _day_start(d: date) -> datetime:
    return datetime.combine(d, time(stats_config.ROLLOVER_HOUR), tzinfo=_tz())


def _to_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(_tz())


def _week_start(d: date) -> date:
    # date.weekday(): Monday=0 ... Sunday=6
    return d - timedelta(days=(d.weekday() + 1) % 7)


def day_boundaries(day_offset: int, now: datetime | None = None) -> tuple[int, int, str]:
    """Return (start_ms, end_ms, "YYYY-MM-DD") for the day `day_offset` days before today."""
    target = _logical_date(_now(now)) - timedelta(days=day_offset)
    start = _day_start(target)
    end = _day_start(target + timedelta(days=1))
    return _to_ms(start), _to_ms(end), target.isoformat()


def week_boundaries(week_offset: int, now: datetime | None = None) -> tuple[int, int, str]:
    """Return (start_ms, end_ms, Sunday "YYYY-MM-DD") for the week `week_offset` weeks back."""
    sunday = _week_start(_logical_date(_now(now))) - timedelta(weeks=week_offset)
    start = _day_start(sunday)
    end = _day_start(sunday + timedelta(weeks=1))
    return _to_ms(start), _to_ms(end), sunday.isoformat()


def today_start_ms(now: datetime | None = None) -> int:
    start_ms, _, _ = day_boundaries(0, now)
    return start_ms


def date_str_from_ms(timestamp_ms: int) -> str:
    """Logical day of a millisecond timestamp."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=_tz())
    return _logical_date(dt).isoformat()


def week_str_from_ms(timestamp_ms: int) -> str:
    """Sunday that starts the logical week of a millisecond timestamp."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=_tz())
    return _week_start(_logical_date(dt)).isoformat()


@dataclass
class DatePeriod:
    """A run of consecutive days or weeks, oldest first."""
    dates: list[str] = field(default_factory=list)
    start_ms: int = 0
    end_ms: int = 0

    @classmethod
    def last_days(cls, n: int, now: datetime | None = None) -> "DatePeriod":
        bounds = [day_boundaries(offset, now) for offset in range(n - 1, -1, -1)]
        return cls([b[2] for b in bounds], bounds[0][0], bounds[-1][1])

    @classmethod
    def last_weeks(cls, n: int, now: datetime | None = None) -> "DatePeriod":
        bounds = [week_boundaries(offset, now) for offset in range(n - 1, -1, -1)]
        return cls([b[2] for b in bounds], bounds[0][0], bounds[-1][1])

    def build_results(
        self,
        results: dict[str, Any],
        mapper: Callable[[str, Any], Any],
        default: Any = None,
    ) -> list:
        """Map every date in the period, substituting `default` where no row exists."""
        return [mapper(d, results.get(d, default)) for d in self.dates]
