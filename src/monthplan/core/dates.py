"""Pure calendar-day arithmetic - no I/O dependencies."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

SUNDAY = calendar.SUNDAY
MONDAY = calendar.MONDAY

_WEEKDAY_NAMES = {
    "monday": calendar.MONDAY,
    "tuesday": calendar.TUESDAY,
    "wednesday": calendar.WEDNESDAY,
    "thursday": calendar.THURSDAY,
    "friday": calendar.FRIDAY,
    "saturday": calendar.SATURDAY,
    "sunday": calendar.SUNDAY,
}


def to_day(value: date | datetime) -> date:
    """Normalize a date or datetime to a calendar day (time-of-day dropped)."""
    if isinstance(value, datetime):
        return value.date()
    return value


def weekday_from_name(name: str) -> int:
    """Map a full weekday name or its three-letter abbreviation to a weekday number."""
    key = name.strip().lower()
    for full, number in _WEEKDAY_NAMES.items():
        if key in (full, full[:3]):
            return number
    raise ValueError(f"Unknown weekday: {name!r}")


def is_same_day(a: date | datetime, b: date | datetime) -> bool:
    return to_day(a) == to_day(b)


def add_days(d: date | datetime, n: int) -> date:
    """Shift a day by n calendar days (n may be negative)."""
    return to_day(d) + timedelta(days=n)


def days_between_inclusive(start: date | datetime, end: date | datetime) -> int:
    """Number of calendar days covered by [start, end], both ends counted."""
    return (to_day(end) - to_day(start)).days + 1


def within_interval(d: date | datetime, start: date | datetime, end: date | datetime) -> bool:
    """Check if a day falls within [start, end] inclusive."""
    return to_day(start) <= to_day(d) <= to_day(end)


def enumerate_days(start: date | datetime, end: date | datetime) -> list[date]:
    """
    All days from start to end inclusive, ascending.

    Empty when start > end; callers are expected to pass an ordered pair.
    """
    first, last = to_day(start), to_day(end)
    return [first + timedelta(days=i) for i in range((last - first).days + 1)]


def month_bounds(d: date | datetime) -> tuple[date, date]:
    """First and last day of the month containing d."""
    day = to_day(d)
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def grid_bounds(
    month_start: date,
    month_end: date,
    first_weekday: int = SUNDAY,
) -> tuple[date, date]:
    """
    Pad a month out to complete weeks.

    Returns the first day of the week containing month_start and the last day
    of the week containing month_end.
    """
    lead = (month_start.weekday() - first_weekday) % 7
    trail = 6 - (month_end.weekday() - first_weekday) % 7
    return add_days(month_start, -lead), add_days(month_end, trail)


def month_title(d: date | datetime) -> str:
    """Month heading, e.g. "August 2025"."""
    day = to_day(d)
    return f"{calendar.month_name[day.month]} {day.year}"


@dataclass(frozen=True)
class DateRange:
    """An inclusive span of calendar days."""

    start: date
    end: date

    @classmethod
    def spanning(cls, a: date | datetime, b: date | datetime) -> "DateRange":
        """Range between two days regardless of their order."""
        first, second = to_day(a), to_day(b)
        return cls(start=min(first, second), end=max(first, second))

    @property
    def duration_days(self) -> int:
        return days_between_inclusive(self.start, self.end)

    def days(self) -> list[date]:
        return enumerate_days(self.start, self.end)

    def contains(self, d: date | datetime) -> bool:
        return within_interval(d, self.start, self.end)


@dataclass(frozen=True)
class MonthGrid:
    """
    The full-week grid shown for one month.

    Cells are addressed by (row, col): row is the week index from the top,
    col the position within the week starting at first_weekday.
    """

    month_start: date
    month_end: date
    first_weekday: int
    weeks: tuple[tuple[date, ...], ...]

    @classmethod
    def for_month(cls, any_day: date | datetime, first_weekday: int = SUNDAY) -> "MonthGrid":
        month_start, month_end = month_bounds(any_day)
        start, end = grid_bounds(month_start, month_end, first_weekday)
        days = enumerate_days(start, end)
        weeks = tuple(tuple(days[i : i + 7]) for i in range(0, len(days), 7))
        return cls(
            month_start=month_start,
            month_end=month_end,
            first_weekday=first_weekday,
            weeks=weeks,
        )

    @property
    def days(self) -> list[date]:
        return [d for week in self.weeks for d in week]

    @property
    def title(self) -> str:
        return month_title(self.month_start)

    def day_at(self, row: int, col: int) -> date | None:
        """Reverse lookup: grid cell to calendar day, None outside the grid."""
        if 0 <= row < len(self.weeks) and 0 <= col < 7:
            return self.weeks[row][col]
        return None

    def in_month(self, d: date | datetime) -> bool:
        return within_interval(d, self.month_start, self.month_end)

    def weekday_headers(self) -> list[str]:
        """Short weekday names in grid column order."""
        return [calendar.day_abbr[(self.first_weekday + i) % 7] for i in range(7)]
