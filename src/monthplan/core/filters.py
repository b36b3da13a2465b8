"""Filter engine and per-day projection - pure functions, no I/O."""

import re
from dataclasses import dataclass, field, replace
from datetime import date, datetime

from .dates import add_days, to_day, within_interval
from .tasks import Category, Task

_WINDOW_TOKEN = re.compile(r"^(\d+)\s*weeks?$", re.IGNORECASE)


@dataclass(frozen=True)
class TimeWindow:
    """Either all tasks (weeks is None) or tasks starting within N weeks."""

    weeks: int | None = None

    def __post_init__(self) -> None:
        if self.weeks is not None and self.weeks < 1:
            raise ValueError("weeks must be >= 1")

    @classmethod
    def within(cls, weeks: int) -> "TimeWindow":
        return cls(weeks=weeks)

    @classmethod
    def parse(cls, token: str) -> "TimeWindow":
        """Parse "all", "1week", "2weeks", "3 weeks", ..."""
        text = token.strip().lower()
        if text == "all":
            return ALL
        match = _WINDOW_TOKEN.match(text)
        if not match:
            raise ValueError(f"Unknown time window: {token!r}")
        return cls.within(int(match.group(1)))

    @property
    def is_all(self) -> bool:
        return self.weeks is None

    @property
    def token(self) -> str:
        if self.weeks is None:
            return "all"
        return f"{self.weeks}week{'s' if self.weeks > 1 else ''}"

    def label(self) -> str:
        if self.weeks is None:
            return "All tasks"
        return f"Tasks within {self.weeks} week{'s' if self.weeks > 1 else ''}"

    def bounds(self, today: date | datetime) -> tuple[date, date] | None:
        """Inclusive [today, today + 7N] window, or None for all."""
        if self.weeks is None:
            return None
        start = to_day(today)
        return start, add_days(start, self.weeks * 7)


ALL = TimeWindow()


@dataclass(frozen=True)
class FilterCriteria:
    """Current search, category and time-window filter inputs."""

    search_text: str = ""
    enabled_categories: frozenset[Category] = field(default_factory=lambda: frozenset(Category))
    time_window: TimeWindow = ALL

    def with_search(self, text: str) -> "FilterCriteria":
        return replace(self, search_text=text)

    def with_category(self, category: Category, enabled: bool) -> "FilterCriteria":
        if enabled:
            categories = self.enabled_categories | {category}
        else:
            categories = self.enabled_categories - {category}
        return replace(self, enabled_categories=frozenset(categories))

    def with_time_window(self, window: TimeWindow) -> "FilterCriteria":
        return replace(self, time_window=window)


def matches(task: Task, criteria: FilterCriteria, today: date | datetime) -> bool:
    """Check a single task against all three filter rules."""
    if criteria.search_text and criteria.search_text.lower() not in task.name.lower():
        return False

    # An empty category set shows nothing
    if task.category not in criteria.enabled_categories:
        return False

    window = criteria.time_window.bounds(today)
    # Only the start date is tested against the window
    if window is not None and not within_interval(task.start_date, *window):
        return False

    return True


def filter_tasks(
    tasks: list[Task],
    criteria: FilterCriteria,
    today: date | datetime | None = None,
) -> list[Task]:
    """
    Visible subset of tasks, in input order.

    Pure function - no I/O.
    """
    today = today or date.today()
    return [t for t in tasks if matches(t, criteria, today)]


def tasks_on_day(tasks: list[Task], day: date | datetime) -> list[Task]:
    """Tasks whose inclusive range covers the given day."""
    return [t for t in tasks if t.covers(to_day(day))]


def project_days(tasks: list[Task], days: list[date]) -> dict[date, list[Task]]:
    """Tasks per day for a whole grid, computed fresh on every call."""
    return {d: tasks_on_day(tasks, d) for d in days}
