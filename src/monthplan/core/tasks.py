"""Pure task domain logic - no I/O dependencies."""

import secrets
import string
from dataclasses import dataclass
from datetime import date
from enum import Enum

from .dates import DateRange, days_between_inclusive, is_same_day, within_interval

_ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9


class PlannerError(Exception):
    """Base class for planner errors."""

    pass


class InvariantViolation(PlannerError, ValueError):
    """Raised when a task would be created in an invalid state."""

    pass


class TaskNotFound(PlannerError, KeyError):
    """Raised when a task id is not in the store."""

    def __init__(self, task_id: str):
        super().__init__(task_id)
        self.task_id = task_id

    def __str__(self) -> str:
        return f"Task not found: {self.task_id}"


class Category(Enum):
    """Workflow column a task belongs to."""

    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    REVIEW = "Review"
    COMPLETED = "Completed"

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Category":
        """Accept a label ("In Progress") or a member name ("in_progress")."""
        key = text.strip().lower().replace("_", " ").replace("-", " ")
        for category in cls:
            if key in (category.value.lower(), category.name.lower().replace("_", " ")):
                return category
        raise ValueError(f"Unknown category: {text!r}")


def generate_id() -> str:
    """Short random task id."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(ID_LENGTH))


@dataclass(frozen=True)
class Task:
    """A named task occupying an inclusive range of calendar days."""

    id: str
    name: str
    start_date: date
    end_date: date
    category: Category = Category.TODO

    @property
    def span(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)

    @property
    def duration_days(self) -> int:
        return days_between_inclusive(self.start_date, self.end_date)

    def covers(self, day: date) -> bool:
        return within_interval(day, self.start_date, self.end_date)

    def starts_on(self, day: date) -> bool:
        """First day of the task - where the start handle sits."""
        return is_same_day(self.start_date, day)

    def ends_on(self, day: date) -> bool:
        """Last day of the task - where the end handle sits."""
        return is_same_day(self.end_date, day)

    def label(self) -> str:
        days = self.duration_days
        return f"{self.name} ({days} day{'s' if days > 1 else ''})"


@dataclass(frozen=True)
class TaskEntry:
    """Name and category confirmed by the task entry form."""

    name: str
    category: Category = Category.TODO

    def cleaned(self) -> "TaskEntry | None":
        """Trimmed copy, or None when the name is blank."""
        name = self.name.strip()
        if not name:
            return None
        return TaskEntry(name=name, category=self.category)


def validate_task_fields(name: str, start_date: date, end_date: date) -> str:
    """
    Check task creation preconditions and return the trimmed name.

    Raises InvariantViolation instead of reordering dates.
    """
    trimmed = name.strip()
    if not trimmed:
        raise InvariantViolation("Task name must not be empty")
    if start_date > end_date:
        raise InvariantViolation(
            f"Task start {start_date.isoformat()} is after end {end_date.isoformat()}"
        )
    return trimmed
