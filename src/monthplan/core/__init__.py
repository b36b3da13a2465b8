"""Functional core - pure business logic with no I/O."""

from .dates import DateRange, MonthGrid, days_between_inclusive, enumerate_days
from .tasks import Category, Task, TaskEntry, PlannerError, InvariantViolation, TaskNotFound
from .filters import FilterCriteria, TimeWindow, filter_tasks, tasks_on_day, project_days
from .gestures import DragMode, DragMachine, SelectionMachine

__all__ = [
    # Dates
    "DateRange",
    "MonthGrid",
    "days_between_inclusive",
    "enumerate_days",
    # Tasks
    "Category",
    "Task",
    "TaskEntry",
    "PlannerError",
    "InvariantViolation",
    "TaskNotFound",
    # Filters
    "FilterCriteria",
    "TimeWindow",
    "filter_tasks",
    "tasks_on_day",
    "project_days",
    # Gestures
    "DragMode",
    "DragMachine",
    "SelectionMachine",
]
