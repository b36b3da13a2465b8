"""Plain-text formatting of the month view for the terminal."""

from datetime import date

from .core.dates import MonthGrid
from .core.tasks import Task

CELL_WIDTH = 5


def format_range(start: date, end: date) -> str:
    if start == end:
        return start.strftime("%b %d")
    return f"{start.strftime('%b %d')} - {end.strftime('%b %d')}"


def format_task_line(task: Task) -> str:
    """
    Format a single task for a list.

    e.g. "- [In Progress] Project Planning (Aug 18 - Aug 20, 3 days)"
    """
    days = task.duration_days
    span = format_range(task.start_date, task.end_date)
    return f"- [{task.category.label}] {task.name} ({span}, {days} day{'s' if days > 1 else ''})"


def format_day_cell(
    day: date,
    grid: MonthGrid,
    has_tasks: bool,
    highlighted: bool,
    today: date | None,
) -> str:
    """Five-character cell: today marker, day number, task marker, highlight brackets."""
    number = f"{day.day:2d}" if grid.in_month(day) else " ."
    marker = "*" if has_tasks else " "
    prefix = ">" if day == today else " "
    if highlighted:
        return f"[{number}{marker}]"
    return f"{prefix}{number}{marker} "


def format_month(
    grid: MonthGrid,
    projection: dict[date, list[Task]],
    highlighted: list[date] | None = None,
    today: date | None = None,
) -> str:
    """Month title, weekday header and one line per week."""
    marked = set(highlighted or [])
    lines = [grid.title]
    lines.append("".join(f"{name:>{CELL_WIDTH - 1}} " for name in grid.weekday_headers()))
    for week in grid.weeks:
        lines.append(
            "".join(
                format_day_cell(d, grid, bool(projection.get(d)), d in marked, today)
                for d in week
            ).rstrip()
        )
    return "\n".join(lines)


def format_task_list(tasks: list[Task]) -> str:
    return "\n".join(format_task_line(t) for t in tasks) or "No tasks."


def format_day_tasks(day: date, tasks: list[Task]) -> str:
    """
    Tasks covering one day, with resize handles shown where they sit.

    "|" marks a handle on this day; "<" and ">" mean the task carries on
    before or after it, e.g. "|Project Planning>" on its first day.
    """
    lines = [day.strftime("%b %d") + ":"]
    for task in tasks:
        start = "|" if task.starts_on(day) else "<"
        end = "|" if task.ends_on(day) else ">"
        lines.append(f"  {start}{task.name}{end} [{task.category.label}]")
    if len(lines) == 1:
        lines.append("  No tasks.")
    return "\n".join(lines)
