"""Task store interface."""

from datetime import date
from typing import Iterator, Protocol

from monthplan.core.tasks import Category, Task


class TaskStore(Protocol):
    """Interface for the authoritative task collection."""

    def all(self) -> tuple[Task, ...]:
        """Snapshot of every task, in creation order."""
        ...

    def get(self, task_id: str) -> Task:
        """Fetch one task. Raises TaskNotFound if absent."""
        ...

    def create_task(self, name: str, category: Category, start_date: date, end_date: date) -> Task:
        """Create and append a task. Raises InvariantViolation on bad input."""
        ...

    def move_task(self, task_id: str, new_start: date) -> None:
        """Shift a task to a new start, keeping its duration."""
        ...

    def resize_task_start(self, task_id: str, new_start: date) -> None:
        """Move the start edge; no-op if it would pass the end."""
        ...

    def resize_task_end(self, task_id: str, new_end: date) -> None:
        """Move the end edge; no-op if it would pass the start."""
        ...

    def __iter__(self) -> Iterator[Task]: ...

    def __len__(self) -> int: ...
