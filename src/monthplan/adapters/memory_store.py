"""In-memory task store adapter."""

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Iterator

from monthplan.core.dates import add_days, to_day
from monthplan.core.tasks import (
    Category,
    InvariantViolation,
    Task,
    TaskNotFound,
    generate_id,
    validate_task_fields,
)

logger = logging.getLogger(__name__)


class InMemoryTaskStore:
    """
    Authoritative, memory-resident task list.

    Implements TaskStore protocol. Every mutation builds a complete new Task
    and swaps it into place in one assignment, so readers only ever see
    whole records.
    """

    def __init__(self, tasks: Iterable[Task] = ()):
        self._tasks: list[Task] = []
        for task in tasks:
            validate_task_fields(task.name, task.start_date, task.end_date)
            if task.id in self:
                raise InvariantViolation(f"Duplicate task id: {task.id}")
            self._tasks.append(task)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return any(t.id == task_id for t in self._tasks)

    def all(self) -> tuple[Task, ...]:
        """Snapshot of every task, in creation order."""
        return tuple(self._tasks)

    def _index_of(self, task_id: str) -> int:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        raise TaskNotFound(task_id)

    def get(self, task_id: str) -> Task:
        return self._tasks[self._index_of(task_id)]

    def _new_id(self) -> str:
        task_id = generate_id()
        while task_id in self:
            task_id = generate_id()
        return task_id

    def create_task(
        self,
        name: str,
        category: Category,
        start_date: date | datetime,
        end_date: date | datetime,
    ) -> Task:
        """Create and append a task. Raises InvariantViolation on bad input."""
        start, end = to_day(start_date), to_day(end_date)
        trimmed = validate_task_fields(name, start, end)
        task = Task(
            id=self._new_id(),
            name=trimmed,
            start_date=start,
            end_date=end,
            category=category,
        )
        self._tasks.append(task)
        logger.debug(f"Created task {task.id} '{task.name}' {start} - {end}")
        return task

    def _replace(self, task_id: str, **changes) -> Task:
        i = self._index_of(task_id)
        updated = replace(self._tasks[i], **changes)
        self._tasks[i] = updated
        return updated

    def move_task(self, task_id: str, new_start: date | datetime) -> None:
        """Shift a task to a new start, keeping its duration."""
        task = self.get(task_id)
        start = to_day(new_start)
        end = add_days(start, task.duration_days - 1)
        self._replace(task_id, start_date=start, end_date=end)
        logger.debug(f"Moved task {task_id} to {start} - {end}")

    def resize_task_start(self, task_id: str, new_start: date | datetime) -> None:
        """Move the start edge. Crossing the end edge is ignored."""
        task = self.get(task_id)
        start = to_day(new_start)
        if start > task.end_date:
            logger.debug(f"Ignored start resize of {task_id} past its end ({start} > {task.end_date})")
            return
        self._replace(task_id, start_date=start)
        logger.debug(f"Resized start of task {task_id} to {start}")

    def resize_task_end(self, task_id: str, new_end: date | datetime) -> None:
        """Move the end edge. Crossing the start edge is ignored."""
        task = self.get(task_id)
        end = to_day(new_end)
        if end < task.start_date:
            logger.debug(f"Ignored end resize of {task_id} before its start ({end} < {task.start_date})")
            return
        self._replace(task_id, end_date=end)
        logger.debug(f"Resized end of task {task_id} to {end}")
