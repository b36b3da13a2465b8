"""
Gesture state machines for the month grid.

Two independent machines: day-range selection and task drag/resize. Each
holds exactly one state value (Idle, Selecting or Dragging) rather than a set
of nullable fields. A drag in progress suppresses new selections.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import Enum
from typing import Protocol

from .dates import DateRange, to_day
from .tasks import Task


class DragMode(Enum):
    MOVE = "move"
    RESIZE_START = "resize-start"
    RESIZE_END = "resize-end"


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""


@dataclass(frozen=True)
class Selecting:
    anchor: date
    current: date

    @property
    def span(self) -> DateRange:
        return DateRange.spanning(self.anchor, self.current)


@dataclass(frozen=True)
class Dragging:
    task_id: str
    mode: DragMode
    original_start: date
    last_day: date | None = None


IDLE = Idle()


class TaskMutator(Protocol):
    """The store operations a drag gesture drives."""

    def move_task(self, task_id: str, new_start: date) -> None: ...

    def resize_task_start(self, task_id: str, new_start: date) -> None: ...

    def resize_task_end(self, task_id: str, new_end: date) -> None: ...


class SelectionMachine:
    """Tracks an in-progress day-range selection."""

    def __init__(self):
        self.state: Idle | Selecting = IDLE

    @property
    def is_active(self) -> bool:
        return isinstance(self.state, Selecting)

    @property
    def active_days(self) -> list[date]:
        """Days currently highlighted by the gesture, ascending."""
        if isinstance(self.state, Selecting):
            return self.state.span.days()
        return []

    def begin(self, day: date | datetime, drag_active: bool = False) -> bool:
        """Start selecting at a day. Refused while a task drag is in progress."""
        if drag_active:
            return False
        d = to_day(day)
        self.state = Selecting(anchor=d, current=d)
        return True

    def extend(self, day: date | datetime) -> bool:
        """Move the free end of the selection. Ignored when idle."""
        if not isinstance(self.state, Selecting):
            return False
        self.state = replace(self.state, current=to_day(day))
        return True

    def release(self) -> DateRange | None:
        """Finish the gesture; returns the proposed range for a new task."""
        state = self.state
        self.state = IDLE
        if isinstance(state, Selecting):
            return state.span
        return None

    def reset(self) -> None:
        self.state = IDLE


class DragMachine:
    """Tracks an in-progress move or edge-resize of one task."""

    def __init__(self):
        self.state: Idle | Dragging = IDLE

    @property
    def is_active(self) -> bool:
        return isinstance(self.state, Dragging)

    @property
    def mode(self) -> DragMode | None:
        if isinstance(self.state, Dragging):
            return self.state.mode
        return None

    def begin(self, task: Task, mode: DragMode) -> Dragging:
        self.state = Dragging(
            task_id=task.id,
            mode=mode,
            original_start=task.start_date,
        )
        return self.state

    def move_to(self, day: date | datetime) -> date | None:
        """
        Record that the pointer is over a day.

        Returns the day when it differs from the last one landed on, so each
        new day drives exactly one store mutation; None otherwise.
        """
        if not isinstance(self.state, Dragging):
            return None
        d = to_day(day)
        if self.state.last_day == d:
            return None
        self.state = replace(self.state, last_day=d)
        return d

    def apply(self, store: TaskMutator, day: date) -> None:
        """Commit the dragged task's new range for the given day."""
        if not isinstance(self.state, Dragging):
            return
        task_id = self.state.task_id
        match self.state.mode:
            case DragMode.MOVE:
                store.move_task(task_id, day)
            case DragMode.RESIZE_START:
                store.resize_task_start(task_id, day)
            case DragMode.RESIZE_END:
                store.resize_task_end(task_id, day)

    def release(self) -> Dragging | None:
        """Finish the gesture; the last committed position stands."""
        state = self.state
        self.state = IDLE
        if isinstance(state, Dragging):
            return state
        return None

    def reset(self) -> None:
        self.state = IDLE
