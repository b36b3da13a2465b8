"""
Planner session - connects pointer events to the gesture machines.

The session owns no task data: the store is authoritative, and every view
(filtered tasks, per-day projection, highlights) is recomputed from the store
and the current filter criteria on each call.
"""

import logging
from contextlib import ExitStack
from datetime import date, datetime

from .config import Config
from .core.dates import DateRange, MonthGrid, to_day
from .core.filters import FilterCriteria, TimeWindow, filter_tasks, project_days, tasks_on_day
from .core.gestures import DragMachine, DragMode, SelectionMachine
from .core.tasks import Category, PlannerError, Task, TaskEntry
from .events import PointerEvent, PointerEventBus, PointerKind, PointerTarget
from .ports.task_entry import TaskEntryForm
from .ports.task_store import TaskStore

logger = logging.getLogger(__name__)

_DRAG_MODES = {
    PointerTarget.TASK_BODY: DragMode.MOVE,
    PointerTarget.START_HANDLE: DragMode.RESIZE_START,
    PointerTarget.END_HANDLE: DragMode.RESIZE_END,
}


class PlannerSession:
    """
    One interactive month view.

    Grid listeners (down, enter, up) live as long as the session. Global
    move/up listeners are attached only while a task drag is in progress and
    released when it ends or the session closes.
    """

    def __init__(
        self,
        store: TaskStore,
        bus: PointerEventBus,
        config: Config | None = None,
        today: date | datetime | None = None,
        month: date | None = None,
        entry_form: TaskEntryForm | None = None,
    ):
        self.store = store
        self.bus = bus
        self.config = config or Config()
        self.today = to_day(today or date.today())
        self.grid = MonthGrid.for_month(month or self.today, self.config.week_starts_on)
        self.entry_form = entry_form
        self.criteria: FilterCriteria = self.config.initial_criteria()
        self.pending_proposal: DateRange | None = None

        self.selection = SelectionMachine()
        self.drag = DragMachine()
        self._drag_listeners = ExitStack()

        self._grid_listeners = ExitStack()
        self._grid_listeners.enter_context(bus.listening(PointerKind.DOWN, self._on_pointer_down))
        self._grid_listeners.enter_context(bus.listening(PointerKind.ENTER, self._on_pointer_enter))
        self._grid_listeners.enter_context(bus.listening(PointerKind.UP, self._on_selection_up))

    def close(self) -> None:
        """Detach every listener, ending any gesture in progress."""
        self._end_drag()
        self.selection.reset()
        self._grid_listeners.close()

    def __enter__(self) -> "PlannerSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # Outbound views

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.store.all()

    @property
    def is_selecting(self) -> bool:
        return self.selection.is_active

    @property
    def is_dragging(self) -> bool:
        return self.drag.is_active

    @property
    def highlighted_days(self) -> list[date]:
        """Days to highlight: the live selection, else the range awaiting entry."""
        if self.selection.is_active:
            return self.selection.active_days
        if self.pending_proposal:
            return self.pending_proposal.days()
        return []

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(list(self.store.all()), self.criteria, self.today)

    def tasks_on_day(self, day: date | datetime) -> list[Task]:
        return tasks_on_day(self.visible_tasks(), day)

    def day_projection(self) -> dict[date, list[Task]]:
        return project_days(self.visible_tasks(), self.grid.days)

    # Filter inputs

    def set_search_text(self, text: str) -> None:
        self.criteria = self.criteria.with_search(text)

    def set_category_enabled(self, category: Category, enabled: bool) -> None:
        self.criteria = self.criteria.with_category(category, enabled)

    def set_time_window(self, window: TimeWindow) -> None:
        self.criteria = self.criteria.with_time_window(window)

    # Task entry

    def confirm_task_entry(self, name: str, category: Category = Category.TODO) -> Task | None:
        """
        Create a task from the pending range.

        A blank name leaves the entry open and returns None.
        """
        if self.pending_proposal is None:
            logger.warning("Task entry confirmed with no pending selection")
            return None
        entry = TaskEntry(name=name, category=category).cleaned()
        if entry is None:
            logger.info("Task entry needs a name; keeping it open")
            return None
        proposal = self.pending_proposal
        try:
            task = self.store.create_task(entry.name, entry.category, proposal.start, proposal.end)
        except PlannerError as e:
            logger.error(f"Could not create task: {e}")
            return None
        self.pending_proposal = None
        logger.info(f"Created '{task.name}' {task.start_date} - {task.end_date}")
        return task

    def cancel_task_entry(self) -> None:
        self.pending_proposal = None

    # Pointer handling

    def resolve_day(self, event: PointerEvent) -> date | None:
        """Calendar day under the pointer, from the event or its grid cell."""
        if event.day is not None:
            return to_day(event.day)
        if event.cell is not None:
            return self.grid.day_at(*event.cell)
        return None

    def _on_pointer_down(self, event: PointerEvent) -> None:
        if self.pending_proposal is not None:
            logger.debug("Ignoring press while a task entry is open")
            return
        if event.target in _DRAG_MODES:
            # Pressing on a task never reaches the selection machine
            self._begin_drag(event)
            return
        if event.target != PointerTarget.DAY:
            return
        day = self.resolve_day(event)
        if day is None:
            return
        self.selection.begin(day, drag_active=self.drag.is_active)

    def _on_pointer_enter(self, event: PointerEvent) -> None:
        if event.target != PointerTarget.DAY or not self.selection.is_active:
            return
        day = self.resolve_day(event)
        if day is not None:
            self.selection.extend(day)

    def _on_selection_up(self, event: PointerEvent) -> None:
        proposal = self.selection.release()
        if proposal is None:
            return
        self.pending_proposal = proposal
        logger.debug(f"Requesting task entry for {proposal.start} - {proposal.end}")
        if self.entry_form is None:
            return
        entry = self.entry_form.request_entry(proposal)
        if entry is None:
            self.cancel_task_entry()
        else:
            self.confirm_task_entry(entry.name, entry.category)

    def _begin_drag(self, event: PointerEvent) -> None:
        if self.drag.is_active or event.task_id is None:
            return
        try:
            task = self.store.get(event.task_id)
        except PlannerError as e:
            logger.error(f"Cannot start drag: {e}")
            return
        self.selection.reset()
        self.drag.begin(task, _DRAG_MODES[event.target])
        self._drag_listeners.enter_context(self.bus.listening(PointerKind.MOVE, self._on_drag_move))
        self._drag_listeners.enter_context(self.bus.listening(PointerKind.UP, self._on_drag_up))
        logger.debug(f"Started {self.drag.mode.value} drag of task {task.id}")

    def _on_drag_move(self, event: PointerEvent) -> None:
        day = self.resolve_day(event)
        if day is None:
            return
        target = self.drag.move_to(day)
        if target is None:
            return
        try:
            self.drag.apply(self.store, target)
        except PlannerError as e:
            logger.error(f"Drag aborted: {e}")
            self._end_drag()

    def _on_drag_up(self, event: PointerEvent) -> None:
        self._end_drag()

    def _end_drag(self) -> None:
        finished = self.drag.release()
        self._drag_listeners.close()
        if finished is not None:
            logger.debug(
                f"Finished {finished.mode.value} drag of task {finished.task_id}"
                f" (picked up at {finished.original_start}, released over {finished.last_day})"
            )
