"""Tests for the planner session: gestures wired to the store."""

import logging
from datetime import date

import pytest

from monthplan.adapters.memory_store import InMemoryTaskStore
from monthplan.config import Config
from monthplan.core.dates import DateRange
from monthplan.core.filters import TimeWindow
from monthplan.core.tasks import Category, TaskEntry
from monthplan.events import PointerEvent, PointerEventBus, PointerKind, PointerTarget
from monthplan.planner import PlannerSession


def aug(d):
    return date(2025, 8, d)


def press_day(d):
    return PointerEvent(kind=PointerKind.DOWN, target=PointerTarget.DAY, day=aug(d))


def enter_day(d):
    return PointerEvent(kind=PointerKind.ENTER, target=PointerTarget.DAY, day=aug(d))


def move_over(d):
    return PointerEvent(kind=PointerKind.MOVE, target=PointerTarget.DAY, day=aug(d))


def release():
    return PointerEvent(kind=PointerKind.UP, target=PointerTarget.OUTSIDE)


def press_task(task_id, target=PointerTarget.TASK_BODY):
    return PointerEvent(kind=PointerKind.DOWN, target=target, task_id=task_id)


class RecordingForm:
    """Entry form that answers with a canned entry."""

    def __init__(self, entry):
        self.entry = entry
        self.proposals = []

    def request_entry(self, proposal):
        self.proposals.append(proposal)
        return self.entry


@pytest.fixture
def store():
    return InMemoryTaskStore()


@pytest.fixture
def bus():
    return PointerEventBus()


@pytest.fixture
def session(store, bus):
    s = PlannerSession(store, bus, config=Config(sample_tasks=False), today=aug(15))
    yield s
    s.close()


@pytest.fixture
def design(store):
    return store.create_task("Design", Category.TODO, aug(18), aug(20))


class TestSelection:
    def test_select_backwards_highlights_ascending(self, session, bus):
        bus.emit(press_day(10))
        bus.emit(enter_day(9))
        bus.emit(enter_day(8))
        assert session.is_selecting
        assert session.highlighted_days == [aug(8), aug(9), aug(10)]

    def test_release_requests_entry(self, session, bus):
        bus.emit(press_day(10))
        bus.emit(enter_day(8))
        bus.emit(release())
        assert not session.is_selecting
        assert session.pending_proposal == DateRange(aug(8), aug(10))
        # Still highlighted while the entry is open
        assert session.highlighted_days == [aug(8), aug(9), aug(10)]

    def test_confirm_creates_task(self, session, bus, store):
        bus.emit(press_day(18))
        bus.emit(enter_day(20))
        bus.emit(release())
        task = session.confirm_task_entry("  Design ", Category.REVIEW)
        assert task is not None
        assert (task.name, task.category) == ("Design", Category.REVIEW)
        assert (task.start_date, task.end_date) == (aug(18), aug(20))
        assert store.all() == (task,)
        assert session.pending_proposal is None
        assert session.highlighted_days == []

    def test_confirm_blank_name_keeps_entry_open(self, session, bus, store):
        bus.emit(press_day(18))
        bus.emit(release())
        assert session.confirm_task_entry("   ") is None
        assert len(store) == 0
        assert session.pending_proposal == DateRange(aug(18), aug(18))

    def test_confirm_without_selection(self, session, store):
        assert session.confirm_task_entry("Design") is None
        assert len(store) == 0

    def test_cancel_discards_selection(self, session, bus, store):
        bus.emit(press_day(18))
        bus.emit(release())
        session.cancel_task_entry()
        assert session.pending_proposal is None
        assert session.highlighted_days == []
        assert len(store) == 0

    def test_enter_without_press_is_ignored(self, session, bus):
        bus.emit(enter_day(8))
        assert session.highlighted_days == []

    def test_press_ignored_while_entry_open(self, session, bus):
        bus.emit(press_day(18))
        bus.emit(release())
        bus.emit(press_day(3))
        assert not session.is_selecting
        assert session.pending_proposal == DateRange(aug(18), aug(18))

    def test_release_without_selection_requests_nothing(self, session, bus):
        bus.emit(release())
        assert session.pending_proposal is None

    def test_cell_resolution(self, store, bus):
        session = PlannerSession(store, bus, today=aug(15), month=aug(1))
        bus.emit(PointerEvent(kind=PointerKind.DOWN, target=PointerTarget.DAY, cell=(3, 1)))
        bus.emit(PointerEvent(kind=PointerKind.ENTER, target=PointerTarget.DAY, cell=(3, 3)))
        assert session.highlighted_days == [aug(18), aug(19), aug(20)]
        session.close()

    def test_entry_form_confirms(self, store, bus):
        form = RecordingForm(TaskEntry(name="Design", category=Category.IN_PROGRESS))
        session = PlannerSession(store, bus, today=aug(15), entry_form=form)
        bus.emit(press_day(10))
        bus.emit(enter_day(12))
        bus.emit(release())
        assert form.proposals == [DateRange(aug(10), aug(12))]
        assert len(store) == 1
        assert store.all()[0].category == Category.IN_PROGRESS
        assert session.pending_proposal is None
        session.close()

    def test_entry_form_cancels(self, store, bus):
        form = RecordingForm(None)
        session = PlannerSession(store, bus, today=aug(15), entry_form=form)
        bus.emit(press_day(10))
        bus.emit(release())
        assert len(store) == 0
        assert session.pending_proposal is None
        session.close()


class TestDrag:
    def test_move_preserves_duration(self, session, bus, store, design):
        bus.emit(press_task(design.id))
        assert session.is_dragging
        bus.emit(move_over(19))
        bus.emit(move_over(22))
        bus.emit(release())
        moved = store.get(design.id)
        assert (moved.start_date, moved.end_date) == (aug(22), aug(24))
        assert not session.is_dragging

    def test_resize_start(self, session, bus, store, design):
        bus.emit(press_task(design.id, PointerTarget.START_HANDLE))
        bus.emit(move_over(16))
        bus.emit(release())
        assert store.get(design.id).start_date == aug(16)
        assert store.get(design.id).end_date == aug(20)

    def test_resize_start_past_end_is_noop(self, session, bus, store, design):
        bus.emit(press_task(design.id, PointerTarget.START_HANDLE))
        bus.emit(move_over(25))
        bus.emit(release())
        assert store.get(design.id) == design

    def test_resize_end(self, session, bus, store, design):
        bus.emit(press_task(design.id, PointerTarget.END_HANDLE))
        bus.emit(move_over(17))
        bus.emit(move_over(27))
        bus.emit(release())
        assert store.get(design.id).start_date == aug(18)
        assert store.get(design.id).end_date == aug(27)

    def test_drag_suppresses_selection(self, session, bus, design):
        bus.emit(press_task(design.id))
        bus.emit(press_day(5))
        bus.emit(enter_day(7))
        assert not session.is_selecting
        bus.emit(release())
        assert session.pending_proposal is None

    def test_task_press_highlights_nothing(self, session, bus, design):
        bus.emit(press_task(design.id))
        assert session.highlighted_days == []

    def test_global_listeners_only_while_dragging(self, session, bus, design):
        assert bus.listener_count(PointerKind.MOVE) == 0
        ups = bus.listener_count(PointerKind.UP)
        bus.emit(press_task(design.id))
        assert bus.listener_count(PointerKind.MOVE) == 1
        assert bus.listener_count(PointerKind.UP) == ups + 1
        bus.emit(release())
        assert bus.listener_count(PointerKind.MOVE) == 0
        assert bus.listener_count(PointerKind.UP) == ups

    def test_moves_after_release_are_ignored(self, session, bus, store, design):
        bus.emit(press_task(design.id))
        bus.emit(move_over(22))
        bus.emit(release())
        bus.emit(move_over(2))
        assert store.get(design.id).start_date == aug(22)

    def test_move_outside_grid_is_ignored(self, store, bus, design):
        session = PlannerSession(store, bus, today=aug(15), month=aug(1))
        bus.emit(press_task(design.id))
        bus.emit(PointerEvent(kind=PointerKind.MOVE, target=PointerTarget.OUTSIDE, cell=(9, 9)))
        bus.emit(release())
        assert store.get(design.id) == design
        session.close()

    def test_one_mutation_per_new_day(self, session, bus, store, design, monkeypatch):
        calls = []
        original = store.move_task

        def counting_move(task_id, new_start):
            calls.append(new_start)
            original(task_id, new_start)

        monkeypatch.setattr(store, "move_task", counting_move)
        bus.emit(press_task(design.id))
        for d in (21, 21, 21, 22, 22, 21):
            bus.emit(move_over(d))
        bus.emit(release())
        assert calls == [aug(21), aug(22), aug(21)]

    def test_task_press_ignored_while_entry_open(self, session, bus, store, design):
        bus.emit(press_day(3))
        bus.emit(release())
        bus.emit(press_task(design.id))
        bus.emit(move_over(22))
        assert not session.is_dragging
        assert bus.listener_count(PointerKind.MOVE) == 0
        assert store.get(design.id) == design
        assert session.pending_proposal == DateRange(aug(3), aug(3))

    def test_finished_drag_is_logged(self, session, bus, design, caplog):
        caplog.set_level(logging.DEBUG, logger="monthplan.planner")
        bus.emit(press_task(design.id))
        bus.emit(move_over(22))
        bus.emit(release())
        assert "Finished move drag of task" in caplog.text
        assert "picked up at 2025-08-18, released over 2025-08-22" in caplog.text

    def test_unknown_task_does_not_start_drag(self, session, bus):
        bus.emit(press_task("missing"))
        assert not session.is_dragging
        assert bus.listener_count(PointerKind.MOVE) == 0

    def test_task_removed_mid_drag_ends_gesture(self, session, bus, store, design):
        bus.emit(press_task(design.id))
        store._tasks.clear()
        bus.emit(move_over(22))
        assert not session.is_dragging
        assert bus.listener_count(PointerKind.MOVE) == 0

    def test_close_releases_drag_listeners(self, store, bus, design):
        session = PlannerSession(store, bus, today=aug(15))
        bus.emit(press_task(design.id))
        session.close()
        assert bus.listener_count(PointerKind.MOVE) == 0
        assert bus.listener_count(PointerKind.UP) == 0
        assert bus.listener_count(PointerKind.DOWN) == 0

    def test_context_manager_closes(self, store, bus):
        with PlannerSession(store, bus, today=aug(15)):
            assert bus.listener_count(PointerKind.DOWN) == 1
        assert bus.listener_count(PointerKind.DOWN) == 0


class TestViews:
    def test_filters_update_views(self, session, store):
        a = store.create_task("Design review", Category.REVIEW, aug(18), aug(20))
        b = store.create_task("Launch", Category.TODO, aug(15), aug(15))
        assert session.visible_tasks() == [a, b]

        session.set_search_text("design")
        assert session.visible_tasks() == [a]

        session.set_search_text("")
        session.set_category_enabled(Category.REVIEW, False)
        assert session.visible_tasks() == [b]

        session.set_category_enabled(Category.REVIEW, True)
        session.set_time_window(TimeWindow.within(1))
        assert session.visible_tasks() == [a, b]

    def test_tasks_on_day_uses_filtered_view(self, session, store):
        a = store.create_task("Design", Category.REVIEW, aug(18), aug(20))
        assert session.tasks_on_day(aug(19)) == [a]
        session.set_category_enabled(Category.REVIEW, False)
        assert session.tasks_on_day(aug(19)) == []

    def test_views_follow_store_changes(self, session, bus, store, design):
        assert session.tasks_on_day(aug(22)) == []
        bus.emit(press_task(design.id))
        bus.emit(move_over(22))
        assert [t.id for t in session.tasks_on_day(aug(22))] == [design.id]
        bus.emit(release())

    def test_day_projection_covers_grid(self, session, design):
        projection = session.day_projection()
        assert list(projection) == session.grid.days
        assert projection[aug(19)] == [design]

    def test_config_drives_initial_criteria(self, store, bus):
        config = Config(default_categories=[Category.TODO], default_time_window=TimeWindow.within(2))
        session = PlannerSession(store, bus, config=config, today=aug(15))
        assert session.criteria.enabled_categories == frozenset({Category.TODO})
        assert session.criteria.time_window.weeks == 2
        session.close()

    def test_grid_defaults_to_today_month(self, session):
        assert session.grid.title == "August 2025"
