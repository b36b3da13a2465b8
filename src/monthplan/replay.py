"""
Gesture scripts - replay recorded pointer and filter input against a session.

A script is a JSON list of steps, applied in order:

    [
      {"action": "down", "target": "day", "day": "2025-08-10"},
      {"action": "enter", "day": "2025-08-08"},
      {"action": "up"},
      {"action": "confirm", "name": "Design", "category": "To Do"},
      {"action": "down", "target": "task", "task": "Design"},
      {"action": "move", "cell": [3, 2]},
      {"action": "up"},
      {"action": "search", "text": "design"},
      {"action": "category", "name": "Review", "enabled": false},
      {"action": "window", "value": "2weeks"}
    ]

Tasks are referenced by id or by name (first match in store order).
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from .config import parse_flag
from .core.filters import TimeWindow
from .core.tasks import Category, PlannerError
from .events import PointerEvent, PointerKind, PointerTarget
from .planner import PlannerSession

logger = logging.getLogger(__name__)

_POINTER_ACTIONS = {
    "down": PointerKind.DOWN,
    "enter": PointerKind.ENTER,
    "move": PointerKind.MOVE,
    "up": PointerKind.UP,
}

_TARGETS = {
    "day": PointerTarget.DAY,
    "task": PointerTarget.TASK_BODY,
    "start": PointerTarget.START_HANDLE,
    "end": PointerTarget.END_HANDLE,
    "outside": PointerTarget.OUTSIDE,
}

_CONTROL_ACTIONS = {"confirm", "cancel", "search", "category", "window"}


class ScriptError(PlannerError):
    """Raised when a gesture script is malformed."""

    def __init__(self, index: int, message: str):
        super().__init__(f"Step {index}: {message}")
        self.index = index


@dataclass
class Step:
    """One parsed script step."""

    index: int
    action: str
    target: PointerTarget = PointerTarget.DAY
    day: date | None = None
    cell: tuple[int, int] | None = None
    task: str | None = None
    args: dict[str, Any] = field(default_factory=dict)


def _parse_day(index: int, value: Any) -> date:
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ScriptError(index, f"invalid day {value!r}") from None


def _parse_cell(index: int, value: Any) -> tuple[int, int]:
    if not isinstance(value, list) or len(value) != 2 or not all(isinstance(v, int) for v in value):
        raise ScriptError(index, f"cell must be [row, col], got {value!r}")
    return value[0], value[1]


def parse_step(index: int, raw: Any) -> Step:
    """Validate one raw step."""
    if not isinstance(raw, dict) or "action" not in raw:
        raise ScriptError(index, "each step must be an object with an 'action'")

    action = str(raw["action"]).lower()
    if action in _POINTER_ACTIONS:
        target_name = str(raw.get("target", "day")).lower()
        if target_name not in _TARGETS:
            raise ScriptError(index, f"unknown target {target_name!r}")
        target = _TARGETS[target_name]
        task = raw.get("task")
        if target in (PointerTarget.TASK_BODY, PointerTarget.START_HANDLE, PointerTarget.END_HANDLE):
            if action != "down":
                raise ScriptError(index, f"target {target_name!r} is only valid for 'down'")
            if not task:
                raise ScriptError(index, "task target needs a 'task' id or name")
        return Step(
            index=index,
            action=action,
            target=target,
            day=_parse_day(index, raw["day"]) if "day" in raw else None,
            cell=_parse_cell(index, raw["cell"]) if "cell" in raw else None,
            task=str(task) if task else None,
        )

    if action not in _CONTROL_ACTIONS:
        raise ScriptError(index, f"unknown action {action!r}")

    args = {k: v for k, v in raw.items() if k != "action"}
    try:
        match action:
            case "confirm":
                args["name"] = str(args.get("name", ""))
                args["category"] = Category.parse(str(args.get("category", Category.TODO.label)))
            case "search":
                args["text"] = str(args.get("text", ""))
            case "category":
                args["category"] = Category.parse(str(args["name"]))
                args["enabled"] = parse_flag(args.get("enabled", True))
            case "window":
                args["window"] = TimeWindow.parse(str(args["value"]))
    except KeyError as e:
        raise ScriptError(index, f"missing field {e}") from None
    except ValueError as e:
        raise ScriptError(index, str(e)) from None
    return Step(index=index, action=action, args=args)


def parse_script(data: Any) -> list[Step]:
    if not isinstance(data, list):
        raise ScriptError(0, "script must be a JSON list of steps")
    return [parse_step(i, raw) for i, raw in enumerate(data)]


def load_script(path: Path | str) -> list[Step]:
    """Read and validate a gesture script file."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise ScriptError(0, f"script is not UTF-8 text: {e}") from None
    except json.JSONDecodeError as e:
        raise ScriptError(0, f"invalid JSON: {e}") from None
    return parse_script(data)


def resolve_task_id(session: PlannerSession, ref: str) -> str | None:
    """Find a task by id, falling back to its name."""
    tasks = session.tasks
    for task in tasks:
        if task.id == ref:
            return task.id
    for task in tasks:
        if task.name == ref:
            return task.id
    return None


def apply_step(session: PlannerSession, step: Step) -> None:
    if step.action in _POINTER_ACTIONS:
        task_id = None
        if step.task is not None:
            task_id = resolve_task_id(session, step.task)
            if task_id is None:
                raise ScriptError(step.index, f"no task matches {step.task!r}")
        session.bus.emit(
            PointerEvent(
                kind=_POINTER_ACTIONS[step.action],
                target=step.target,
                day=step.day,
                cell=step.cell,
                task_id=task_id,
            )
        )
        return

    match step.action:
        case "confirm":
            session.confirm_task_entry(step.args["name"], step.args["category"])
        case "cancel":
            session.cancel_task_entry()
        case "search":
            session.set_search_text(step.args["text"])
        case "category":
            session.set_category_enabled(step.args["category"], step.args["enabled"])
        case "window":
            session.set_time_window(step.args["window"])


def run_script(session: PlannerSession, steps: list[Step]) -> None:
    """Apply every step in order."""
    for step in steps:
        logger.debug(f"Step {step.index}: {step.action}")
        apply_step(session, step)
