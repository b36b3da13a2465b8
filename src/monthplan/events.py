"""Pointer events and a synchronous event bus with scoped subscriptions."""

import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from enum import Enum, auto
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class PointerKind(Enum):
    DOWN = auto()
    ENTER = auto()
    MOVE = auto()
    UP = auto()


class PointerTarget(Enum):
    """What the pointer was over when the event fired."""

    DAY = auto()
    TASK_BODY = auto()
    START_HANDLE = auto()
    END_HANDLE = auto()
    OUTSIDE = auto()


@dataclass(frozen=True)
class PointerEvent:
    """
    One pointer event from the presentation layer.

    The day may already be resolved by the emitter; otherwise the grid cell
    (row, col) is resolved against the month grid by the receiver.
    """

    kind: PointerKind
    target: PointerTarget = PointerTarget.DAY
    day: date | None = None
    cell: tuple[int, int] | None = None
    task_id: str | None = None


Handler = Callable[[PointerEvent], None]


class Subscription:
    """Handle for one registered handler. unsubscribe() is safe to repeat."""

    def __init__(self, bus: "PointerEventBus", kind: PointerKind, subscription_id: str):
        self._bus = bus
        self._kind = kind
        self._subscription_id = subscription_id
        self._active = True

    @property
    def id(self) -> str:
        return self._subscription_id

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._bus._unsubscribe_by_id(self._kind, self._subscription_id)
            self._active = False


class PointerEventBus:
    """
    Delivers pointer events to handlers in subscription order.

    Dispatch is synchronous: emit() returns only after every handler has run.
    Handlers added or removed during an emit take effect from the next one.
    """

    def __init__(self):
        self._listeners: dict[PointerKind, dict[str, Handler]] = {}

    def subscribe(self, kind: PointerKind, handler: Handler) -> Subscription:
        subscription_id = str(uuid.uuid4())
        self._listeners.setdefault(kind, {})[subscription_id] = handler
        return Subscription(self, kind, subscription_id)

    def _unsubscribe_by_id(self, kind: PointerKind, subscription_id: str) -> None:
        if kind in self._listeners:
            self._listeners[kind].pop(subscription_id, None)

    @contextmanager
    def listening(self, kind: PointerKind, handler: Handler) -> Iterator[Subscription]:
        """Subscribe for the duration of a with-block."""
        subscription = self.subscribe(kind, handler)
        try:
            yield subscription
        finally:
            subscription.unsubscribe()

    def listener_count(self, kind: PointerKind) -> int:
        return len(self._listeners.get(kind, {}))

    def emit(self, event: PointerEvent) -> None:
        # Copy to avoid modification during iteration
        handlers = list(self._listeners.get(event.kind, {}).values())
        logger.debug(f"Dispatching {event.kind.name} on {event.target.name} to {len(handlers)} handler(s)")
        for handler in handlers:
            handler(event)

    def clear(self) -> None:
        self._listeners.clear()
