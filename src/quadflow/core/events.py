# core/events.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    ADDED = "task.added"
    DELETED = "task.deleted"
    CLASSIFIED = "task.classified"
    CATEGORY_CHANGED = "task.category_changed"
    REORDERED = "task.reordered"
    MOVED_TO_TOP = "task.moved_to_top"
    EXECUTION_TOGGLED = "task.execution_toggled"
    COMPLETED = "task.completed"
    EXPIRED = "tasks.expired"
    LOADED = "tasks.loaded"
    STATS_REFRESHED = "stats.refreshed"


@dataclass(frozen=True, slots=True)
class TaskEvent:
    kind: EventKind
    task_id: str | None
    at: float
    # True when the task collection changed (stats refreshes do not).
    mutates_tasks: bool = True


EventHandler = Callable[[TaskEvent], None]


class EventBus:
    """In-memory pub/sub; a failing handler is logged and never breaks the publisher."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, event: TaskEvent) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                logger.exception("Event handler failed kind=%s", event.kind.value)
