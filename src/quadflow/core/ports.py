# core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and front-ends swappable and makes testing easier.
"""

from collections.abc import Callable, Iterable
from typing import Any, Protocol

from ..tasks.task_models import Task
from .events import TaskEvent

Clock = Callable[[], float]
# Returns "now" as epoch seconds.


class TaskSnapshotStore(Protocol):
    """
    Persistence collaborator: serializes the whole task collection.

    Only tasks are persisted; UI mode and other transient flags are not.
    """

    def load_tasks(self) -> list[Task]: ...
    def save_tasks(self, tasks: Iterable[Task]) -> None: ...


class TaskEventListener(Protocol):
    def __call__(self, event: TaskEvent) -> None: ...


class MaintenanceTarget(Protocol):
    """What the periodic scheduler needs from the engine."""

    def cleanup_expired_tasks(self) -> None: ...
    def refresh_stats(self) -> Any: ...
