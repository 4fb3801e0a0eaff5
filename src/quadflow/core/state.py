# src/quadflow/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from ..tasks.task_store import TaskStore
from .facade import OperationFacade


@dataclass
class AppState:
    # Settings are stored on the state so connectors/commands need no global reads.
    settings: Any

    facade: OperationFacade
    task_store: TaskStore | None = None

    # Unsubscribe callables for listeners attached at bootstrap.
    detach: list[Callable[[], None]] = field(default_factory=list)
