# src/quadflow/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- builds the OperationFacade and the SQLite persistence collaborator,
- rehydrates tasks before the first operation,
- saves the task collection after every state change.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.events import TaskEvent
from ..core.facade import OperationFacade
from ..core.state import AppState
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    facade = OperationFacade(expiry_horizon_seconds=settings.expiry_horizon_seconds)
    task_store = TaskStore(settings.tasks_db_path) if settings.persist_enabled else None

    state = AppState(settings=settings, facade=facade, task_store=task_store)
    load_tasks(state)
    attach_persistence(state)
    return state


def load_tasks(state: AppState) -> int:
    """Rehydrate the facade from the store. Returns the number of loaded tasks."""
    if state.task_store is None:
        return 0
    tasks = state.task_store.load_tasks()
    state.facade.load(tasks)
    return len(tasks)


def save_tasks(state: AppState) -> None:
    """Best-effort: a failed save is logged, never raised into the caller."""
    if state.task_store is None:
        return
    try:
        state.task_store.save_tasks(state.facade.snapshot())
    except Exception:
        logger.exception("Failed to save tasks to %s", state.task_store.db_path)


def attach_persistence(state: AppState) -> None:
    if state.task_store is None:
        return

    def _on_event(event: TaskEvent) -> None:
        if event.mutates_tasks:
            save_tasks(state)

    state.detach.append(state.facade.subscribe(_on_event))
