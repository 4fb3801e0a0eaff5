# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from quadflow.core.facade import OperationFacade
from quadflow.core.state import AppState
from quadflow.tasks.task_store import TaskStore

from .fakes import FakeClock


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def facade(clock: FakeClock) -> OperationFacade:
    return OperationFacade(clock=clock)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="quadflow-test",
        log_level="DEBUG",
        console_enabled=False,
        persist_enabled=True,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "tasks.sqlite3",
        maintenance_interval_seconds=300.0,
        expiry_hours=24.0,
        expiry_horizon_seconds=24 * 3600.0,
        title_max_length=100,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, facade: OperationFacade) -> AppState:
    """
    AppState wired with the fake clock.

    NOTE: We keep a real SQLite TaskStore here because the persistence
    round-trip is part of what we want to test.
    """
    return AppState(settings=settings, facade=facade, task_store=TaskStore(settings.tasks_db_path))
