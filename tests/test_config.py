# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from quadflow.config import Settings

_KEYS = (
    "APP_NAME",
    "LOG_LEVEL",
    "CONSOLE_ENABLED",
    "PERSIST_ENABLED",
    "DATA_DIR",
    "TASKS_DB_PATH",
    "MAINTENANCE_INTERVAL_SECONDS",
    "EXPIRY_HOURS",
    "TITLE_MAX_LENGTH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _KEYS:
        monkeypatch.delenv(f"QUADFLOW_{key}", raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.app_name == "quadflow"
    assert s.console_enabled is True
    assert s.persist_enabled is True
    assert s.tasks_db_path == Path(".local/quadflow") / "tasks.sqlite3"
    assert s.expiry_horizon_seconds == 24 * 3600.0
    assert s.title_max_length == 100


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("QUADFLOW_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("QUADFLOW_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("QUADFLOW_EXPIRY_HOURS", "2.5")
    monkeypatch.setenv("QUADFLOW_TITLE_MAX_LENGTH", "40")

    s = Settings.from_env()

    assert s.console_enabled is False
    assert s.tasks_db_path == tmp_path / "tasks.sqlite3"
    assert s.expiry_horizon_seconds == 2.5 * 3600.0
    assert s.title_max_length == 40


def test_invalid_numbers_fall_back_and_are_clamped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("QUADFLOW_EXPIRY_HOURS", "soon")
    monkeypatch.setenv("QUADFLOW_MAINTENANCE_INTERVAL_SECONDS", "0")
    monkeypatch.setenv("QUADFLOW_TITLE_MAX_LENGTH", "-3")

    s = Settings.from_env()

    assert s.expiry_hours == 24.0
    assert s.maintenance_interval_seconds == 1.0
    assert s.title_max_length == 1
