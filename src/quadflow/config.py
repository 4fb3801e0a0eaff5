# src/quadflow/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every key has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "QUADFLOW"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Switches ----
    console_enabled: bool
    persist_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Engine tuning ----
    maintenance_interval_seconds: float
    expiry_hours: float
    title_max_length: int

    @property
    def expiry_horizon_seconds(self) -> float:
        return self.expiry_hours * 3600.0

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "quadflow").strip() or "quadflow"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)
        persist_enabled = _env_bool(_k("PERSIST_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/quadflow"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")

        maintenance_interval_seconds = max(1.0, _env_float(_k("MAINTENANCE_INTERVAL_SECONDS"), 300.0))
        expiry_hours = max(0.0, _env_float(_k("EXPIRY_HOURS"), 24.0))
        title_max_length = max(1, _env_int(_k("TITLE_MAX_LENGTH"), 100))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            persist_enabled=persist_enabled,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            maintenance_interval_seconds=maintenance_interval_seconds,
            expiry_hours=expiry_hours,
            title_max_length=title_max_length,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
