# src/quadflow/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Loggers that fire on every maintenance pass; only problems reach the prompt.
BACKGROUND_LOGGERS = frozenset({"quadflow.tasks.task_scheduler", "quadflow.tasks.expiry"})

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ConsoleNoiseFilter(logging.Filter):
    """Keeps the REPL readable while the maintenance thread runs underneath it."""

    def __init__(self, quiet: frozenset[str] = BACKGROUND_LOGGERS) -> None:
        super().__init__()
        self._quiet = quiet

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name in self._quiet:
            return record.levelno >= logging.WARNING
        if record.name == "quadflow" or record.name.startswith("quadflow."):
            return True
        # py.warnings and third-party libraries
        return record.levelno >= logging.ERROR


def _handler(handler: logging.Handler, level: int, fmt: logging.Formatter) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/quadflow",
    app_name: str = "quadflow",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Route everything to `<log_dir>/<app_name>.log` and a filtered stderr stream.

    Replaces existing root handlers, so repeated calls do not duplicate output.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    console = _handler(logging.StreamHandler(sys.stderr), console_level, fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)
    root.addHandler(_handler(logging.FileHandler(str(log_file), encoding="utf-8"), file_level, fmt))

    logging.captureWarnings(True)
    return log_file
