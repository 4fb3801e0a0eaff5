# src/quadflow/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState (rehydrating tasks), then:
- runs the maintenance loop (expiry sweep + stats refresh) in a background thread,
- runs the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import start_maintenance_in_background
from .bootstrap import create_initial_state, save_tasks

logger = logging.getLogger(__name__)


def _shutdown(state) -> None:
    """Best-effort shutdown: final save, then drop listeners."""
    save_tasks(state)
    for detach in state.detach:
        detach()
    state.detach.clear()


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, app_name=settings.app_name, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    runner = start_maintenance_in_background(
        state.facade,
        interval_seconds=settings.maintenance_interval_seconds,
    )

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    try:
        if settings.console_enabled:
            # The REPL handles Ctrl+C itself (KeyboardInterrupt from input()).
            run_console_loop(state)
            stop_main.set()
        else:
            try:
                signal.signal(signal.SIGINT, _handle_signal)
                signal.signal(signal.SIGTERM, _handle_signal)
            except (ValueError, OSError):
                logger.debug("Signal handlers not installed.", exc_info=True)
            logger.info("Console disabled. Running maintenance only. Press Ctrl+C to stop.")
            stop_main.wait()

    finally:
        if runner is not None:
            runner.stop()
            runner.join(timeout=10.0)

        _shutdown(state)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
