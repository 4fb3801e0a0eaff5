# tasks/task_scheduler.py

from __future__ import annotations

"""
Maintenance scheduler.

A small polling loop that, at start and then every interval:
- sweeps expired tasks,
- refreshes the cached stats snapshot.

The loop only calls the facade; the facade's lock keeps each pass atomic with
respect to console operations running on another thread.
"""

import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass

from ..core.ports import MaintenanceTarget

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 300.0


def run_maintenance_once(target: MaintenanceTarget) -> None:
    """One pass: cleanup first so stats never count swept tasks."""
    try:
        target.cleanup_expired_tasks()
    except Exception:
        logger.exception("cleanup_expired_tasks failed")

    try:
        target.refresh_stats()
    except Exception:
        logger.exception("refresh_stats failed")


async def run_maintenance_scheduler(
        target: MaintenanceTarget,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        stop_event: asyncio.Event | None = None,
) -> None:
    """
    Simple polling scheduler.

    Runs one pass immediately, then one every interval_seconds.
    To stop it, set stop_event or cancel the coroutine/task.
    """
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        run_maintenance_once(target)

        if stop_event is None:
            await asyncio.sleep(sleep_s)
            continue

        try:
            await asyncio.wait_for(stop_event.wait(), timeout=sleep_s)
        except asyncio.TimeoutError:
            continue
        logger.info("Maintenance scheduler stopped.")
        return


@dataclass(slots=True)
class MaintenanceRunner:
    thread: threading.Thread
    loop: asyncio.AbstractEventLoop
    stop_event: asyncio.Event

    def stop(self) -> None:
        try:
            self.loop.call_soon_threadsafe(self.stop_event.set)
        except RuntimeError:
            logger.debug("Failed to signal maintenance stop.", exc_info=True)

    def join(self, timeout: float | None = None) -> None:
        self.thread.join(timeout=timeout)


def start_maintenance_in_background(
        target: MaintenanceTarget,
        *,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
) -> MaintenanceRunner | None:
    """
    Start the maintenance loop in a daemon thread with its own event loop,
    so the blocking console REPL can keep the main thread.
    """
    ready = threading.Event()
    holder: dict[str, object] = {}

    def runner() -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        stop_event = asyncio.Event()

        holder["loop"] = loop
        holder["stop_event"] = stop_event
        ready.set()

        try:
            loop.run_until_complete(
                run_maintenance_scheduler(target, interval_seconds=interval_seconds, stop_event=stop_event)
            )
        finally:
            with contextlib.suppress(Exception):
                loop.close()

    t = threading.Thread(target=runner, name="quadflow-maintenance", daemon=True)
    t.start()

    ready.wait(timeout=5.0)
    loop = holder.get("loop")
    stop_event = holder.get("stop_event")

    if not isinstance(loop, asyncio.AbstractEventLoop) or not isinstance(stop_event, asyncio.Event):
        logger.error("Maintenance thread did not initialize properly.")
        return None

    logger.info("Maintenance thread started (interval=%ss).", interval_seconds)
    return MaintenanceRunner(thread=t, loop=loop, stop_event=stop_event)
