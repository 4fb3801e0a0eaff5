# tasks/expiry.py

from __future__ import annotations

import logging

from .ordering import OrderingEngine
from .task_models import Category
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_SECONDS = 24 * 60 * 60


class ExpiryScheduler:
    """
    Blunt age-based sweep.

    A task is removed iff `now - created_at > horizon`, whatever its status,
    order or executing flag. Categories that lost tasks are compacted afterwards;
    a swept executor is not replaced.
    """

    def __init__(
        self,
        repo: TaskRepository,
        ordering: OrderingEngine,
        *,
        horizon_seconds: float = DEFAULT_HORIZON_SECONDS,
    ) -> None:
        self._repo = repo
        self._ordering = ordering
        self._horizon = max(0.0, float(horizon_seconds))

    def is_expired(self, created_at: float, now: float) -> bool:
        return (now - created_at) > self._horizon

    def cleanup_expired_tasks(self) -> int:
        now = self._repo.now()
        expired = [t for t in self._repo.all() if self.is_expired(t.created_at, now)]
        if not expired:
            return 0

        touched: set[Category] = set()
        for task in expired:
            self._repo.delete(task.id)
            if task.is_active:
                touched.add(task.category)

        for category in touched:
            self._ordering.reflow(category)

        logger.info("Expiry sweep removed %d task(s)", len(expired))
        return len(expired)
