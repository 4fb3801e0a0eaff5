# tasks/execution.py

from __future__ import annotations

import logging

from .ordering import OrderingEngine
from .task_models import TaskStatus
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)


class ExecutionGuard:
    """
    Store-wide "one task in progress" rule.

    - Only the order-1 active task of a classified category may execute.
    - Starting a task pauses whichever task was executing before.
    - Completing the executor promotes the next task in its category
      (the promotion cascade); an emptied category leaves the slot empty.
    """

    def __init__(self, repo: TaskRepository, ordering: OrderingEngine) -> None:
        self._repo = repo
        self._ordering = ordering

    def toggle_executing(self, task_id: str) -> bool:
        task = self._repo.get(task_id)
        if task is None or not task.is_active:
            return False
        if task.order != 1 or not task.category.is_classified:
            logger.debug("Toggle ignored id=%s order=%s category=%s", task_id, task.order, task.category.value)
            return False

        if task.is_executing:
            self._repo.patch(task.id, is_executing=False)
            logger.info("Task paused id=%s", task.id)
            return True

        for other in self._repo.find_executing():
            self._repo.patch(other.id, is_executing=False)
            logger.debug("Executor cleared id=%s", other.id)

        self._repo.patch(task.id, is_executing=True)
        logger.info("Task started id=%s category=%s", task.id, task.category.value)
        return True

    def complete_task(self, task_id: str) -> bool:
        task = self._repo.get(task_id)
        if task is None or not task.is_active:
            return False

        was_executing = task.is_executing
        self._repo.patch(task.id, status=TaskStatus.DONE, is_executing=False)

        # Done tasks drop out of the ranking; close the gap.
        self._ordering.reflow(task.category)

        if not was_executing:
            return True

        remaining = self._repo.active_in(task.category)
        if not remaining:
            logger.info("Executor completed id=%s; %s is empty", task.id, task.category.value)
            return True

        promoted = remaining[0]
        self._repo.patch(promoted.id, is_executing=True)
        logger.info("Executor completed id=%s; promoted id=%s", task.id, promoted.id)
        return True
