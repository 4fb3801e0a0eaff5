# tasks/ordering.py

from __future__ import annotations

"""
Dense per-category ordering.

Every category keeps its active tasks ranked 1..n with no gaps or duplicates.
The engine also owns the "slot 1 disturbed" rule: whenever a task's order
changes into or out of 1 through a move, its executing flag is dropped, and
only the order-1 task of a classified category may ever keep it.
"""

import logging

from .task_models import Category, Task
from .task_repository import TaskRepository

logger = logging.getLogger(__name__)


class OrderingEngine:
    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    # ---- shared helpers ----

    def reflow(self, category: Category, *, exclude: str | None = None) -> None:
        """
        Compact active tasks of `category` to 1..n, stable by previous order.

        A task that does not land on 1 (or sits in inbox) loses its flag.
        """
        tasks = [t for t in self._repo.active_in(category) if t.id != exclude]
        self._assign(category, tasks)

    def _assign(self, category: Category, ranked: list[Task], *, reset: frozenset[str] = frozenset()) -> None:
        for pos, task in enumerate(ranked, start=1):
            executing = (
                task.is_executing
                and pos == 1
                and category.is_classified
                and task.id not in reset
            )
            if task.order != pos or task.is_executing != executing:
                self._repo.patch(task.id, order=pos, is_executing=executing)

    def _append(self, task: Task, target: Category, *, may_execute: bool) -> None:
        existing = self._repo.active_in(target)
        if not existing:
            executing = may_execute and target.is_classified and not self._repo.find_executing()
            self._repo.patch(task.id, category=target, order=1, is_executing=executing)
            return

        next_order = max(t.order for t in existing) + 1
        self._repo.patch(task.id, category=target, order=next_order, is_executing=False)

    def _movable(self, task_id: str) -> Task | None:
        task = self._repo.get(task_id)
        if task is None or not task.is_active:
            logger.debug("Ignoring move for missing/done task id=%s", task_id)
            return None
        return task

    # ---- operations ----

    def classify(self, task_id: str, target: Category) -> bool:
        """Move a task into a classified category (normally out of inbox)."""
        if not target.is_classified:
            return False

        task = self._movable(task_id)
        if task is None or task.category is target:
            return False

        if task.category.is_classified:
            return self.change_category(task_id, target)

        self.reflow(Category.INBOX, exclude=task.id)
        self._append(task, target, may_execute=True)
        logger.debug("Task classified id=%s -> %s", task_id, target.value)
        return True

    def change_category(self, task_id: str, new_category: Category) -> bool:
        task = self._movable(task_id)
        if task is None or task.category is new_category:
            return False

        held_top = task.is_executing or (task.order == 1 and task.category.is_classified)
        if task.is_executing:
            self._repo.patch(task.id, is_executing=False)
            task = self._repo.get(task.id) or task

        self.reflow(task.category, exclude=task.id)
        self._append(task, new_category, may_execute=not held_top)
        logger.debug(
            "Task category changed id=%s %s -> %s",
            task_id,
            task.category.value,
            new_category.value,
        )
        return True

    def reorder(self, task_id: str, new_position: int, category: Category) -> bool:
        """Relocate a task to a 1-based position, shifting the tasks in between by one."""
        task = self._movable(task_id)
        if task is None or task.category is not category or not category.is_classified:
            return False

        ranked = self._repo.active_in(category)
        old_index = next(i for i, t in enumerate(ranked) if t.id == task.id)
        new_index = max(0, min(len(ranked) - 1, int(new_position) - 1))
        if new_index == old_index:
            return False

        ranked.insert(new_index, ranked.pop(old_index))
        reset = frozenset({task.id}) if 0 in (old_index, new_index) else frozenset()
        self._assign(category, ranked, reset=reset)
        logger.debug("Task reordered id=%s %s -> %s", task_id, old_index + 1, new_index + 1)
        return True

    def move_to_top(self, task_id: str) -> bool:
        """Swap the task with the current top holder; everyone else keeps their slot."""
        task = self._movable(task_id)
        if task is None or not task.category.is_classified or task.order == 1:
            return False

        top = next((t for t in self._repo.active_in(task.category) if t.order == 1), None)
        if top is not None:
            self._repo.patch(top.id, order=task.order, is_executing=False)
        self._repo.patch(task.id, order=1, is_executing=False)
        logger.debug("Task moved to top id=%s (swapped with %s)", task_id, top.id if top else None)
        return True
