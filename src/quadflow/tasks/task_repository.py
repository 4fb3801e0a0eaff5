# tasks/task_repository.py

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace

from .task_models import Category, Task, TaskStatus

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TaskRepository:
    """
    In-memory task collection.

    The repository is total: reads of unknown ids return None, writes to unknown
    ids are no-ops. Ordering rules live in OrderingEngine / ExecutionGuard; this
    class only stores what it is told.

    Tasks are frozen dataclasses, so callers holding a Task can never mutate the
    stored copy behind the repository's back.
    """

    def __init__(self, *, clock: Clock = time.time) -> None:
        self._clock = clock
        self._tasks: dict[str, Task] = {}

    def now(self) -> float:
        return float(self._clock())

    # ---- primitives ----

    def create(self, title: str) -> Task:
        """Capture a new task at the tail of the inbox."""
        now = self.now()
        task = Task(
            id=uuid.uuid4().hex,
            title=title,
            category=Category.INBOX,
            created_at=now,
            updated_at=now,
            order=len(self.active_in(Category.INBOX)) + 1,
            status=TaskStatus.ACTIVE,
            is_executing=False,
        )
        self._tasks[task.id] = task
        logger.debug("Task created id=%s order=%s", task.id, task.order)
        return task

    def get(self, task_id: str) -> Task | None:
        return self._tasks.get(task_id)

    def delete(self, task_id: str) -> None:
        if self._tasks.pop(task_id, None) is not None:
            logger.debug("Task deleted id=%s", task_id)

    def patch(
        self,
        task_id: str,
        *,
        title: str | None = None,
        category: Category | None = None,
        order: int | None = None,
        status: TaskStatus | None = None,
        is_executing: bool | None = None,
    ) -> None:
        task = self._tasks.get(task_id)
        if task is None:
            return

        self._tasks[task_id] = replace(
            task,
            title=task.title if title is None else title,
            category=task.category if category is None else category,
            order=task.order if order is None else int(order),
            status=task.status if status is None else status,
            is_executing=task.is_executing if is_executing is None else bool(is_executing),
            updated_at=self.now(),
        )

    def all(self) -> list[Task]:
        return list(self._tasks.values())

    # ---- helpers ----

    def count(self) -> int:
        return len(self._tasks)

    def active_in(self, category: Category) -> list[Task]:
        """Active tasks of one category, ranked by order (ties by capture time)."""
        tasks = [t for t in self._tasks.values() if t.category is category and t.is_active]
        tasks.sort(key=lambda t: (t.order, t.created_at))
        return tasks

    def find_executing(self) -> list[Task]:
        return [t for t in self._tasks.values() if t.is_executing]

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap the whole collection (rehydration from persistence)."""
        self._tasks = {t.id: t for t in tasks}
        logger.debug("Repository replaced total=%s", len(self._tasks))
