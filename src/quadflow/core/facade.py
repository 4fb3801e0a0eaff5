# core/facade.py

from __future__ import annotations

"""
OperationFacade: the single public surface of the task engine.

Every call runs under one re-entrant lock and is fully settled (ordering
compacted, executor rule enforced) before the lock is released, so the
console thread and the background maintenance thread never see partial state.

The facade is total: unknown ids, done tasks and unknown category names make a
call a silent no-op instead of raising.
"""

import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import replace

from ..tasks.execution import ExecutionGuard
from ..tasks.expiry import DEFAULT_HORIZON_SECONDS, ExpiryScheduler
from ..tasks.ordering import OrderingEngine
from ..tasks.stats import StatsAggregator
from ..tasks.task_models import Category, CompletionSummary, StatsSnapshot, Task
from ..tasks.task_repository import TaskRepository
from .events import EventBus, EventHandler, EventKind, TaskEvent
from .ports import Clock

logger = logging.getLogger(__name__)

CategoryArg = Category | str


class OperationFacade:
    def __init__(
        self,
        *,
        clock: Clock = time.time,
        expiry_horizon_seconds: float = DEFAULT_HORIZON_SECONDS,
    ) -> None:
        self._lock = threading.RLock()
        self._clock = clock
        self._repo = TaskRepository(clock=clock)
        self._ordering = OrderingEngine(self._repo)
        self._guard = ExecutionGuard(self._repo, self._ordering)
        self._expiry = ExpiryScheduler(self._repo, self._ordering, horizon_seconds=expiry_horizon_seconds)
        self._aggregator = StatsAggregator(clock)
        self._stats = StatsSnapshot()
        self._events = EventBus()

    # ---- events ----

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        return self._events.subscribe(handler)

    def _publish(self, kind: EventKind, task_id: str | None = None, *, mutates_tasks: bool = True) -> None:
        self._events.publish(
            TaskEvent(kind=kind, task_id=task_id, at=float(self._clock()), mutates_tasks=mutates_tasks)
        )

    def _bump_daily(self, **delta: int) -> None:
        daily = self._stats.daily
        self._stats = replace(
            self._stats,
            daily=replace(daily, **{k: getattr(daily, k) + v for k, v in delta.items()}),
        )

    # ---- capture / delete ----

    def add_task(self, title: str) -> Task:
        with self._lock:
            task = self._repo.create(title)
            self._bump_daily(created=1)
            logger.info("Task captured id=%s", task.id)
            self._publish(EventKind.ADDED, task.id)
            return task

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            task = self._repo.get(task_id)
            if task is None:
                return
            self._repo.delete(task_id)
            if task.is_active:
                self._ordering.reflow(task.category)
            logger.info("Task deleted id=%s", task_id)
            self._publish(EventKind.DELETED, task_id)

    # ---- ordering ----

    def classify_task(self, task_id: str, category: CategoryArg) -> None:
        target = Category.from_value(category)
        if target is None:
            logger.debug("classify_task: unknown category %r", category)
            return
        with self._lock:
            task = self._repo.get(task_id)
            from_inbox = task is not None and task.category is Category.INBOX
            if self._ordering.classify(task_id, target):
                if from_inbox:
                    self._bump_daily(classified=1)
                self._publish(EventKind.CLASSIFIED, task_id)

    def change_category(self, task_id: str, new_category: CategoryArg) -> None:
        target = Category.from_value(new_category)
        if target is None:
            logger.debug("change_category: unknown category %r", new_category)
            return
        with self._lock:
            task = self._repo.get(task_id)
            from_inbox = task is not None and task.category is Category.INBOX
            if self._ordering.change_category(task_id, target):
                if from_inbox and target.is_classified:
                    self._bump_daily(classified=1)
                self._publish(EventKind.CATEGORY_CHANGED, task_id)

    def reorder_tasks_in_category(self, task_id: str, new_position: int, category: CategoryArg) -> None:
        target = Category.from_value(category)
        if target is None:
            return
        with self._lock:
            if self._ordering.reorder(task_id, new_position, target):
                self._publish(EventKind.REORDERED, task_id)

    def move_to_top(self, task_id: str) -> None:
        with self._lock:
            if self._ordering.move_to_top(task_id):
                self._publish(EventKind.MOVED_TO_TOP, task_id)

    # ---- execution ----

    def toggle_executing(self, task_id: str) -> None:
        with self._lock:
            if self._guard.toggle_executing(task_id):
                self._publish(EventKind.EXECUTION_TOGGLED, task_id)

    def complete_task(self, task_id: str) -> None:
        with self._lock:
            if self._guard.complete_task(task_id):
                self._bump_daily(completed=1)
                self._publish(EventKind.COMPLETED, task_id)

    # ---- maintenance ----

    def cleanup_expired_tasks(self) -> None:
        with self._lock:
            if self._expiry.cleanup_expired_tasks():
                self._publish(EventKind.EXPIRED)

    def refresh_stats(self) -> StatsSnapshot:
        with self._lock:
            self._stats = self._aggregator.compute(self._repo.all())
            self._publish(EventKind.STATS_REFRESHED, mutates_tasks=False)
            return self._stats

    @property
    def stats(self) -> StatsSnapshot:
        with self._lock:
            return self._stats

    def completion_summary(self) -> CompletionSummary:
        with self._lock:
            return self._aggregator.completion_summary(self._repo.all())

    # ---- queries ----

    def get_task(self, task_id: str) -> Task | None:
        with self._lock:
            return self._repo.get(task_id)

    def list_by_category(self, category: CategoryArg) -> list[Task]:
        target = Category.from_value(category)
        if target is None:
            return []
        with self._lock:
            return self._repo.active_in(target)

    def list_executing(self) -> Task | None:
        with self._lock:
            executing = self._repo.find_executing()
            return executing[0] if executing else None

    def top_tasks(self) -> list[Task]:
        """The order-1 task of each classified category that has one."""
        with self._lock:
            tops: list[Task] = []
            for category in Category.classified():
                ranked = self._repo.active_in(category)
                if ranked:
                    tops.append(ranked[0])
            return tops

    def snapshot(self) -> list[Task]:
        with self._lock:
            return self._repo.all()

    # ---- rehydration ----

    def load(self, tasks: Iterable[Task]) -> int:
        """
        Replace the collection with persisted tasks and restore the invariants.

        Returns how many tasks had to be repaired (order or executing flag).
        """
        with self._lock:
            self._repo.replace_all(tasks)
            before = {t.id: (t.order, t.is_executing) for t in self._repo.all()}

            for task in self._repo.all():
                if task.is_executing and (not task.is_active or not task.category.is_classified):
                    self._repo.patch(task.id, is_executing=False)

            executing = self._repo.find_executing()
            if len(executing) > 1:
                keep = max(executing, key=lambda t: t.updated_at)
                for task in executing:
                    if task.id != keep.id:
                        self._repo.patch(task.id, is_executing=False)

            for category in Category:
                self._ordering.reflow(category)

            repaired = sum(
                1 for t in self._repo.all() if before.get(t.id) != (t.order, t.is_executing)
            )
            if repaired:
                logger.warning("Rehydrated tasks needed repair: %d", repaired)
            logger.info("Loaded %d task(s)", self._repo.count())
            self._publish(EventKind.LOADED, mutates_tasks=bool(repaired))
            return repaired
