# tasks/stats.py

from __future__ import annotations

"""
Derived counters.

Everything here is a pure function of a task snapshot and "now"; the facade
caches the latest StatsSnapshot.
"""

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta

from .task_models import (
    Category,
    CompletionSummary,
    DailyStats,
    StatsSnapshot,
    Task,
    TaskStatus,
    WeeklyStats,
    empty_breakdown,
)
from .task_repository import Clock

logger = logging.getLogger(__name__)

WEEK_DAYS = 7
LEVEL_STEP = 6
MAX_LEVEL = 5
PRODUCTIVE_TOTAL = 10
SUPER_PRODUCTIVE_TOTAL = 20
FOCUS_SHARE = 0.4


def local_midnight(now_ts: float) -> float:
    day = datetime.fromtimestamp(now_ts).replace(hour=0, minute=0, second=0, microsecond=0)
    return day.timestamp()


class StatsAggregator:
    def __init__(self, clock: Clock) -> None:
        self._clock = clock

    def compute(self, tasks: Iterable[Task]) -> StatsSnapshot:
        now = float(self._clock())
        today_start = local_midnight(now)
        week_start = (datetime.fromtimestamp(today_start) - timedelta(days=WEEK_DAYS)).timestamp()

        snapshot = list(tasks)
        today = [t for t in snapshot if t.created_at >= today_start]
        week = [t for t in snapshot if t.created_at >= week_start]

        daily = DailyStats(
            created=len(today),
            classified=sum(1 for t in today if t.category.is_classified),
            completed=sum(1 for t in today if t.status is TaskStatus.DONE),
        )

        done_week = [t for t in week if t.status is TaskStatus.DONE]
        breakdown = empty_breakdown()
        for t in done_week:
            breakdown[t.category] += 1

        hours = Counter(datetime.fromtimestamp(t.updated_at).hour for t in done_week)
        # Ties resolve to the earliest hour.
        most_active_hour = min(hours, key=lambda h: (-hours[h], h)) if hours else 0

        weekly = WeeklyStats(
            completion_rate=(len(done_week) / len(week)) if week else 0.0,
            productivity=len(done_week) / WEEK_DAYS,
            category_breakdown=breakdown,
            most_active_hour=most_active_hour,
        )

        logger.debug(
            "Stats computed created=%s classified=%s completed=%s week=%s",
            daily.created,
            daily.classified,
            daily.completed,
            len(week),
        )
        return StatsSnapshot(daily=daily, weekly=weekly, computed_at=now)

    def completion_summary(self, tasks: Iterable[Task]) -> CompletionSummary:
        """Today's completions per classified category (by completion time)."""
        today_start = local_midnight(float(self._clock()))
        by_category = {c: 0 for c in Category.classified()}
        for t in tasks:
            if t.status is TaskStatus.DONE and t.category.is_classified and t.updated_at >= today_start:
                by_category[t.category] += 1

        total = sum(by_category.values())
        return CompletionSummary(
            total=total,
            by_category=by_category,
            level=min(MAX_LEVEL, total // LEVEL_STEP),
            mood=_mood(total, by_category),
        )


def _mood(total: int, by_category: dict[Category, int]) -> str:
    if total == 0:
        return "starting"
    if total >= SUPER_PRODUCTIVE_TOTAL:
        return "super_productive"
    if total >= PRODUCTIVE_TOTAL:
        return "productive"
    if max(by_category.values()) / total < FOCUS_SHARE:
        return "balanced"

    # First category wins ties (work, life, study, hobby).
    leader = max(Category.classified(), key=lambda c: by_category[c])
    return f"{leader.value}_focused"
