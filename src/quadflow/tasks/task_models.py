# tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Category(StrEnum):
    """
    Task buckets.

    Notes:
    - "inbox" is the capture holding area; the other four are "classified".
    - Inbox order is FIFO capture sequence only (no priority semantics).
    """

    WORK = "work"
    LIFE = "life"
    STUDY = "study"
    HOBBY = "hobby"
    INBOX = "inbox"

    @property
    def is_classified(self) -> bool:
        return self is not Category.INBOX

    @classmethod
    def classified(cls) -> tuple[Category, ...]:
        return (cls.WORK, cls.LIFE, cls.STUDY, cls.HOBBY)

    @classmethod
    def from_value(cls, raw: str | Category | None) -> Category | None:
        if raw is None:
            return None
        if isinstance(raw, Category):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            return None


class TaskStatus(StrEnum):
    ACTIVE = "active"
    DONE = "done"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        if not raw:
            return cls.ACTIVE
        try:
            return cls(raw)
        except ValueError:
            return cls.ACTIVE


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    category: Category
    created_at: float
    updated_at: float

    # 1-based rank among active tasks of the same category.
    order: int
    status: TaskStatus = TaskStatus.ACTIVE

    # Only meaningful for the order-1 task of a classified category.
    is_executing: bool = False

    @property
    def is_active(self) -> bool:
        return self.status is TaskStatus.ACTIVE


def empty_breakdown() -> dict[Category, int]:
    return {c: 0 for c in Category}


@dataclass(frozen=True, slots=True)
class DailyStats:
    created: int = 0
    classified: int = 0
    completed: int = 0


@dataclass(frozen=True, slots=True)
class WeeklyStats:
    # completed / total in the window, as a fraction in [0, 1].
    completion_rate: float = 0.0
    # Average completions per day over the window.
    productivity: float = 0.0
    category_breakdown: dict[Category, int] = field(default_factory=empty_breakdown)
    most_active_hour: int = 0


@dataclass(frozen=True, slots=True)
class StatsSnapshot:
    """Derived daily/weekly view; `computed_at` is bookkeeping and ignored by equality."""

    daily: DailyStats = field(default_factory=DailyStats)
    weekly: WeeklyStats = field(default_factory=WeeklyStats)
    computed_at: float | None = field(default=None, compare=False)


@dataclass(frozen=True, slots=True)
class CompletionSummary:
    """Today's completions per classified category plus a coarse "how did it go" label."""

    total: int
    by_category: dict[Category, int]
    level: int
    mood: str
