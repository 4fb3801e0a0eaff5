# tests/test_stats.py

from __future__ import annotations

import pytest

from quadflow.core.facade import OperationFacade
from quadflow.tasks.stats import StatsAggregator
from quadflow.tasks.task_models import Category, Task, TaskStatus

from .fakes import BASE_TS, FakeClock, local_ts


def _task(title: str, *, created: float, category: Category = Category.INBOX,
          done_at: float | None = None) -> Task:
    return Task(
        id=title,
        title=title,
        category=category,
        created_at=created,
        updated_at=done_at if done_at is not None else created,
        order=1,
        status=TaskStatus.DONE if done_at is not None else TaskStatus.ACTIVE,
    )


@pytest.fixture()
def aggregator(clock: FakeClock) -> StatsAggregator:
    return StatsAggregator(clock)


def test_daily_counts_tasks_created_since_local_midnight(aggregator: StatsAggregator) -> None:
    tasks = [
        _task("a", created=local_ts(hour=9), category=Category.WORK, done_at=local_ts(hour=10)),
        _task("b", created=local_ts(hour=9), category=Category.LIFE),
        _task("c", created=local_ts(hour=11)),
        _task("yesterday", created=local_ts(days_ago=1, hour=23), category=Category.WORK),
    ]

    daily = aggregator.compute(tasks).daily

    assert (daily.created, daily.classified, daily.completed) == (3, 2, 1)


def test_weekly_rate_breakdown_and_hours(aggregator: StatsAggregator) -> None:
    tasks = [
        _task("w1", created=local_ts(days_ago=3, hour=8), category=Category.WORK, done_at=local_ts(days_ago=3, hour=15)),
        _task("w2", created=local_ts(hour=8), category=Category.WORK, done_at=local_ts(hour=9)),
        _task("s1", created=local_ts(days_ago=2), category=Category.STUDY, done_at=local_ts(days_ago=2, hour=15)),
        _task("open", created=local_ts(days_ago=1), category=Category.LIFE),
        _task("ancient", created=local_ts(days_ago=9), category=Category.HOBBY, done_at=local_ts(days_ago=9)),
    ]

    weekly = aggregator.compute(tasks).weekly

    assert weekly.completion_rate == pytest.approx(3 / 4)
    assert weekly.productivity == pytest.approx(3 / 7)
    assert weekly.category_breakdown[Category.WORK] == 2
    assert weekly.category_breakdown[Category.STUDY] == 1
    assert weekly.category_breakdown[Category.HOBBY] == 0
    assert set(weekly.category_breakdown) == set(Category)
    assert weekly.most_active_hour == 15


def test_empty_window_yields_zeroes(aggregator: StatsAggregator) -> None:
    snapshot = aggregator.compute([])

    assert snapshot.weekly.completion_rate == 0
    assert snapshot.weekly.most_active_hour == 0
    assert snapshot.daily.created == 0
    assert snapshot.computed_at == BASE_TS


def test_refresh_is_idempotent(facade: OperationFacade) -> None:
    a = facade.add_task("a")
    facade.classify_task(a.id, Category.WORK)
    facade.complete_task(a.id)
    facade.add_task("b")

    first = facade.refresh_stats()
    second = facade.refresh_stats()

    assert first == second
    assert facade.snapshot() == facade.snapshot()


def test_counters_track_operations_between_refreshes(facade: OperationFacade) -> None:
    a = facade.add_task("a")
    facade.add_task("b")
    facade.classify_task(a.id, Category.WORK)
    facade.complete_task(a.id)

    daily = facade.stats.daily
    assert (daily.created, daily.classified, daily.completed) == (2, 1, 1)

    refreshed = facade.refresh_stats().daily
    assert (refreshed.created, refreshed.classified, refreshed.completed) == (2, 1, 1)


def test_category_change_out_of_inbox_counts_as_classified(facade: OperationFacade) -> None:
    a = facade.add_task("a")
    facade.change_category(a.id, Category.WORK)

    assert facade.stats.daily.classified == 1
    assert facade.refresh_stats().daily.classified == 1


def test_snapshot_equality_ignores_computed_at(facade: OperationFacade, clock: FakeClock) -> None:
    facade.add_task("a")
    first = facade.refresh_stats()
    clock.advance(5)

    second = facade.refresh_stats()

    assert second.computed_at != first.computed_at
    assert second == first


# ---- completion summary ----

def _done_today(category: Category, n: int) -> list[Task]:
    return [
        _task(f"{category.value}{i}", created=local_ts(hour=8), category=category, done_at=local_ts(hour=11))
        for i in range(n)
    ]


def test_summary_starting_when_nothing_done(aggregator: StatsAggregator) -> None:
    summary = aggregator.completion_summary([])

    assert summary.total == 0
    assert summary.level == 0
    assert summary.mood == "starting"
    assert set(summary.by_category) == set(Category.classified())


def test_summary_focused_category(aggregator: StatsAggregator) -> None:
    summary = aggregator.completion_summary(_done_today(Category.WORK, 3) + _done_today(Category.LIFE, 1))

    assert summary.total == 4
    assert summary.mood == "work_focused"


def test_summary_balanced(aggregator: StatsAggregator) -> None:
    tasks = [t for c in Category.classified() for t in _done_today(c, 1)]

    assert aggregator.completion_summary(tasks).mood == "balanced"


def test_summary_levels_and_productive_moods(aggregator: StatsAggregator) -> None:
    productive = aggregator.completion_summary(_done_today(Category.STUDY, 12))
    legendary = aggregator.completion_summary(_done_today(Category.HOBBY, 40))

    assert (productive.level, productive.mood) == (2, "productive")
    assert (legendary.level, legendary.mood) == (5, "super_productive")


def test_summary_ignores_yesterday_and_inbox(aggregator: StatsAggregator) -> None:
    tasks = [
        _task("old", created=local_ts(days_ago=1), category=Category.WORK, done_at=local_ts(days_ago=1, hour=20)),
        _task("inbox", created=local_ts(hour=8), done_at=local_ts(hour=9)),
    ]

    assert aggregator.completion_summary(tasks).total == 0
