# tests/test_expiry.py

from __future__ import annotations

from quadflow.core.facade import OperationFacade
from quadflow.tasks.task_models import Category

from .fakes import HOUR, FakeClock, assert_invariants


def test_sweep_removes_only_tasks_older_than_24h(facade: OperationFacade, clock: FakeClock) -> None:
    old = facade.add_task("old")
    facade.classify_task(old.id, Category.STUDY)
    clock.advance(24 * HOUR)
    young = facade.add_task("young")
    facade.classify_task(young.id, Category.STUDY)
    clock.advance(1 * HOUR)

    # old: 25h old, order 1 and executing; young: 1h old.
    assert facade.get_task(old.id).is_executing

    facade.cleanup_expired_tasks()

    assert facade.get_task(old.id) is None
    remaining = facade.list_by_category(Category.STUDY)
    assert [t.id for t in remaining] == [young.id]
    assert remaining[0].order == 1
    # A swept executor is not replaced.
    assert facade.list_executing() is None
    assert_invariants(facade)


def test_sweep_uses_creation_time_not_updates(facade: OperationFacade, clock: FakeClock) -> None:
    task = facade.add_task("touched often")
    clock.advance(23 * HOUR)
    facade.classify_task(task.id, Category.WORK)
    clock.advance(2 * HOUR)

    facade.cleanup_expired_tasks()

    assert facade.get_task(task.id) is None


def test_sweep_removes_done_tasks_too(facade: OperationFacade, clock: FakeClock) -> None:
    task = facade.add_task("finished")
    facade.classify_task(task.id, Category.LIFE)
    facade.complete_task(task.id)
    clock.advance(25 * HOUR)

    facade.cleanup_expired_tasks()

    assert facade.snapshot() == []


def test_exactly_24h_is_kept(facade: OperationFacade, clock: FakeClock) -> None:
    task = facade.add_task("boundary")
    clock.advance(24 * HOUR)

    facade.cleanup_expired_tasks()

    assert facade.get_task(task.id) is not None


def test_sweep_is_idempotent(facade: OperationFacade, clock: FakeClock) -> None:
    for title in ("a", "b", "c"):
        facade.add_task(title)
        clock.advance(10 * HOUR)

    facade.cleanup_expired_tasks()
    first = facade.snapshot()
    facade.cleanup_expired_tasks()

    assert facade.snapshot() == first
    assert [t.title for t in facade.list_by_category(Category.INBOX)] == ["b", "c"]
    assert_invariants(facade)


def test_custom_horizon(clock: FakeClock) -> None:
    facade = OperationFacade(clock=clock, expiry_horizon_seconds=HOUR)
    facade.add_task("short lived")
    clock.advance(2 * HOUR)

    facade.cleanup_expired_tasks()

    assert facade.snapshot() == []
