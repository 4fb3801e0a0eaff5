# tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path

from .task_models import Category, Task, TaskStatus

logger = logging.getLogger(__name__)


class TaskStore:
    """
    SQLite snapshot store for the task collection.

    The engine keeps the live collection in memory; this store only persists
    and rehydrates it. `save_tasks` replaces the whole table in one transaction.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each method opens its own SQLite connection
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info("TaskStore ready db=%s total=%s", self._db_path, self.count_tasks())

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            # "order" is an SQL keyword, hence order_index.
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    category TEXT NOT NULL DEFAULT 'inbox',
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    order_index INTEGER NOT NULL DEFAULT 1,
                    status TEXT NOT NULL DEFAULT 'active',
                    is_executing INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}

            def add_col(name: str, decl: str) -> None:
                if name in cols:
                    return
                cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} {decl}")
                logger.info("TaskStore migration: added column %s", name)

            add_col("category", "TEXT NOT NULL DEFAULT 'inbox'")
            add_col("updated_at", "REAL NOT NULL DEFAULT 0")
            add_col("order_index", "INTEGER NOT NULL DEFAULT 1")
            add_col("status", "TEXT NOT NULL DEFAULT 'active'")
            add_col("is_executing", "INTEGER NOT NULL DEFAULT 0")

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_category ON tasks(category, status, order_index)")

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        created_at = float(row["created_at"] or 0.0)
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            category=Category.from_value(row["category"]) or Category.INBOX,
            created_at=created_at,
            updated_at=float(row["updated_at"] or created_at),
            order=max(1, int(row["order_index"] or 1)),
            status=TaskStatus.from_db(row["status"]),
            is_executing=bool(row["is_executing"]),
        )

    # ---- public API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def load_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY category, order_index, created_at")
            tasks = [self._row_to_task(r) for r in cur.fetchall()]
            logger.debug("TaskStore loaded %d task(s)", len(tasks))
            return tasks
        finally:
            conn.close()

    def save_tasks(self, tasks: Iterable[Task]) -> None:
        rows = [
            (
                t.id,
                t.title,
                t.category.value,
                float(t.created_at),
                float(t.updated_at),
                int(t.order),
                t.status.value,
                1 if t.is_executing else 0,
            )
            for t in tasks
        ]

        conn = self._get_conn()
        try:
            with conn:
                conn.execute("DELETE FROM tasks")
                conn.executemany(
                    """
                    INSERT INTO tasks(
                        id, title, category, created_at, updated_at,
                        order_index, status, is_executing
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
            logger.debug("TaskStore saved %d task(s)", len(rows))
        finally:
            conn.close()
