# src/tidy_todo/tasks/task_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from pathlib import Path
from typing import cast

from ..core.errors import StoreError
from .task_models import Subtask, Task, new_id

logger = logging.getLogger(__name__)

# Staged operation kinds.
_UPSERT_TASK = "upsert_task"
_UPSERT_SUBTASK = "upsert_subtask"
_DELETE_TASK = "delete_task"
_DELETE_SUBTASK = "delete_subtask"


class TodoStore:
    """
    SQLite store for tasks and subtasks.

    Works as a small unit of work:
    - create_*/update/delete_* only stage changes in memory,
    - commit() flushes everything staged in one SQLite transaction,
    - a failed commit keeps the staged changes, so the next successful
      commit brings the database back in sync.

    Writes are upserts and deletes by id, so replaying them is harmless.

    Schema is migration-safe the same way as the other stores:
    - create tables if missing
    - PRAGMA table_info to detect missing columns
    - ALTER TABLE ADD COLUMN only when needed

    Each call opens its own short-lived SQLite connection.
    """

    def __init__(self, db_path: str | Path = "todo.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        # key -> (kind, payload); dict keeps staging order.
        self._pending: dict[tuple[str, str], tuple[str, Task | Subtask | str]] = {}
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StoreError:
            total = -1
        logger.info("TodoStore ready db=%s tasks=%s", self._db_path, total)

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
        conn.execute("PRAGMA foreign_keys=ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    text TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    sort_order INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS subtasks (
                    id TEXT PRIMARY KEY,
                    task_id TEXT NOT NULL REFERENCES tasks(id) ON DELETE CASCADE,
                    text TEXT NOT NULL,
                    is_completed INTEGER NOT NULL DEFAULT 0,
                    created_at REAL NOT NULL,
                    sort_order INTEGER NOT NULL DEFAULT 0
                )
                """
            )

            def add_missing(table: str, columns: dict[str, str]) -> None:
                cur.execute(f"PRAGMA table_info({table})")
                existing = {row["name"] for row in cur.fetchall()}
                for name, decl in columns.items():
                    if name in existing:
                        continue
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    logger.info("TodoStore migration: added column %s.%s", table, name)

            # Older files may predate manual ordering.
            add_missing(
                "tasks",
                {
                    "is_completed": "INTEGER NOT NULL DEFAULT 0",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "sort_order": "INTEGER NOT NULL DEFAULT 0",
                },
            )
            add_missing(
                "subtasks",
                {
                    "is_completed": "INTEGER NOT NULL DEFAULT 0",
                    "created_at": "REAL NOT NULL DEFAULT 0",
                    "sort_order": "INTEGER NOT NULL DEFAULT 0",
                },
            )

            cur.execute("CREATE INDEX IF NOT EXISTS idx_tasks_order ON tasks(sort_order)")
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_subtasks_parent_order ON subtasks(task_id, sort_order)"
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            text=str(row["text"] or ""),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
            sort_order=int(row["sort_order"] or 0),
        )

    @staticmethod
    def _row_to_subtask(row: sqlite3.Row) -> Subtask:
        return Subtask(
            id=str(row["id"]),
            parent_id=str(row["task_id"]),
            text=str(row["text"] or ""),
            is_completed=bool(row["is_completed"]),
            created_at=float(row["created_at"] or 0.0),
            sort_order=int(row["sort_order"] or 0),
        )

    # ---- staging ----

    def create_task(self, text: str, *, sort_order: int) -> Task:
        task = Task(id=new_id(), text=text, sort_order=int(sort_order))
        self._pending[(_UPSERT_TASK, task.id)] = (_UPSERT_TASK, task)
        return task

    def create_subtask(self, task: Task, text: str, *, sort_order: int) -> Subtask:
        sub = Subtask(id=new_id(), parent_id=task.id, text=text, sort_order=int(sort_order))
        self._pending[(_UPSERT_SUBTASK, sub.id)] = (_UPSERT_SUBTASK, sub)
        return sub

    def update(self, *entities: Task | Subtask) -> None:
        """Stage the current field values of the given entities."""
        for ent in entities:
            if isinstance(ent, Task):
                self._pending[(_UPSERT_TASK, ent.id)] = (_UPSERT_TASK, ent)
            else:
                self._pending[(_UPSERT_SUBTASK, ent.id)] = (_UPSERT_SUBTASK, ent)

    def delete_task(self, task_id: str) -> None:
        """Stage a task delete; its subtasks go with it (ON DELETE CASCADE)."""
        self._pending.pop((_UPSERT_TASK, task_id), None)
        for key, (kind, payload) in list(self._pending.items()):
            if kind == _UPSERT_SUBTASK and isinstance(payload, Subtask) and payload.parent_id == task_id:
                del self._pending[key]
        self._pending[(_DELETE_TASK, task_id)] = (_DELETE_TASK, task_id)

    def delete_subtask(self, subtask_id: str) -> None:
        self._pending.pop((_UPSERT_SUBTASK, subtask_id), None)
        self._pending[(_DELETE_SUBTASK, subtask_id)] = (_DELETE_SUBTASK, subtask_id)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def discard_pending(self) -> None:
        if self._pending:
            logger.debug("Discarding %d staged change(s)", len(self._pending))
        self._pending.clear()

    def commit(self) -> None:
        """
        Flush staged changes in a single transaction.

        Raises StoreError on failure; staged changes are kept for the next commit.
        """
        if not self._pending:
            return

        ops = list(self._pending.values())
        try:
            conn = self._get_conn()
        except sqlite3.Error as exc:
            raise StoreError(f"cannot open {self._db_path}: {exc}") from exc

        try:
            cur = conn.cursor()
            for kind, payload in ops:
                if kind == _UPSERT_TASK:
                    task = cast(Task, payload)
                    cur.execute(
                        """
                        INSERT INTO tasks(id, text, is_completed, created_at, sort_order)
                        VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            text = excluded.text,
                            is_completed = excluded.is_completed,
                            sort_order = excluded.sort_order
                        """,
                        (
                            task.id,
                            task.text,
                            int(task.is_completed),
                            float(task.created_at),
                            int(task.sort_order),
                        ),
                    )
                elif kind == _UPSERT_SUBTASK:
                    sub = cast(Subtask, payload)
                    cur.execute(
                        """
                        INSERT INTO subtasks(id, task_id, text, is_completed, created_at, sort_order)
                        VALUES (?, ?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            text = excluded.text,
                            is_completed = excluded.is_completed,
                            sort_order = excluded.sort_order
                        """,
                        (
                            sub.id,
                            sub.parent_id,
                            sub.text,
                            int(sub.is_completed),
                            float(sub.created_at),
                            int(sub.sort_order),
                        ),
                    )
                elif kind == _DELETE_TASK:
                    cur.execute("DELETE FROM tasks WHERE id = ?", (payload,))
                elif kind == _DELETE_SUBTASK:
                    cur.execute("DELETE FROM subtasks WHERE id = ?", (payload,))
            conn.commit()
        except sqlite3.Error as exc:
            with contextlib.suppress(sqlite3.Error):
                conn.rollback()
            raise StoreError(f"commit failed ({len(ops)} change(s)): {exc}") from exc
        finally:
            conn.close()

        self._pending.clear()
        logger.debug("Committed %d change(s)", len(ops))

    # ---- reads ----

    def count_tasks(self) -> int:
        try:
            conn = self._get_conn()
            try:
                (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
                return int(n)
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def count_subtasks(self, task_id: str | None = None) -> int:
        try:
            conn = self._get_conn()
            try:
                if task_id is None:
                    row = conn.execute("SELECT COUNT(*) FROM subtasks").fetchone()
                else:
                    row = conn.execute(
                        "SELECT COUNT(*) FROM subtasks WHERE task_id = ?", (task_id,)
                    ).fetchone()
                return int(row[0])
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

    def fetch_tasks(self) -> list[Task]:
        """All tasks in ascending sort_order, each with its subtasks in ascending sort_order."""
        try:
            conn = self._get_conn()
            try:
                task_rows = conn.execute(
                    "SELECT * FROM tasks ORDER BY sort_order ASC, created_at ASC"
                ).fetchall()
                sub_rows = conn.execute(
                    "SELECT * FROM subtasks ORDER BY task_id, sort_order ASC, created_at ASC"
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc

        tasks = [self._row_to_task(r) for r in task_rows]
        by_id = {t.id: t for t in tasks}
        for r in sub_rows:
            parent = by_id.get(str(r["task_id"]))
            if parent is not None:
                parent.subtasks.append(self._row_to_subtask(r))
        return tasks

    def fetch_subtasks(self, task_id: str) -> list[Subtask]:
        try:
            conn = self._get_conn()
            try:
                rows = conn.execute(
                    """
                    SELECT *
                    FROM subtasks
                    WHERE task_id = ?
                    ORDER BY sort_order ASC, created_at ASC
                    """,
                    (task_id,),
                ).fetchall()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise StoreError(str(exc)) from exc
        return [self._row_to_subtask(r) for r in rows]
