# src/tidy_todo/tasks/commit.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..core.errors import StoreError
from ..core.ports import TodoRepo
from .task_models import Task

logger = logging.getLogger(__name__)

Restore = Callable[[], None]


def snapshot_tasks(tasks: list[Task]) -> Restore:
    """Capture the list order and every mutable field; the returned callable puts them back."""
    order = list(tasks)
    saved = [
        (
            t,
            t.text,
            t.is_completed,
            t.sort_order,
            list(t.subtasks),
            [(s, s.text, s.is_completed, s.sort_order) for s in t.subtasks],
        )
        for t in tasks
    ]

    def restore() -> None:
        tasks[:] = order
        for task, text, done, order_value, subs, sub_fields in saved:
            task.text = text
            task.is_completed = done
            task.sort_order = order_value
            task.subtasks[:] = subs
            for sub, s_text, s_done, s_order in sub_fields:
                sub.text = s_text
                sub.is_completed = s_done
                sub.sort_order = s_order

    return restore


def commit_or_log(store: TodoRepo, action: str, restore: Restore | None = None) -> bool:
    """
    Commit staged changes. Failures are logged, never raised.

    Without `restore` the in-memory mutation stays and the staged writes are
    retried by the next commit. With `restore` the staged writes are dropped
    and the in-memory state is put back.
    """
    try:
        store.commit()
        return True
    except StoreError:
        logger.exception("Commit failed action=%s", action)
        if restore is not None:
            store.discard_pending()
            restore()
            logger.info("Rolled back in-memory state action=%s", action)
        return False
