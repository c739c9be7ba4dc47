# src/tidy_todo/tasks/drag_drop.py

from __future__ import annotations

"""
Drag-and-drop reordering.

A drop carries a payload that may only be available asynchronously
(e.g. a clipboard/provider read). The coordinator awaits it, maps it to a
domain id, then runs the ordinary synchronous reorder. Nothing after the
await yields to the event loop, so only one mutation is ever in flight.
"""

import logging
from collections.abc import Awaitable

from ..core.errors import TaskNotFoundError
from .task_list import TaskListModel
from .task_models import Subtask, Task

logger = logging.getLogger(__name__)

TASK_PREFIX = "task:"
SUBTASK_PREFIX = "subtask:"

PayloadSource = str | Awaitable[str | None]


def drag_payload(item: Task | Subtask) -> str:
    """Text payload put on the drag pasteboard for an item."""
    prefix = TASK_PREFIX if isinstance(item, Task) else SUBTASK_PREFIX
    return f"{prefix}{item.id}"


def parse_payload(raw: str | None, *, prefix: str) -> str | None:
    if not raw:
        return None
    raw = raw.strip()
    if not raw.startswith(prefix):
        return None
    item_id = raw[len(prefix) :].strip()
    return item_id or None


class DropCoordinator:
    def __init__(self, tasks: TaskListModel) -> None:
        self._tasks = tasks

    @staticmethod
    async def _resolve(source: PayloadSource) -> str | None:
        if isinstance(source, str):
            return source
        try:
            return await source
        except Exception:
            logger.exception("Failed to resolve drop payload")
            return None

    async def drop_task(self, source: PayloadSource, target_task_id: str) -> bool:
        """
        Drop a dragged task onto `target_task_id`.

        Returns True if a reorder was performed.
        """
        dragged_id = parse_payload(await self._resolve(source), prefix=TASK_PREFIX)
        if dragged_id is None:
            logger.debug("Ignoring drop: payload is not a task")
            return False

        try:
            source_index = self._tasks.index_of(dragged_id)
            target_index = self._tasks.index_of(target_task_id)
        except TaskNotFoundError:
            logger.debug("Ignoring drop: task vanished dragged=%s target=%s", dragged_id, target_task_id)
            return False

        self._tasks.reorder(source_index, target_index)
        return True

    async def drop_subtask(
        self,
        source: PayloadSource,
        parent_task_id: str,
        target_subtask_id: str,
    ) -> bool:
        """
        Drop a dragged subtask onto a sibling.

        Subtasks dragged from another task are ignored.
        """
        dragged_id = parse_payload(await self._resolve(source), prefix=SUBTASK_PREFIX)
        if dragged_id is None:
            logger.debug("Ignoring drop: payload is not a subtask")
            return False

        try:
            siblings = self._tasks.subtasks(parent_task_id)
            source_index = siblings.index_of(dragged_id)
            target_index = siblings.index_of(target_subtask_id)
        except TaskNotFoundError:
            logger.debug(
                "Ignoring drop: subtask=%s is not a child of task=%s", dragged_id, parent_task_id
            )
            return False

        siblings.reorder(source_index, target_index)
        return True
