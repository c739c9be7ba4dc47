# src/tidy_todo/tasks/task_models.py

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import NamedTuple


def new_id() -> str:
    return uuid.uuid4().hex


class TaskFilter(StrEnum):
    """Listing filter (all / active / completed)."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, raw: str | None) -> TaskFilter:
        if not raw:
            return cls.ALL
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.ALL

    def matches(self, task: Task) -> bool:
        if self is TaskFilter.ACTIVE:
            return not task.is_completed
        if self is TaskFilter.COMPLETED:
            return task.is_completed
        return True


class CompletionState(StrEnum):
    """
    Derived completion state of a task.

    Never stored: computed from is_completed and the subtask set.
    """

    NO_SUBTASKS = "no_subtasks"
    HAS_SUBTASKS_INCOMPLETE = "has_subtasks_incomplete"
    HAS_SUBTASKS_COMPLETE = "has_subtasks_complete"


@dataclass(slots=True, eq=False)
class Subtask:
    id: str
    parent_id: str  # non-owning back-reference
    text: str
    is_completed: bool = False
    created_at: float = field(default_factory=time.time)
    sort_order: int = 0


@dataclass(slots=True, eq=False)
class Task:
    id: str
    text: str
    is_completed: bool = False
    created_at: float = field(default_factory=time.time)
    sort_order: int = 0

    # Owned, kept in ascending sort_order.
    subtasks: list[Subtask] = field(default_factory=list)

    @property
    def completed_subtasks_count(self) -> int:
        return sum(1 for s in self.subtasks if s.is_completed)

    @property
    def total_subtasks_count(self) -> int:
        return len(self.subtasks)

    @property
    def progress_percentage(self) -> float:
        total = self.total_subtasks_count
        if total == 0:
            return 0.0
        return self.completed_subtasks_count / total


class TaskCounts(NamedTuple):
    active: int
    completed: int
    total: int


@dataclass(frozen=True, slots=True)
class TaskCompleted:
    """Emitted once per false -> true transition of a task."""

    task_id: str
