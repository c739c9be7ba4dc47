# src/tidy_todo/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The models depend on Protocols instead of concrete implementations.
This keeps the store and the presentation side swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_models import Subtask, Task, TaskCompleted
    from .feedback import FeedbackCue


CelebrationSink = Callable[["TaskCompleted"], None]
# Receives TaskCompleted events; fire-and-forget.

CueSink = Callable[["FeedbackCue"], None]
# Receives sound/haptic requests; the presentation layer decides how to play them.


class FeedbackSettings(Protocol):
    """Flags consulted only for side-channel events, never for state transitions."""

    celebration_enabled: bool
    sound_enabled: bool
    haptic_enabled: bool


class TodoRepo(Protocol):
    # Staging
    def create_task(self, text: str, *, sort_order: int) -> Task: ...
    def create_subtask(self, task: Task, text: str, *, sort_order: int) -> Subtask: ...
    def update(self, *entities: Task | Subtask) -> None: ...
    def delete_task(self, task_id: str) -> None: ...
    def delete_subtask(self, subtask_id: str) -> None: ...

    # Unit of work
    def commit(self) -> None: ...
    def discard_pending(self) -> None: ...

    # Ordered reads
    def fetch_tasks(self) -> list[Task]: ...
    def fetch_subtasks(self, task_id: str) -> list[Subtask]: ...
