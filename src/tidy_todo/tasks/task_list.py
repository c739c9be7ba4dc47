# src/tidy_todo/tasks/task_list.py

from __future__ import annotations

import logging

from ..core.errors import TaskNotFoundError, clean_text
from ..core.feedback import FeedbackDispatcher, FeedbackEvent
from ..core.ports import TodoRepo
from . import ordering
from .commit import Restore, commit_or_log, snapshot_tasks
from .propagation import CompletionPropagationEngine
from .subtask_list import SubtaskListModel
from .task_models import Task, TaskCounts, TaskFilter

logger = logging.getLogger(__name__)


class TaskListModel:
    """
    The ordered task list.

    All mutations run on the caller's thread:
    mutate in memory -> stage in the store -> commit once.
    Derived values (counts, filtered listings) are recomputed on every read.

    Commit failures are logged and do not undo the in-memory change unless
    `rollback_on_commit_failure` is set.
    """

    def __init__(
        self,
        store: TodoRepo,
        *,
        feedback: FeedbackDispatcher | None = None,
        engine: CompletionPropagationEngine | None = None,
        rollback_on_commit_failure: bool = False,
    ) -> None:
        self._store = store
        self._feedback = feedback
        self._engine = engine or CompletionPropagationEngine()
        self._rollback = rollback_on_commit_failure

        self._tasks: list[Task] = []
        self._subtask_models: dict[str, SubtaskListModel] = {}
        self.reload()

    def reload(self) -> None:
        """Re-read everything from the store (drops cached subtask models)."""
        self._tasks = ordering.by_sort_order(self._store.fetch_tasks())
        self._subtask_models.clear()
        logger.debug("Task list loaded: %d task(s)", len(self._tasks))

    # ---- reads ----

    def tasks(self, task_filter: TaskFilter = TaskFilter.ALL) -> list[Task]:
        """Current listing in ascending sort_order, optionally filtered."""
        return [t for t in ordering.by_sort_order(self._tasks) if task_filter.matches(t)]

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: str) -> Task:
        for task in self._tasks:
            if task.id == task_id:
                return task
        raise TaskNotFoundError(f"task {task_id} not found")

    def index_of(self, task_id: str) -> int:
        for idx, task in enumerate(self.tasks()):
            if task.id == task_id:
                return idx
        raise TaskNotFoundError(f"task {task_id} not found")

    def counts(self) -> TaskCounts:
        completed = sum(1 for t in self._tasks if t.is_completed)
        total = len(self._tasks)
        return TaskCounts(active=total - completed, completed=completed, total=total)

    def subtasks(self, task_id: str) -> SubtaskListModel:
        model = self._subtask_models.get(task_id)
        if model is None:
            model = SubtaskListModel(
                self.get(task_id),
                self._store,
                feedback=self._feedback,
                engine=self._engine,
                rollback_on_commit_failure=self._rollback,
            )
            self._subtask_models[task_id] = model
        return model

    # ---- mutations ----

    def _checkpoint(self) -> Restore | None:
        return snapshot_tasks(self._tasks) if self._rollback else None

    def _cue(self, event: FeedbackEvent) -> None:
        if self._feedback is not None:
            self._feedback.cue(event)

    def add(self, text: str) -> Task:
        cleaned = clean_text(text, what="task text")
        restore = self._checkpoint()

        task = self._store.create_task(cleaned, sort_order=len(self._tasks))
        self._tasks.append(task)
        if commit_or_log(self._store, "add_task", restore):
            self._cue(FeedbackEvent.ADDED)

        logger.info("Task added id=%s order=%s", task.id, task.sort_order)
        return task

    def edit(self, task_id: str, text: str) -> Task:
        cleaned = clean_text(text, what="task text")
        task = self.get(task_id)
        restore = self._checkpoint()

        task.text = cleaned
        self._store.update(task)
        commit_or_log(self._store, "edit_task", restore)
        return task

    def delete(self, task_id: str) -> None:
        """Remove a task and its subtasks. Remaining tasks keep their sort_order."""
        task = self.get(task_id)
        restore = self._checkpoint()

        self._tasks.remove(task)
        self._subtask_models.pop(task_id, None)
        self._store.delete_task(task.id)
        if commit_or_log(self._store, "delete_task", restore):
            self._cue(FeedbackEvent.DELETED)

        logger.info("Task deleted id=%s subtasks=%d", task.id, len(task.subtasks))

    def reorder(self, source_index: int, target_index: int) -> list[Task]:
        """
        Move the task at source_index (in the current listing) towards target_index.

        Every task is renumbered 0..n-1 afterwards, which also closes any gaps
        left by earlier deletes. One commit per call.
        """
        moved = ordering.move(self.tasks(), source_index, target_index)
        restore = self._checkpoint()

        changed = ordering.renumber(moved)
        self._tasks[:] = moved
        if changed:
            self._store.update(*changed)

        if commit_or_log(self._store, "reorder_tasks", restore):
            self._cue(FeedbackEvent.REORDERED)

        logger.debug(
            "Tasks reordered %s -> %s changed=%d", source_index, target_index, len(changed)
        )
        return self.tasks()

    def toggle_completion(self, task_id: str) -> bool:
        """
        Flip a task's completion flag. Returns the new state.

        Allowed even when subtasks disagree; the next subtask toggle may override it.
        """
        task = self.get(task_id)
        restore = self._checkpoint()

        was_completed = task.is_completed
        task.is_completed = not was_completed
        self._store.update(task)
        commit_or_log(self._store, "toggle_task", restore)

        # A rolled-back toggle leaves is_completed unchanged, so no event.
        if not was_completed and task.is_completed and self._feedback is not None:
            self._feedback.task_completed(task.id)

        return task.is_completed
