# src/tidy_todo/tasks/subtask_list.py

from __future__ import annotations

import logging

from ..core.errors import TaskNotFoundError, clean_text
from ..core.feedback import FeedbackDispatcher, FeedbackEvent
from ..core.ports import TodoRepo
from . import ordering
from .commit import Restore, commit_or_log, snapshot_tasks
from .propagation import CompletionPropagationEngine, PropagationDecision
from .task_models import Subtask, Task

logger = logging.getLogger(__name__)


class SubtaskListModel:
    """
    Ordered subtasks of one task.

    Same contract as TaskListModel, scoped to the siblings sharing one parent.
    Toggling a subtask runs completion propagation on the parent.
    """

    def __init__(
        self,
        task: Task,
        store: TodoRepo,
        *,
        feedback: FeedbackDispatcher | None = None,
        engine: CompletionPropagationEngine | None = None,
        rollback_on_commit_failure: bool = False,
    ) -> None:
        self.task = task
        self._store = store
        self._feedback = feedback
        self._engine = engine or CompletionPropagationEngine()
        self._rollback = rollback_on_commit_failure

    # ---- reads ----

    def subtasks(self) -> list[Subtask]:
        return ordering.by_sort_order(self.task.subtasks)

    def get(self, subtask_id: str) -> Subtask:
        for sub in self.task.subtasks:
            if sub.id == subtask_id:
                return sub
        raise TaskNotFoundError(f"subtask {subtask_id} not found in task {self.task.id}")

    def index_of(self, subtask_id: str) -> int:
        for idx, sub in enumerate(self.subtasks()):
            if sub.id == subtask_id:
                return idx
        raise TaskNotFoundError(f"subtask {subtask_id} not found in task {self.task.id}")

    def completed_count(self) -> int:
        return self.task.completed_subtasks_count

    def total_count(self) -> int:
        return self.task.total_subtasks_count

    def progress_percentage(self) -> float:
        return self.task.progress_percentage

    # ---- mutations ----

    def _checkpoint(self) -> Restore | None:
        if not self._rollback:
            return None
        # Parent flag may flip through propagation, so snapshot the whole task.
        return snapshot_tasks([self.task])

    def add(self, text: str) -> Subtask:
        cleaned = clean_text(text, what="subtask text")
        restore = self._checkpoint()

        sub = self._store.create_subtask(self.task, cleaned, sort_order=len(self.task.subtasks))
        self.task.subtasks.append(sub)
        commit_or_log(self._store, "add_subtask", restore)

        logger.info("Subtask added id=%s task=%s order=%s", sub.id, self.task.id, sub.sort_order)
        return sub

    def edit(self, subtask_id: str, text: str) -> Subtask:
        cleaned = clean_text(text, what="subtask text")
        sub = self.get(subtask_id)
        restore = self._checkpoint()

        sub.text = cleaned
        self._store.update(sub)
        commit_or_log(self._store, "edit_subtask", restore)
        return sub

    def delete(self, subtask_id: str) -> None:
        """Remove one subtask. Siblings keep their sort_order (gaps are allowed)."""
        sub = self.get(subtask_id)
        restore = self._checkpoint()

        self.task.subtasks.remove(sub)
        self._store.delete_subtask(sub.id)
        commit_or_log(self._store, "delete_subtask", restore)
        logger.info("Subtask deleted id=%s task=%s", sub.id, self.task.id)

    def reorder(self, source_index: int, target_index: int) -> list[Subtask]:
        moved = ordering.move(self.subtasks(), source_index, target_index)
        restore = self._checkpoint()

        changed = ordering.renumber(moved)
        self.task.subtasks[:] = moved
        if changed:
            self._store.update(*changed)

        if commit_or_log(self._store, "reorder_subtasks", restore) and self._feedback is not None:
            self._feedback.cue(FeedbackEvent.REORDERED)

        logger.debug(
            "Subtasks reordered task=%s %s -> %s changed=%d",
            self.task.id,
            source_index,
            target_index,
            len(changed),
        )
        return self.subtasks()

    def toggle_completion(self, subtask_id: str) -> bool:
        """Flip one subtask and propagate to the parent. Returns the new subtask state."""
        sub = self.get(subtask_id)
        restore = self._checkpoint()

        was_completed = sub.is_completed
        sub.is_completed = not was_completed
        self._store.update(sub)
        if not commit_or_log(self._store, "toggle_subtask", restore) and restore is not None:
            return sub.is_completed

        decision = self._engine.decide(
            self.task, was_completed=was_completed, is_completed=sub.is_completed
        )
        if decision is PropagationDecision.NONE:
            return sub.is_completed

        restore = self._checkpoint()
        parent = self.task
        parent.is_completed = decision is PropagationDecision.COMPLETE_PARENT
        self._store.update(parent)
        commit_or_log(self._store, f"propagate_{decision.value}", restore)
        logger.info("Parent task=%s %s by subtask=%s", parent.id, decision.value, sub.id)

        if (
            decision is PropagationDecision.COMPLETE_PARENT
            and parent.is_completed
            and self._feedback is not None
        ):
            self._feedback.task_completed(parent.id)

        return sub.is_completed
