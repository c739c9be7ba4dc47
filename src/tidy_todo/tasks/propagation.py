# src/tidy_todo/tasks/propagation.py

from __future__ import annotations

"""
Subtask -> parent completion propagation.

Pure decision logic: given one subtask transition, decide whether the parent
task's completion flag must flip. Applying the decision (commit, events) is
the subtask list's job.

Rules, evaluated once per subtask toggle:
- uncheck (true -> false) while the parent is complete -> parent becomes incomplete
- check (false -> true) while the parent is incomplete and every subtask
  is now complete -> parent becomes complete, TaskCompleted is emitted

A direct toggle of the parent never touches its subtasks, so there is no
re-evaluation loop.
"""

from enum import StrEnum

from .task_models import CompletionState, Task


class PropagationDecision(StrEnum):
    NONE = "none"
    COMPLETE_PARENT = "complete_parent"
    UNCOMPLETE_PARENT = "uncomplete_parent"


class CompletionPropagationEngine:
    @staticmethod
    def state_of(task: Task) -> CompletionState:
        if not task.subtasks:
            return CompletionState.NO_SUBTASKS
        if all(s.is_completed for s in task.subtasks):
            return CompletionState.HAS_SUBTASKS_COMPLETE
        return CompletionState.HAS_SUBTASKS_INCOMPLETE

    def decide(self, parent: Task, *, was_completed: bool, is_completed: bool) -> PropagationDecision:
        """`parent.subtasks` must already reflect the transition."""
        if was_completed == is_completed:
            return PropagationDecision.NONE

        if was_completed and not is_completed:
            if parent.is_completed:
                return PropagationDecision.UNCOMPLETE_PARENT
            return PropagationDecision.NONE

        if (
            not parent.is_completed
            and self.state_of(parent) is CompletionState.HAS_SUBTASKS_COMPLETE
        ):
            return PropagationDecision.COMPLETE_PARENT
        return PropagationDecision.NONE
