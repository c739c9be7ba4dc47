# src/tidy_todo/core/feedback.py

"""
Side-channel feedback for the presentation layer.

The models report what happened (task completed, item added, ...);
this dispatcher checks the user's flags and forwards:
- TaskCompleted events to the celebration sink,
- sound / haptic cues to the cue sink.

Sinks are injected at construction; there is no process-wide instance.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from ..tasks.task_models import TaskCompleted
from .ports import CelebrationSink, CueSink, FeedbackSettings

logger = logging.getLogger(__name__)


class FeedbackEvent(StrEnum):
    ADDED = "added"
    DELETED = "deleted"
    REORDERED = "reordered"
    COMPLETED = "completed"


class CueChannel(StrEnum):
    SOUND = "sound"
    HAPTIC = "haptic"


@dataclass(frozen=True, slots=True)
class FeedbackCue:
    event: FeedbackEvent
    channel: CueChannel
    name: str


_SOUNDS: dict[FeedbackEvent, str] = {
    FeedbackEvent.ADDED: "Glass",
    FeedbackEvent.DELETED: "Funk",
    FeedbackEvent.REORDERED: "Pop",
    FeedbackEvent.COMPLETED: "Glass",
}

_HAPTICS: dict[FeedbackEvent, str] = {
    FeedbackEvent.REORDERED: "alignment",
    FeedbackEvent.COMPLETED: "level_change",
}


def _safe_call(sink: Callable[[Any], None], payload: Any) -> None:
    try:
        sink(payload)
    except Exception:
        logger.exception("Feedback sink failed payload=%r", payload)


class FeedbackDispatcher:
    def __init__(
        self,
        settings: FeedbackSettings,
        *,
        on_celebrate: CelebrationSink | None = None,
        on_cue: CueSink | None = None,
    ) -> None:
        self.settings = settings
        self._on_celebrate = on_celebrate
        self._on_cue = on_cue

    def task_completed(self, task_id: str) -> None:
        """A task went from incomplete to complete (directly or via its subtasks)."""
        logger.debug("Task completed task_id=%s", task_id)
        if self._on_celebrate is not None and self.settings.celebration_enabled:
            _safe_call(self._on_celebrate, TaskCompleted(task_id=task_id))
        self.cue(FeedbackEvent.COMPLETED)

    def cue(self, event: FeedbackEvent) -> None:
        if self._on_cue is None:
            return

        sound = _SOUNDS.get(event)
        if sound and self.settings.sound_enabled:
            _safe_call(self._on_cue, FeedbackCue(event, CueChannel.SOUND, sound))

        haptic = _HAPTICS.get(event)
        if haptic and self.settings.haptic_enabled:
            _safe_call(self._on_cue, FeedbackCue(event, CueChannel.HAPTIC, haptic))
