# src/tidy_todo/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..preferences import Preferences, PreferencesStore
from ..tasks.drag_drop import DropCoordinator
from ..tasks.task_list import TaskListModel
from ..tasks.task_models import TaskFilter
from ..tasks.task_store import TodoStore
from .feedback import FeedbackDispatcher


@dataclass
class AppState:
    # Settings object (config.Settings or a test namespace).
    settings: Any

    store: TodoStore
    tasks: TaskListModel
    drops: DropCoordinator
    feedback: FeedbackDispatcher

    preferences: Preferences
    preferences_store: PreferencesStore

    # Current listing filter of the front-end.
    task_filter: TaskFilter = TaskFilter.ALL
