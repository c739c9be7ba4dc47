# src/tidy_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- loads user preferences,
- wires the store, feedback sinks and list models into AppState.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.feedback import FeedbackDispatcher
from ..core.ports import CelebrationSink, CueSink
from ..core.state import AppState
from ..preferences import PreferencesStore
from ..tasks.drag_drop import DropCoordinator
from ..tasks.task_list import TaskListModel
from ..tasks.task_store import TodoStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.preferences_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    on_celebrate: CelebrationSink | None = None,
    on_cue: CueSink | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    prefs_store = PreferencesStore(settings.preferences_path)
    prefs = prefs_store.load()

    # Dispatcher reads the flags from the live Preferences object,
    # so /prefs changes apply immediately.
    feedback = FeedbackDispatcher(prefs, on_celebrate=on_celebrate, on_cue=on_cue)

    store = TodoStore(settings.tasks_db_path)
    tasks = TaskListModel(
        store,
        feedback=feedback,
        rollback_on_commit_failure=bool(getattr(settings, "rollback_on_commit_failure", False)),
    )
    logger.info("Loaded %d task(s) from %s", len(tasks), settings.tasks_db_path)

    return AppState(
        settings=settings,
        store=store,
        tasks=tasks,
        drops=DropCoordinator(tasks),
        feedback=feedback,
        preferences=prefs,
        preferences_store=prefs_store,
    )
