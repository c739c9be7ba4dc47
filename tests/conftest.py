# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from tidy_todo.cli.bootstrap import create_initial_state
from tidy_todo.core.feedback import FeedbackDispatcher
from tidy_todo.core.state import AppState
from tidy_todo.preferences import Preferences
from tidy_todo.tasks.task_list import TaskListModel
from tidy_todo.tasks.task_store import TodoStore

from .fakes import FlakyStore, RecordingSinks


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="tidy-test",
        log_level="DEBUG",
        console_enabled=False,
        rollback_on_commit_failure=False,
        data_dir=tmp_path,
        tasks_db_path=tmp_path / "todo.sqlite3",
        preferences_path=tmp_path / "preferences.json",
    )


@pytest.fixture()
def store(tmp_path: Path) -> FlakyStore:
    """Real SQLite store (its correctness is part of what we test) with injectable commit failures."""
    return FlakyStore(tmp_path / "todo.sqlite3")


@pytest.fixture()
def sinks() -> RecordingSinks:
    return RecordingSinks()


@pytest.fixture()
def prefs() -> Preferences:
    return Preferences()


@pytest.fixture()
def feedback(prefs: Preferences, sinks: RecordingSinks) -> FeedbackDispatcher:
    return FeedbackDispatcher(prefs, on_celebrate=sinks.celebrate, on_cue=sinks.cue)


@pytest.fixture()
def model(store: TodoStore, feedback: FeedbackDispatcher) -> TaskListModel:
    return TaskListModel(store, feedback=feedback)


@pytest.fixture()
def state(settings: SimpleNamespace, sinks: RecordingSinks) -> AppState:
    return create_initial_state(settings=settings, on_celebrate=sinks.celebrate, on_cue=sinks.cue)
