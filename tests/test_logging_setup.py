# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from tidy_todo.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    "name,level,shown",
    [
        ("tidy_todo.cli.main", logging.INFO, True),
        ("tidy_todo.connectors.console_connector", logging.DEBUG, True),
        ("tidy_todo.tasks.task_store", logging.INFO, False),
        ("tidy_todo.tasks.task_store", logging.WARNING, True),
        ("tidy_todo.tasks.drag_drop", logging.DEBUG, False),
        ("tidy_todo.tasks.task_list", logging.INFO, False),
        ("tidy_todo.tasks.commit", logging.INFO, True),
        ("tidy_todo.preferences", logging.DEBUG, False),
        ("tidy_todo_extra", logging.WARNING, False),
        ("py.warnings", logging.WARNING, False),
        ("py.warnings", logging.ERROR, True),
        ("sqlite_helper", logging.WARNING, False),
    ],
)
def test_console_filter_floors(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
