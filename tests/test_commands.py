# tests/test_commands.py

from __future__ import annotations

from tidy_todo.cli.commands import CommandRegistry, registry
from tidy_todo.core.state import AppState
from tidy_todo.tasks.task_models import TaskFilter

from .fakes import RecordingSinks


def test_command_registry_routes_and_aliases(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"n": 0}

    def handler(state, args):
        called["n"] += 1
        return " ".join(args)

    reg.register("echo", handler, "echo", aliases=["e"])

    assert reg.handle(state, "/echo a b") == "a b"
    assert reg.handle(state, "/E c") == "c"
    assert called["n"] == 2


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    assert registry.handle(state, "hello") is None
    assert "Unknown command" in (registry.handle(state, "/nope") or "")
    assert "Empty command" in (registry.handle(state, "/") or "")


def test_add_list_move_and_stats(state: AppState) -> None:
    for text in ("alpha", "beta", "gamma"):
        registry.handle(state, f"/add {text}")

    reply = registry.handle(state, "/move 3 1") or ""
    assert reply.splitlines()[0].endswith("gamma")
    assert [t.text for t in state.tasks.tasks()] == ["gamma", "alpha", "beta"]

    registry.handle(state, "/done 2")
    assert registry.handle(state, "/stats") == "Active: 2  Completed: 1  Total: 3"

    listing = registry.handle(state, "/list completed") or ""
    assert state.task_filter is TaskFilter.COMPLETED
    assert "alpha" in listing and "beta" not in listing


def test_errors_become_replies(state: AppState) -> None:
    assert (registry.handle(state, "/add    ") or "").startswith("Error:")
    assert (registry.handle(state, "/done 7") or "").startswith("Error:")
    assert (registry.handle(state, "/move 1 x") or "").startswith("Error:")
    assert len(state.tasks) == 0


def test_subtask_commands_propagate(state: AppState, sinks: RecordingSinks) -> None:
    registry.handle(state, "/add plan trip")
    registry.handle(state, "/sub 1 add book flights")
    registry.handle(state, "/sub 1 add book hotel")

    registry.handle(state, "/sub 1 done 1")
    reply = registry.handle(state, "/sub 1 done 2") or ""

    assert "progress: 100%" in reply
    assert state.tasks.tasks()[0].is_completed is True
    assert len(sinks.completed) == 1

    registry.handle(state, "/sub 1 move 2 1")
    assert [s.text for s in state.tasks.subtasks(state.tasks.tasks()[0].id).subtasks()] == [
        "book hotel",
        "book flights",
    ]


def test_prefs_command_updates_and_persists(state: AppState) -> None:
    assert registry.handle(state, "/prefs celebration_enabled off") == "celebration_enabled = False"
    assert state.preferences_store.load().celebration_enabled is False
    assert "Unknown preference" in (registry.handle(state, "/prefs volume 3") or "")
    assert "Bad value" in (registry.handle(state, "/prefs font_size huge") or "")

    registry.handle(state, "/prefs reset")
    assert state.preferences.celebration_enabled is True
