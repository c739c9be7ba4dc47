# src/tidy_todo/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import TypeVar

from ..core.errors import RangeError, TodoError
from ..core.state import AppState
from ..tasks.task_models import Task, TaskFilter

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CommandRegistry:
    """Simple slash-command registry used by the console front-end (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except TodoError as exc:
            logger.debug("Command /%s rejected: %s", name, exc)
            return f"Error: {exc}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- helpers ----


def _pick(items: Sequence[T], raw: str | None, what: str = "task") -> tuple[int, T]:
    """Resolve a 1-based position typed by the user."""
    try:
        pos = int(raw or "")
    except ValueError:
        raise RangeError(f"expected a {what} number, got {raw!r}") from None
    if not 1 <= pos <= len(items):
        raise RangeError(f"no {what} #{pos} (have {len(items)})")
    return pos - 1, items[pos - 1]


def _position(raw: str | None) -> int:
    try:
        return int(raw or "") - 1
    except ValueError:
        raise RangeError(f"expected a number, got {raw!r}") from None


def _mark(done: bool) -> str:
    return "[x]" if done else "[ ]"


def render_task(pos: int, task: Task, *, with_subtasks: bool = True) -> list[str]:
    line = f"{pos:>3}. {_mark(task.is_completed)} {task.text}"
    if task.subtasks:
        line += f"  ({task.completed_subtasks_count}/{task.total_subtasks_count})"
    out = [line]
    if with_subtasks:
        for i, sub in enumerate(task.subtasks, start=1):
            out.append(f"       {i}) {_mark(sub.is_completed)} {sub.text}")
    return out


def render_listing(state: AppState) -> str:
    listing = state.tasks.tasks()
    shown = [
        (pos, t) for pos, t in enumerate(listing, start=1) if state.task_filter.matches(t)
    ]
    if not shown:
        if state.task_filter is TaskFilter.ACTIVE and listing:
            return "Nothing left to do. Everything is done!"
        if state.task_filter is TaskFilter.COMPLETED:
            return "No completed tasks yet."
        return "No tasks yet. Add one with /add <text>."
    lines: list[str] = []
    for pos, task in shown:
        lines.extend(render_task(pos, task))
    return "\n".join(lines)


# ---- commands ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list               -> current filter
    /list active        -> switch filter (all | active | completed)
    """
    if args:
        state.task_filter = TaskFilter.parse(args[0])
    return f"[{state.task_filter.value}]\n{render_listing(state)}"


def cmd_add(state: AppState, args: list[str]) -> str:
    task = state.tasks.add(" ".join(args))
    return f"Added #{state.tasks.index_of(task.id) + 1}: {task.text}"


def cmd_done(state: AppState, args: list[str]) -> str:
    _, task = _pick(state.tasks.tasks(), args[0] if args else None)
    done = state.tasks.toggle_completion(task.id)
    return f"{_mark(done)} {task.text}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    _, task = _pick(state.tasks.tasks(), args[0] if args else None)
    state.tasks.edit(task.id, " ".join(args[1:]))
    return f"Renamed: {task.text}"


def cmd_del(state: AppState, args: list[str]) -> str:
    _, task = _pick(state.tasks.tasks(), args[0] if args else None)
    state.tasks.delete(task.id)
    return f"Deleted: {task.text}"


def cmd_move(state: AppState, args: list[str]) -> str:
    """/move <from> <to>  (1-based, drag-and-drop semantics)"""
    if len(args) < 2:
        return "Usage: /move <from> <to>"
    state.tasks.reorder(_position(args[0]), _position(args[1]))
    return render_listing(state)


def cmd_sub(state: AppState, args: list[str]) -> str:
    """
    /sub <n>                     -> show subtasks of task n
    /sub <n> add <text>
    /sub <n> done <m>
    /sub <n> edit <m> <text>
    /sub <n> del <m>
    /sub <n> move <from> <to>
    """
    pos, task = _pick(state.tasks.tasks(), args[0] if args else None)
    subs = state.tasks.subtasks(task.id)
    action = args[1].lower() if len(args) > 1 else ""
    rest = args[2:]

    if action == "add":
        sub = subs.add(" ".join(rest))
        return f"Added subtask to #{pos + 1}: {sub.text}"
    if action == "done":
        _, sub = _pick(subs.subtasks(), rest[0] if rest else None, "subtask")
        subs.toggle_completion(sub.id)
    elif action == "edit":
        _, sub = _pick(subs.subtasks(), rest[0] if rest else None, "subtask")
        subs.edit(sub.id, " ".join(rest[1:]))
    elif action == "del":
        _, sub = _pick(subs.subtasks(), rest[0] if rest else None, "subtask")
        subs.delete(sub.id)
    elif action == "move":
        if len(rest) < 2:
            return "Usage: /sub <n> move <from> <to>"
        subs.reorder(_position(rest[0]), _position(rest[1]))
    elif action:
        return "Usage: /sub <n> [add <text> | done <m> | edit <m> <text> | del <m> | move <a> <b>]"

    progress = round(subs.progress_percentage() * 100)
    return "\n".join([*render_task(pos + 1, task), f"       progress: {progress}%"])


def cmd_stats(state: AppState, args: list[str]) -> str:
    counts = state.tasks.counts()
    return f"Active: {counts.active}  Completed: {counts.completed}  Total: {counts.total}"


def cmd_prefs(state: AppState, args: list[str]) -> str:
    """
    /prefs              -> show preferences
    /prefs <key> <val>  -> change one preference
    /prefs reset        -> restore defaults
    """
    if args and args[0].lower() == "reset":
        fresh = state.preferences_store.reset()
        for key, value in fresh.to_dict().items():
            state.preferences.set(key, value)
        return "Preferences reset to defaults."

    if len(args) >= 2:
        key, value = args[0], " ".join(args[1:])
        try:
            state.preferences.set(key, value)
        except KeyError:
            return f"Unknown preference: {key}"
        except ValueError as exc:
            return f"Bad value for {key}: {exc}"
        try:
            state.preferences_store.save(state.preferences)
        except OSError:
            logger.exception("Failed to save preferences")
            return f"{key} = {value} (not saved, see log)"
        return f"{key} = {getattr(state.preferences, key)}"

    lines = ["Preferences:"]
    for key, value in state.preferences.to_dict().items():
        lines.append(f"  {key}: {value}")
    return "\n".join(lines)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks: /list [all|active|completed].", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a task: /add <text>.")
registry.register("done", cmd_done, help_text="Toggle a task: /done <n>.", aliases=["toggle"])
registry.register("edit", cmd_edit, help_text="Rename a task: /edit <n> <text>.")
registry.register("del", cmd_del, help_text="Delete a task and its subtasks: /del <n>.", aliases=["rm"])
registry.register("move", cmd_move, help_text="Reorder tasks: /move <from> <to>.", aliases=["mv"])
registry.register("sub", cmd_sub, help_text="Subtasks: /sub <n> [add|done|edit|del|move ...].")
registry.register("stats", cmd_stats, help_text="Show active/completed/total counts.")
registry.register("prefs", cmd_prefs, help_text="Preferences: /prefs [<key> <value> | reset].")
