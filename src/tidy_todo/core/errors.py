# src/tidy_todo/core/errors.py

from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by the to-do core."""


class ValidationError(TodoError, ValueError):
    """Empty or whitespace-only text on add/edit."""


class StoreError(TodoError):
    """A store commit (or read) failed."""


class RangeError(TodoError, IndexError):
    """Reorder index outside the current listing."""


class TaskNotFoundError(TodoError, KeyError):
    """No task/subtask with the given id."""

    def __str__(self) -> str:
        # KeyError.__str__ quotes the message; keep it readable.
        return str(self.args[0]) if self.args else "not found"


def clean_text(text: str | None, *, what: str = "text") -> str:
    """Trim user text; raise ValidationError if nothing is left."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} must not be empty")
    return cleaned
