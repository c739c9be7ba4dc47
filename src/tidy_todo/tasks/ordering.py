# src/tidy_todo/tasks/ordering.py

"""
Ordering helpers shared by the task and subtask lists.

Both collections use the same manual ordering scheme:
- display order is ascending sort_order,
- new items are appended with sort_order = current count,
- delete leaves gaps,
- reorder is remove -> adjust -> insert -> renumber 0..n-1.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from ..core.errors import RangeError


class Ordered(Protocol):
    sort_order: int


T = TypeVar("T", bound=Ordered)


def by_sort_order(items: Iterable[T]) -> list[T]:
    # sorted() is stable, so equal sort_order keeps insertion order.
    return sorted(items, key=lambda it: it.sort_order)


def insertion_index(source_index: int, target_index: int) -> int:
    """
    Where the moved element lands once it has been removed.

    Removing an element before the target shifts the target one slot left.
    """
    return target_index - 1 if source_index < target_index else target_index


def move(items: Sequence[T], source_index: int, target_index: int) -> list[T]:
    """Return a new list with items[source_index] moved towards target_index."""
    count = len(items)
    for name, idx in (("source_index", source_index), ("target_index", target_index)):
        if not 0 <= idx < count:
            raise RangeError(f"{name}={idx} out of range for {count} item(s)")

    out = list(items)
    moved = out.pop(source_index)
    out.insert(insertion_index(source_index, target_index), moved)
    return out


def renumber(items: Sequence[T]) -> list[T]:
    """Assign sort_order = position. Returns the items whose value changed."""
    changed: list[T] = []
    for pos, item in enumerate(items):
        if item.sort_order != pos:
            item.sort_order = pos
            changed.append(item)
    return changed


def is_contiguous(items: Iterable[Ordered]) -> bool:
    orders = sorted(it.sort_order for it in items)
    return orders == list(range(len(orders)))
