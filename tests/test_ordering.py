# tests/test_ordering.py

from __future__ import annotations

from dataclasses import dataclass

import pytest

from tidy_todo.core.errors import RangeError
from tidy_todo.tasks import ordering


@dataclass(eq=False)
class Item:
    name: str
    sort_order: int


def _items(*names: str) -> list[Item]:
    return [Item(n, i) for i, n in enumerate(names)]


def _names(items) -> list[str]:
    return [i.name for i in items]


def test_move_forward_lands_before_target() -> None:
    moved = ordering.move(_items("A", "B", "C", "D"), 0, 2)
    assert _names(moved) == ["B", "A", "C", "D"]


def test_move_backward_lands_at_target() -> None:
    moved = ordering.move(_items("A", "B", "C", "D"), 3, 0)
    assert _names(moved) == ["D", "A", "B", "C"]


def test_move_same_index_is_identity() -> None:
    moved = ordering.move(_items("A", "B", "C"), 1, 1)
    assert _names(moved) == ["A", "B", "C"]


@pytest.mark.parametrize("src,dst", [(-1, 0), (0, 3), (3, 0), (0, -1)])
def test_move_rejects_out_of_range(src: int, dst: int) -> None:
    with pytest.raises(RangeError):
        ordering.move(_items("A", "B", "C"), src, dst)


def test_renumber_closes_gaps_and_reports_changes() -> None:
    items = [Item("A", 0), Item("B", 4), Item("C", 7)]
    changed = ordering.renumber(items)
    assert [i.sort_order for i in items] == [0, 1, 2]
    assert _names(changed) == ["B", "C"]
    assert ordering.is_contiguous(items)


def test_by_sort_order_is_stable_on_ties() -> None:
    items = [Item("late", 2), Item("first", 0), Item("tie", 2)]
    assert _names(ordering.by_sort_order(items)) == ["first", "late", "tie"]
