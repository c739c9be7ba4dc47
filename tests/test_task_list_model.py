# tests/test_task_list_model.py

from __future__ import annotations

import pytest

from tidy_todo.core.errors import RangeError, TaskNotFoundError, ValidationError
from tidy_todo.tasks import ordering
from tidy_todo.tasks.task_list import TaskListModel
from tidy_todo.tasks.task_models import TaskCounts, TaskFilter

from .fakes import FlakyStore, RecordingSinks


def _texts(model: TaskListModel) -> list[str]:
    return [t.text for t in model.tasks()]


def _abcd(model: TaskListModel) -> None:
    for name in "ABCD":
        model.add(name)


def test_add_trims_and_appends(model: TaskListModel, store: FlakyStore) -> None:
    first = model.add("  buy milk \n")
    second = model.add("finish project")

    assert first.text == "buy milk"
    assert (first.sort_order, second.sort_order) == (0, 1)
    assert _texts(model) == ["buy milk", "finish project"]
    assert store.count_tasks() == 2


@pytest.mark.parametrize("text", ["", "   ", "\n\t"])
def test_add_rejects_empty_text(model: TaskListModel, store: FlakyStore, text: str) -> None:
    with pytest.raises(ValidationError):
        model.add(text)
    assert len(model) == 0
    assert store.count_tasks() == 0
    assert store.commit_calls == 0


def test_reorder_forward_and_backward(model: TaskListModel) -> None:
    _abcd(model)
    model.reorder(0, 2)
    assert _texts(model) == ["B", "A", "C", "D"]

    model.reload()
    assert _texts(model) == ["B", "A", "C", "D"]


def test_reorder_last_to_first(model: TaskListModel) -> None:
    _abcd(model)
    assert [t.text for t in model.reorder(3, 0)] == ["D", "A", "B", "C"]


def test_reorder_keeps_sort_order_contiguous(model: TaskListModel, store: FlakyStore) -> None:
    _abcd(model)
    model.add("E")
    for src, dst in [(0, 4), (4, 0), (2, 3), (1, 1), (3, 1)]:
        model.reorder(src, dst)
        assert ordering.is_contiguous(model.tasks())
        assert ordering.is_contiguous(store.fetch_tasks())


def test_reorder_out_of_range_raises(model: TaskListModel, store: FlakyStore) -> None:
    _abcd(model)
    calls = store.commit_calls
    with pytest.raises(RangeError):
        model.reorder(0, 4)
    with pytest.raises(RangeError):
        model.reorder(-1, 0)
    assert _texts(model) == ["A", "B", "C", "D"]
    assert store.commit_calls == calls


def test_delete_leaves_gap_until_next_reorder(model: TaskListModel, store: FlakyStore) -> None:
    _abcd(model)
    model.delete(model.tasks()[1].id)

    assert _texts(model) == ["A", "C", "D"]
    assert [t.sort_order for t in model.tasks()] == [0, 2, 3]

    model.reorder(2, 0)
    assert _texts(model) == ["D", "A", "C"]
    assert [t.sort_order for t in store.fetch_tasks()] == [0, 1, 2]


def test_delete_cascades_subtasks(model: TaskListModel, store: FlakyStore) -> None:
    task = model.add("parent")
    subs = model.subtasks(task.id)
    for i in range(3):
        subs.add(f"step {i}")
    assert store.count_subtasks(task.id) == 3

    model.delete(task.id)

    assert store.count_subtasks() == 0
    with pytest.raises(TaskNotFoundError):
        model.get(task.id)


def test_delete_unknown_task(model: TaskListModel) -> None:
    with pytest.raises(TaskNotFoundError):
        model.delete("nope")


def test_toggle_emits_event_only_on_completion(model: TaskListModel, sinks: RecordingSinks) -> None:
    task = model.add("write report")

    assert model.toggle_completion(task.id) is True
    assert [e.task_id for e in sinks.completed] == [task.id]

    assert model.toggle_completion(task.id) is False
    assert len(sinks.completed) == 1

    model.reload()
    assert model.get(task.id).is_completed is False


def test_manual_toggle_allowed_with_incomplete_subtasks(model: TaskListModel) -> None:
    task = model.add("parent")
    model.subtasks(task.id).add("child")

    assert model.toggle_completion(task.id) is True
    assert model.get(task.id).is_completed is True


def test_counts_and_filters(model: TaskListModel) -> None:
    _abcd(model)
    model.toggle_completion(model.tasks()[0].id)
    model.toggle_completion(model.tasks()[2].id)

    assert model.counts() == TaskCounts(active=2, completed=2, total=4)
    assert model.counts() == model.counts()
    assert [t.text for t in model.tasks(TaskFilter.ACTIVE)] == ["B", "D"]
    assert [t.text for t in model.tasks(TaskFilter.COMPLETED)] == ["A", "C"]


def test_edit_trims_and_validates(model: TaskListModel) -> None:
    task = model.add("typo")
    model.edit(task.id, "  fixed  ")
    assert model.get(task.id).text == "fixed"

    with pytest.raises(ValidationError):
        model.edit(task.id, "   ")
    assert model.get(task.id).text == "fixed"


def test_feedback_cues_follow_preferences(model: TaskListModel, sinks: RecordingSinks, prefs) -> None:
    _abcd(model)
    model.reorder(0, 1)
    assert sinks.sounds() == ["Glass"] * 4 + ["Pop"]
    assert sinks.haptics() == ["alignment"]

    sinks.cues.clear()
    prefs.sound_enabled = False
    prefs.celebration_enabled = False
    model.toggle_completion(model.tasks()[0].id)
    assert sinks.sounds() == []
    assert sinks.haptics() == ["level_change"]
    assert sinks.completed == []


def test_failed_commit_keeps_memory_and_retries(model: TaskListModel, store: FlakyStore) -> None:
    _abcd(model)
    store.fail_commits = 1

    model.reorder(3, 0)  # commit fails, logged only

    assert _texts(model) == ["D", "A", "B", "C"]
    assert [t.text for t in store.fetch_tasks()] == ["A", "B", "C", "D"]
    assert store.pending_count > 0

    model.add("E")  # next successful commit flushes the backlog
    assert [t.text for t in store.fetch_tasks()] == ["D", "A", "B", "C", "E"]


def test_failed_commit_rolls_back_when_enabled(store: FlakyStore, feedback, sinks) -> None:
    model = TaskListModel(store, feedback=feedback, rollback_on_commit_failure=True)
    _abcd(model)
    task = model.tasks()[1]

    store.fail_commits = 1
    model.reorder(0, 3)
    assert _texts(model) == ["A", "B", "C", "D"]
    assert [t.sort_order for t in model.tasks()] == [0, 1, 2, 3]

    store.fail_commits = 1
    assert model.toggle_completion(task.id) is False
    assert sinks.completed == []

    store.fail_commits = 1
    model.delete(task.id)
    assert _texts(model) == ["A", "B", "C", "D"]
    assert store.pending_count == 0
    assert store.count_tasks() == 4
