"""Tests for the board partitioner."""
from datetime import date

from conftest import make_task
from monthboard.partition import partition
from monthboard.schema import Column, TaskStatus
from monthboard.window import MonthWindow


def test_month_filter_is_inclusive():
    window = MonthWindow.of(2024, 3)
    tasks = [
        make_task(1, due=date(2024, 2, 29)),
        make_task(2, due=date(2024, 3, 1)),
        make_task(3, due=date(2024, 3, 31)),
        make_task(4, due=date(2024, 4, 1)),
    ]
    columns = partition(tasks, window)
    assert [t.task_id for t in columns[Column.TODO]] == ["2", "3"]


def test_buckets_by_status_preserving_store_order():
    window = MonthWindow.of(2024, 3)
    tasks = [
        make_task(1, status=TaskStatus.COMPLETED),
        make_task(2),
        make_task(3, status=TaskStatus.IN_PROCESS),
        make_task(4, status=TaskStatus.COMPLETED),
        make_task(5),
    ]
    columns = partition(tasks, window)
    assert [t.task_id for t in columns[Column.TODO]] == ["2", "5"]
    assert [t.task_id for t in columns[Column.IN_PROCESS]] == ["3"]
    assert [t.task_id for t in columns[Column.DONE]] == ["1", "4"]


def test_every_column_matches_task_status():
    window = MonthWindow.of(2024, 3)
    tasks = [make_task(i, status=s) for i, s in enumerate(TaskStatus)]
    columns = partition(tasks, window)
    seen = []
    for column, items in columns.items():
        for task in items:
            assert task.status is column.status
            seen.append(task.task_id)
    assert sorted(seen) == sorted(set(seen))
    assert len(seen) == 3


def test_empty_input_gives_three_empty_columns():
    columns = partition([], MonthWindow.of(2024, 3))
    assert set(columns) == set(Column)
    assert all(items == () for items in columns.values())
