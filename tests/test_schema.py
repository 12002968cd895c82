"""Tests for the task schema and status/column mapping."""
from datetime import date

import pytest

from monthboard.schema import (
    Column,
    Task,
    TaskStatus,
    UnknownColumn,
    UnknownStatus,
    new_task,
)


def test_column_status_mapping_is_bijective():
    """Every column maps to one status and back"""
    assert Column.TODO.status is TaskStatus.PENDING
    assert Column.IN_PROCESS.status is TaskStatus.IN_PROCESS
    assert Column.DONE.status is TaskStatus.COMPLETED
    for column in Column:
        assert column.status.column is column
    assert len({c.status for c in Column}) == 3


def test_unknown_values_rejected():
    with pytest.raises(UnknownStatus):
        TaskStatus.from_str("archived")
    with pytest.raises(UnknownColumn):
        Column.from_str("backlog")
    assert Column.from_str("inProcess") is Column.IN_PROCESS


def test_menu_targets_exclude_current_column():
    assert Column.TODO.menu_targets() == (Column.IN_PROCESS, Column.DONE)
    assert Column.DONE.menu_targets() == (Column.TODO, Column.IN_PROCESS)
    assert Column.IN_PROCESS.title == "In Process"


def test_task_from_store_record():
    task = Task.from_dict({
        "id": 42,
        "title": "Pay rent",
        "status": "inProcess",
        "due_date": "2024-03-31",
        "created_date": "2024-03-02T10:00:00Z",
        "is_special_day": False,
    })
    assert task.task_id == "42"
    assert task.status is TaskStatus.IN_PROCESS
    assert task.column is Column.IN_PROCESS
    assert task.due_date == date(2024, 3, 31)
    assert task.created_date == date(2024, 3, 2)


def test_task_from_record_with_bad_status():
    with pytest.raises(UnknownStatus):
        Task.from_dict({"id": 1, "title": "x", "status": "blocked", "due_date": "2024-03-01"})


def test_create_payload_has_no_id():
    task = new_task("Buy milk", due_date=date(2024, 3, 1), created_date=date(2024, 3, 15))
    assert task.to_create_payload() == {
        "title": "Buy milk",
        "status": "pending",
        "due_date": "2024-03-01",
        "created_date": "2024-03-15",
        "is_special_day": False,
    }
