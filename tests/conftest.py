"""Shared test fixtures for the monthly board tests."""

from dataclasses import replace
from datetime import date

import pytest

from monthboard.config import Config
from monthboard.controller import MonthlyBoard
from monthboard.errors import AuthenticationRequired, RequestFailed
from monthboard.schema import Task, TaskStatus
from monthboard.window import MonthWindow


def make_task(task_id, title=None, status=TaskStatus.PENDING, due=date(2024, 3, 10)):
    return Task(
        task_id=str(task_id),
        title=title or f"Task {task_id}",
        status=status,
        due_date=due,
        created_date=date(2024, 3, 1),
    )


class FakeTaskStore:
    """In-memory stand-in for TaskStoreClient that records every call."""

    def __init__(self, tasks=()):
        self.tasks = list(tasks)
        self.calls = []
        self.fail = set()          # operations that raise RequestFailed
        self.unauthorized = False
        self._next_id = 100

    def _check(self, operation):
        if self.unauthorized:
            raise AuthenticationRequired("Unauthorized access, please log in again")
        if operation in self.fail:
            raise RequestFailed(operation, "boom", status_code=500)

    def list_tasks(self):
        self.calls.append(("list",))
        self._check("list")
        return list(self.tasks)

    def create_task(self, task):
        self.calls.append(("create", task))
        self._check("create")
        created = replace(task, task_id=str(self._next_id))
        self._next_id += 1
        self.tasks.append(created)
        return created

    def update_task(self, task_id, **fields):
        self.calls.append(("update", task_id, fields))
        self._check("update")
        for i, task in enumerate(self.tasks):
            if task.task_id == task_id:
                self.tasks[i] = replace(task, **fields)

    def delete_task(self, task_id):
        self.calls.append(("delete", task_id))
        self._check("delete")
        self.tasks = [t for t in self.tasks if t.task_id != task_id]

    def health(self):
        return not self.unauthorized

    def remote_calls(self, operation):
        return [c for c in self.calls if c[0] == operation]


@pytest.fixture
def march():
    return MonthWindow.of(2024, 3)


@pytest.fixture
def store():
    return FakeTaskStore([
        make_task(1, "Write report"),
        make_task(2, "Review PR", status=TaskStatus.IN_PROCESS),
        make_task(3, "Ship release", status=TaskStatus.COMPLETED),
        make_task(4, "Plan sprint", due=date(2024, 3, 31)),
        make_task(5, "April thing", due=date(2024, 4, 1)),
    ])


@pytest.fixture
def board(store, march):
    """A loaded March 2024 board backed by the fake store."""
    b = MonthlyBoard(store, Config(), window=march, today=lambda: date(2024, 3, 15))
    assert b.refresh()
    store.calls.clear()
    return b
