"""
Task schema and the fixed status/column mapping.

Board columns:
  todo ↔ pending,  inProcess ↔ inProcess,  done ↔ completed

The mapping is bidirectional and closed: a status outside the three values
is rejected at parse time instead of silently falling out of every column.
"""
from enum import Enum
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Dict, Any, Tuple


class UnknownStatus(ValueError):
    """Raised for a task status outside the closed set."""
    pass


class UnknownColumn(ValueError):
    """Raised for a column id outside the closed set."""
    pass


class TaskStatus(Enum):
    """Task status as stored remotely."""
    PENDING = "pending"
    IN_PROCESS = "inProcess"
    COMPLETED = "completed"

    @classmethod
    def from_str(cls, value: str) -> "TaskStatus":
        try:
            return cls(value)
        except ValueError:
            raise UnknownStatus(f"Unknown task status: {value!r}") from None

    @property
    def column(self) -> "Column":
        return STATUS_TO_COLUMN[self]


class Column(Enum):
    """Board columns, in display order."""
    TODO = "todo"
    IN_PROCESS = "inProcess"
    DONE = "done"

    @classmethod
    def from_str(cls, value: str) -> "Column":
        try:
            return cls(value)
        except ValueError:
            raise UnknownColumn(f"Unknown column: {value!r}") from None

    @property
    def status(self) -> TaskStatus:
        return COLUMN_TO_STATUS[self]

    @property
    def title(self) -> str:
        return COLUMN_TITLES[self]

    def menu_targets(self) -> Tuple["Column", ...]:
        """Columns offered by the "Move to" menu of a task in this column."""
        return tuple(c for c in Column if c is not self)


COLUMN_TO_STATUS: Dict[Column, TaskStatus] = {
    Column.TODO: TaskStatus.PENDING,
    Column.IN_PROCESS: TaskStatus.IN_PROCESS,
    Column.DONE: TaskStatus.COMPLETED,
}

STATUS_TO_COLUMN: Dict[TaskStatus, Column] = {s: c for c, s in COLUMN_TO_STATUS.items()}

COLUMN_TITLES: Dict[Column, str] = {
    Column.TODO: "Todo",
    Column.IN_PROCESS: "In Process",
    Column.DONE: "Done",
}


def parse_date(value: Any) -> date:
    """Parse a YYYY-MM-DD calendar date; any time part is dropped."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("Missing date")
    return date.fromisoformat(str(value)[:10])


@dataclass(frozen=True)
class Task:
    """A task on the monthly board."""

    task_id: str                   # Assigned by the store; "" until created
    title: str
    status: TaskStatus = TaskStatus.PENDING
    due_date: Optional[date] = None
    created_date: Optional[date] = None
    is_special_day: bool = False

    @property
    def column(self) -> Column:
        return self.status.column

    def with_status(self, status: TaskStatus) -> "Task":
        return replace(self, status=status)

    def with_title(self, title: str) -> "Task":
        return replace(self, title=title)

    def to_create_payload(self) -> Dict[str, Any]:
        """Body of a create request (no id: the store assigns it)."""
        return {
            "title": self.title,
            "status": self.status.value,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "created_date": self.created_date.isoformat() if self.created_date else None,
            "is_special_day": self.is_special_day,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = {"id": self.task_id}
        data.update(self.to_create_payload())
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        """Deserialize a store record. Raises UnknownStatus / ValueError on bad data."""
        raw_id = data.get("id")
        return cls(
            task_id=str(raw_id) if raw_id is not None else "",
            title=data.get("title") or "",
            status=TaskStatus.from_str(data.get("status", "")),
            due_date=parse_date(data.get("due_date")),
            created_date=parse_date(data["created_date"]) if data.get("created_date") else None,
            is_special_day=bool(data.get("is_special_day", False)),
        )


def new_task(title: str, due_date: date, created_date: Optional[date] = None) -> Task:
    """A task as created from the board: pending, not a special day."""
    return Task(
        task_id="",
        title=title,
        status=TaskStatus.PENDING,
        due_date=due_date,
        created_date=created_date or date.today(),
        is_special_day=False,
    )
