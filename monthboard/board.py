"""
Board aggregate and reducer.

Every local change to the board is an event applied by a pure function:

    apply(board, event) -> Board

The reducer never talks to the task store. Remote-first commit lives in the
controller, which only emits TaskMoved / TaskAdded / TaskRetitled /
TaskDeleted after the matching store call has succeeded.

Events naming a task that is not where they expect it (NotFound) leave the
board unchanged.

A list response is only applied while both its generation (month window /
refetch) and its revision (store-confirmed changes) are still current, so a
fetch that started before a commit cannot roll that commit back.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Sequence, Tuple

from .partition import partition
from .schema import Column, Task
from .window import MonthWindow

logger = logging.getLogger(__name__)

COLUMN_FIELDS: Dict[Column, str] = {
    Column.TODO: "todo",
    Column.IN_PROCESS: "in_process",
    Column.DONE: "done",
}


@dataclass(frozen=True)
class EditSession:
    """The single task currently being retitled."""
    task_id: str
    draft: str


@dataclass(frozen=True)
class Board:
    """Three status columns for one month window."""

    window: MonthWindow
    generation: int = 0
    revision: int = 0              # Bumped by every store-confirmed change
    todo: Tuple[Task, ...] = ()
    in_process: Tuple[Task, ...] = ()
    done: Tuple[Task, ...] = ()
    edit: Optional[EditSession] = None
    loading: bool = False

    @classmethod
    def initial(cls, window: Optional[MonthWindow] = None) -> "Board":
        return cls(window=window or MonthWindow.current())

    def column(self, column: Column) -> Tuple[Task, ...]:
        return getattr(self, COLUMN_FIELDS[column])

    def columns(self) -> Iterator[Tuple[Column, Tuple[Task, ...]]]:
        for column in Column:
            yield column, self.column(column)

    def tasks(self) -> Iterator[Task]:
        for _, tasks in self.columns():
            yield from tasks

    def find(self, task_id: str) -> Optional[Tuple[Column, int, Task]]:
        """Locate a task anywhere on the board."""
        for column, tasks in self.columns():
            for index, task in enumerate(tasks):
                if task.task_id == task_id:
                    return column, index, task
        return None

    def index_in(self, column: Column, task_id: str) -> Optional[int]:
        for index, task in enumerate(self.column(column)):
            if task.task_id == task_id:
                return index
        return None

    def with_columns(self, changes: Dict[Column, Sequence[Task]]) -> "Board":
        return replace(self, **{COLUMN_FIELDS[c]: tuple(tasks) for c, tasks in changes.items()})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.window.to_dict(),
            "generation": self.generation,
            "revision": self.revision,
            "loading": self.loading,
            "columns": {
                column.value: {
                    "title": column.title,
                    "status": column.status.value,
                    "tasks": [task.to_dict() for task in tasks],
                }
                for column, tasks in self.columns()
            },
            "edit": {"task_id": self.edit.task_id, "draft": self.edit.draft} if self.edit else None,
        }


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Events
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


@dataclass(frozen=True)
class MonthChanged:
    window: MonthWindow


@dataclass(frozen=True)
class FetchStarted:
    """Refetch of the current window; older in-flight responses become stale."""
    pass


@dataclass(frozen=True)
class TasksLoaded:
    generation: int
    tasks: Tuple[Task, ...] = field(default_factory=tuple)
    revision: int = 0


@dataclass(frozen=True)
class LoadFailed:
    generation: int


@dataclass(frozen=True)
class TaskMoved:
    """A drag that the store has already confirmed."""
    source: Column
    source_index: int
    dest: Column
    dest_index: int


@dataclass(frozen=True)
class TaskAdded:
    task: Task


@dataclass(frozen=True)
class TaskRetitled:
    task_id: str
    column: Column
    title: str


@dataclass(frozen=True)
class TaskDeleted:
    task_id: str
    column: Column


@dataclass(frozen=True)
class TaskRelocated:
    """Menu move: append to the end of the destination column."""
    task_id: str
    source: Column
    dest: Column


@dataclass(frozen=True)
class EditStarted:
    task_id: str
    title: str


@dataclass(frozen=True)
class DraftChanged:
    title: str


@dataclass(frozen=True)
class EditCancelled:
    pass


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Reducer
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _month_changed(board: Board, event: MonthChanged) -> Board:
    return Board(
        window=event.window,
        generation=board.generation + 1,
        revision=board.revision,
        loading=True,
    )


def _fetch_started(board: Board, event: FetchStarted) -> Board:
    return replace(board, generation=board.generation + 1, loading=True)


def _load_failed(board: Board, event: LoadFailed) -> Board:
    if event.generation != board.generation:
        return board
    return replace(board, loading=False)


def _tasks_loaded(board: Board, event: TasksLoaded) -> Board:
    if event.generation != board.generation:
        logger.debug(
            f"Discarding tasks for generation {event.generation} "
            f"(board is at {board.generation})"
        )
        return board
    if event.revision != board.revision:
        logger.debug(
            f"Discarding tasks fetched at revision {event.revision} "
            f"(board is at {board.revision})"
        )
        return board
    loaded = board.with_columns(partition(event.tasks, board.window))
    edit = board.edit
    if edit and loaded.find(edit.task_id) is None:
        edit = None
    return replace(loaded, edit=edit, loading=False)


def _task_moved(board: Board, event: TaskMoved) -> Board:
    source = list(board.column(event.source))
    if not 0 <= event.source_index < len(source):
        return board
    moved = source.pop(event.source_index).with_status(event.dest.status)

    dest = source if event.dest is event.source else list(board.column(event.dest))
    index = min(max(event.dest_index, 0), len(dest))
    dest.insert(index, moved)
    return board.with_columns({event.source: source, event.dest: dest})


def _task_added(board: Board, event: TaskAdded) -> Board:
    column = event.task.column
    return board.with_columns({column: board.column(column) + (event.task,)})


def _task_retitled(board: Board, event: TaskRetitled) -> Board:
    index = board.index_in(event.column, event.task_id)
    if index is None:
        return board
    tasks = list(board.column(event.column))
    tasks[index] = tasks[index].with_title(event.title)
    updated = board.with_columns({event.column: tasks})
    if board.edit and board.edit.task_id == event.task_id:
        updated = replace(updated, edit=None)
    return updated


def _task_deleted(board: Board, event: TaskDeleted) -> Board:
    index = board.index_in(event.column, event.task_id)
    if index is None:
        return board
    tasks = list(board.column(event.column))
    del tasks[index]
    updated = board.with_columns({event.column: tasks})
    if board.edit and board.edit.task_id == event.task_id:
        updated = replace(updated, edit=None)
    return updated


def _task_relocated(board: Board, event: TaskRelocated) -> Board:
    index = board.index_in(event.source, event.task_id)
    if index is None:
        return board
    source = list(board.column(event.source))
    moved = source.pop(index).with_status(event.dest.status)
    dest = source if event.dest is event.source else list(board.column(event.dest))
    dest.append(moved)
    return board.with_columns({event.source: source, event.dest: dest})


def _edit_started(board: Board, event: EditStarted) -> Board:
    return replace(board, edit=EditSession(task_id=event.task_id, draft=event.title))


def _draft_changed(board: Board, event: DraftChanged) -> Board:
    if board.edit is None:
        return board
    return replace(board, edit=replace(board.edit, draft=event.title))


def _edit_cancelled(board: Board, event: EditCancelled) -> Board:
    return replace(board, edit=None)


REDUCERS: Dict[type, Callable[[Board, Any], Board]] = {
    MonthChanged: _month_changed,
    FetchStarted: _fetch_started,
    TasksLoaded: _tasks_loaded,
    LoadFailed: _load_failed,
    TaskMoved: _task_moved,
    TaskAdded: _task_added,
    TaskRetitled: _task_retitled,
    TaskDeleted: _task_deleted,
    TaskRelocated: _task_relocated,
    EditStarted: _edit_started,
    DraftChanged: _draft_changed,
    EditCancelled: _edit_cancelled,
}


COMMITTED_EVENTS = (TaskMoved, TaskAdded, TaskRetitled, TaskDeleted, TaskRelocated)


def apply(board: Board, event: Any) -> Board:
    """Return the board that results from applying one event."""
    handler = REDUCERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown board event: {event!r}")
    updated = handler(board, event)
    if updated is not board and isinstance(event, COMMITTED_EVENTS):
        updated = replace(updated, revision=board.revision + 1)
    return updated


def apply_all(board: Board, events: Iterable[Any]) -> Board:
    for event in events:
        board = apply(board, event)
    return board
