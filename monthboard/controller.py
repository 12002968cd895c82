"""
Monthly board controller.

Orchestrates the task store and the board reducer:

    month change → list call → partition → columns
    add / drag / save / delete → store call → (on success) board event

Remote-first commit: no board event is applied until the matching store
call has returned successfully. A RequestFailed is logged and the board is
left exactly as it was. AuthenticationRequired is never swallowed here; the
caller is expected to send the user to the login flow.

Mutations are serialized behind one lock per board. The list call of a
month change runs outside the lock and carries the board generation and
revision; a response for a superseded generation is discarded, and one that
predates a committed change is discarded and fetched again.
"""
import logging
import threading
from datetime import date
from typing import Callable, Optional, Union

from .board import (
    Board,
    DraftChanged,
    EditCancelled,
    EditStarted,
    FetchStarted,
    LoadFailed,
    MonthChanged,
    TaskAdded,
    TaskDeleted,
    TaskMoved,
    TaskRelocated,
    TaskRetitled,
    TasksLoaded,
    apply,
)
from .client import TaskStoreClient
from .config import Config
from .errors import AuthenticationRequired, EditInProgress, RequestFailed
from .schema import Column, Task, new_task
from .window import MonthWindow

logger = logging.getLogger(__name__)

ColumnRef = Union[Column, str]

MAX_LOAD_ATTEMPTS = 3


def as_column(value: ColumnRef) -> Column:
    return value if isinstance(value, Column) else Column.from_str(value)


class MonthlyBoard:
    """A month-scoped kanban board kept in sync with the task store."""

    def __init__(
        self,
        client: TaskStoreClient,
        config: Optional[Config] = None,
        window: Optional[MonthWindow] = None,
        today: Callable[[], date] = date.today,
    ):
        self.client = client
        self.config = config or Config()
        self._today = today
        self._board = Board.initial(window or MonthWindow.current(today()))
        self._lock = threading.Lock()
        self.new_title = ""

    @property
    def board(self) -> Board:
        return self._board

    @property
    def window(self) -> MonthWindow:
        return self._board.window

    def _apply(self, event) -> Board:
        self._board = apply(self._board, event)
        return self._board

    # ── Month navigation ─────────────────────────────────────────────────

    def previous_month(self) -> bool:
        return self.go_to(self.window.previous())

    def next_month(self) -> bool:
        return self.go_to(self.window.next())

    def go_to(self, window: Union[MonthWindow, date]) -> bool:
        """Switch to another month and load its tasks."""
        if isinstance(window, date):
            window = MonthWindow(window)
        with self._lock:
            generation = self._apply(MonthChanged(window)).generation
        return self._load(generation)

    def refresh(self) -> bool:
        """Reload the current month; responses already in flight become stale."""
        with self._lock:
            generation = self._apply(FetchStarted()).generation
        return self._load(generation)

    def _load(self, generation: int) -> bool:
        """
        Fetch and apply tasks for `generation`.

        A change committed while the list call was in flight makes the
        response stale; the list is fetched again, up to MAX_LOAD_ATTEMPTS.
        """
        for _ in range(MAX_LOAD_ATTEMPTS):
            with self._lock:
                if self._board.generation != generation:
                    return False
                revision = self._board.revision
            try:
                tasks = self.client.list_tasks()
            except AuthenticationRequired:
                with self._lock:
                    self._apply(LoadFailed(generation))
                raise
            except RequestFailed as e:
                logger.error(f"Error fetching tasks: {e}")
                with self._lock:
                    self._apply(LoadFailed(generation))
                return False

            with self._lock:
                board = self._apply(TasksLoaded(generation, tuple(tasks), revision))
            if board.generation != generation:
                logger.debug(f"Month changed while loading; dropped response for generation {generation}")
                return False
            if board.revision == revision:
                logger.info(
                    f"Loaded {sum(1 for _ in board.tasks())} task(s) for {board.window.display()}"
                )
                return True
            logger.debug(f"Board changed while loading (revision {revision} → {board.revision}); fetching again")

        logger.warning(f"Gave up reloading {self.window.display()} after {MAX_LOAD_ATTEMPTS} attempts")
        with self._lock:
            self._apply(LoadFailed(generation))
        return False

    # ── Add / delete ─────────────────────────────────────────────────────

    def add(self, title: Optional[str] = None) -> bool:
        """
        Create a pending task due on the first day of the month.

        Uses `new_title` when no title is given. Blank titles are rejected
        without a store call. The input is cleared only on success.
        """
        if title is None:
            title = self.new_title
        title = title.strip()
        if not title:
            return False

        with self._lock:
            task = new_task(title, due_date=self.window.start, created_date=self._today())
            try:
                created = self.client.create_task(task)
            except RequestFailed as e:
                logger.error(f"Error adding task: {e}")
                return False
            self._apply(TaskAdded(created))
            self.new_title = ""
        return True

    def delete(self, task_id: str, column: ColumnRef) -> bool:
        column = as_column(column)
        with self._lock:
            if self._board.index_in(column, task_id) is None:
                return False
            try:
                self.client.delete_task(task_id)
            except RequestFailed as e:
                logger.error(f"Error deleting task {task_id}: {e}")
                return False
            self._apply(TaskDeleted(task_id, column))
        return True

    # ── Drag reconciliation ──────────────────────────────────────────────

    def reorder_or_move(
        self,
        source: ColumnRef,
        source_index: int,
        dest: Optional[ColumnRef],
        dest_index: Optional[int],
    ) -> bool:
        """
        Apply a drag from source[source_index] to dest[dest_index].

        A drop outside any column (dest is None) or onto the task's own slot
        is a no-op. Otherwise the store is told the new status first; the
        board only changes once that succeeds.
        """
        if dest is None or dest_index is None:
            return True
        source, dest = as_column(source), as_column(dest)
        if source is dest and source_index == dest_index:
            return True

        with self._lock:
            tasks = self._board.column(source)
            if not 0 <= source_index < len(tasks):
                return False
            moved = tasks[source_index]
            try:
                self.client.update_task(moved.task_id, status=dest.status)
            except RequestFailed as e:
                logger.error(f"Error updating task status for {moved.task_id}: {e}")
                return False
            self._apply(TaskMoved(source, source_index, dest, dest_index))
        return True

    # ── Move menu ────────────────────────────────────────────────────────

    def move_via_menu(self, task_id: str, source: ColumnRef, dest: ColumnRef) -> bool:
        """
        Append the task to the end of `dest`.

        In "remote" menu mode the status update is committed first, like a
        drag. In "local" mode only the board changes, so the move is lost on
        the next refetch unless the store is updated some other way.
        """
        source, dest = as_column(source), as_column(dest)
        with self._lock:
            if self._board.index_in(source, task_id) is None:
                return False
            if self.config.menu_move_mode == "remote":
                try:
                    self.client.update_task(task_id, status=dest.status)
                except RequestFailed as e:
                    logger.error(f"Error moving task {task_id} to {dest.value}: {e}")
                    return False
            self._apply(TaskRelocated(task_id, source, dest))
        return True

    # ── Edit session ─────────────────────────────────────────────────────

    def start_edit(self, task: Union[Task, str]) -> bool:
        task_id = task.task_id if isinstance(task, Task) else task
        with self._lock:
            found = self._board.find(task_id)
            if found is None:
                return False
            current = self._board.edit
            if current and current.task_id == task_id:
                return True
            if current:
                if self.config.edit_switch_policy == "reject":
                    raise EditInProgress(current.task_id)
                logger.info(f"Discarding unsaved draft for task {current.task_id}")
            self._apply(EditStarted(task_id, found[2].title))
        return True

    def update_draft(self, title: str) -> bool:
        with self._lock:
            if self._board.edit is None:
                return False
            self._apply(DraftChanged(title))
        return True

    def cancel_edit(self) -> None:
        with self._lock:
            self._apply(EditCancelled())

    def save_edit(self, task_id: str, column: ColumnRef) -> bool:
        """Commit the draft title. On failure the edit session stays open."""
        column = as_column(column)
        with self._lock:
            edit = self._board.edit
            if edit is None or edit.task_id != task_id:
                return False
            title = edit.draft.strip()
            if not title:
                logger.warning(f"Refusing to save blank title for task {task_id}")
                return False
            if self._board.index_in(column, task_id) is None:
                return False
            try:
                self.client.update_task(task_id, title=title)
            except RequestFailed as e:
                logger.error(f"Error updating task {task_id}: {e}")
                return False
            self._apply(TaskRetitled(task_id, column, title))
        return True
