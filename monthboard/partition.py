"""
Board partitioner: flat task list + month window → three ordered columns.
"""
from typing import Dict, Iterable, List, Tuple

from .schema import Column, Task
from .window import MonthWindow


def partition(tasks: Iterable[Task], window: MonthWindow) -> Dict[Column, Tuple[Task, ...]]:
    """
    Keep tasks due inside the window (both ends inclusive) and bucket them by
    status. Store order is preserved within each column.
    """
    buckets: Dict[Column, List[Task]] = {column: [] for column in Column}
    for task in tasks:
        if task.due_date is None or not window.contains(task.due_date):
            continue
        buckets[task.column].append(task)
    return {column: tuple(items) for column, items in buckets.items()}
