"""
Error taxonomy for the monthly board.

NotFound has no exception type: operations on a task that is absent from
its expected column are reducer no-ops.
"""
from typing import Optional


class BoardError(Exception):
    """Base class for board errors."""
    pass


class ConfigError(BoardError):
    """Raised when configuration is invalid or incomplete."""
    pass


class AuthenticationRequired(BoardError):
    """Raised when no credential is available or the store answers 401."""
    pass


class RequestFailed(BoardError):
    """A remote task store call did not succeed."""

    def __init__(self, operation: str, detail: str = "", status_code: Optional[int] = None):
        self.operation = operation
        self.detail = detail
        self.status_code = status_code
        message = f"{operation} failed"
        if status_code is not None:
            message += f" (HTTP {status_code})"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class EditInProgress(BoardError):
    """Raised when another task's draft is open and the policy forbids switching."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} is already being edited")
