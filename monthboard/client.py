"""
Task store client.

Thin HTTP wrapper over the remote task store:

    GET    {base}/todos/        → list of task records
    POST   {base}/todos/        → created task (with id)
    PATCH  {base}/todos/{id}/   → partial update (title and/or status)
    DELETE {base}/todos/{id}/

The bearer credential comes from an external session store via
`token_source`. A missing credential or a 401 raises AuthenticationRequired;
every other failure raises RequestFailed.
"""
import logging
import os
from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional

import requests

from .errors import AuthenticationRequired, RequestFailed
from .schema import Task, TaskStatus

logger = logging.getLogger(__name__)

TokenSource = Callable[[], Optional[str]]

UPDATABLE_FIELDS = ("title", "status")


def env_token_source(env_var: str) -> TokenSource:
    """Read the bearer token from an environment variable on every call."""
    def _read() -> Optional[str]:
        return os.environ.get(env_var) or None
    return _read


class TaskStoreClient:
    """HTTP client for the remote task store."""

    def __init__(self, base_url: str, token_source: TokenSource, timeout: float = 5):
        self.base_url = base_url.rstrip("/")
        self.token_source = token_source
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        token = self.token_source()
        if not token:
            raise AuthenticationRequired("No access token found, please log in")
        return {
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
        }

    def _url(self, task_id: Optional[str] = None) -> str:
        if task_id is None:
            return f"{self.base_url}/todos/"
        return f"{self.base_url}/todos/{task_id}/"

    def _request(self, operation: str, method: str, url: str, **kwargs) -> requests.Response:
        headers = self._headers()
        try:
            r = requests.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise RequestFailed(operation, str(e)) from e
        if r.status_code == 401:
            raise AuthenticationRequired("Unauthorized access, please log in again")
        if not r.ok:
            raise RequestFailed(operation, r.reason or "", status_code=r.status_code)
        return r

    def _json(self, operation: str, r: requests.Response) -> Any:
        try:
            return r.json()
        except ValueError as e:
            raise RequestFailed(operation, f"invalid JSON body: {e}") from e

    def list_tasks(self) -> List[Task]:
        """Fetch every task. Records that cannot be parsed are skipped and logged."""
        r = self._request("list", "GET", self._url())
        data = self._json("list", r)
        if not isinstance(data, list):
            raise RequestFailed("list", "expected a JSON array")

        tasks = []
        for record in data:
            try:
                tasks.append(Task.from_dict(record))
            except (ValueError, TypeError, AttributeError) as e:
                task_id = record.get("id") if isinstance(record, dict) else None
                logger.warning(f"Skipping task {task_id}: {e}")
        return tasks

    def create_task(self, task: Task) -> Task:
        """
        Create `task` and return the stored record.

        Once the store has accepted the task, a reply that does not parse
        still yields a Task: the sent fields plus the returned id. Only a
        reply without an id raises RequestFailed.
        """
        r = self._request("create", "POST", self._url(), json=task.to_create_payload())
        data = self._json("create", r)
        try:
            return Task.from_dict(data)
        except (ValueError, TypeError, AttributeError) as e:
            task_id = data.get("id") if isinstance(data, dict) else None
            if task_id is None:
                raise RequestFailed("create", f"unexpected response: {e}") from e
            logger.warning(f"Created task {task_id} but could not read the reply ({e}); using sent fields")
            return replace(task, task_id=str(task_id))

    def update_task(self, task_id: str, **fields: Any) -> None:
        """Partial update; only title and status may be sent."""
        unknown = set(fields) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValueError(f"Fields not updatable: {sorted(unknown)}")
        body = {
            key: value.value if isinstance(value, TaskStatus) else value
            for key, value in fields.items()
        }
        self._request("update", "PATCH", self._url(task_id), json=body)

    def delete_task(self, task_id: str) -> None:
        self._request("delete", "DELETE", self._url(task_id))

    def health(self) -> bool:
        """Check if the task store is reachable."""
        try:
            r = requests.get(self._url(), headers=self._headers(), timeout=2)
            return r.ok
        except (requests.RequestException, AuthenticationRequired):
            return False
