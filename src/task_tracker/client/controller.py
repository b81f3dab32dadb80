from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from .views import TaskView

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Notifier(Protocol):
    """User-facing prompts: blocking alerts and yes/no confirmations."""

    def alert(self, message: str) -> None:
        ...

    def confirm(self, message: str) -> bool:
        ...


def _server_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {response.status_code}"


# PUBLIC_INTERFACE
class TaskController:
    """
    View-model for the task list.

    Talks to the HTTP API through ``http`` (any ``httpx.Client``, including
    FastAPI's ``TestClient``), draws through ``view`` and reports problems
    through ``notifier``. The only session state is ``editing_id``.

    Each action returns True when it completed. On any failure the user is
    alerted, the detail is logged, and neither ``editing_id`` nor the last
    render is touched.
    """

    def __init__(
        self,
        http: httpx.Client,
        view: TaskView,
        notifier: Notifier,
        base_path: str = "/tasks",
    ) -> None:
        self.http = http
        self.view = view
        self.notifier = notifier
        self.base_path = base_path.rstrip("/")
        self.editing_id: Optional[int] = None
        self.tasks: List[Dict[str, Any]] = []

    def _url(self, task_id: Optional[int] = None) -> str:
        return self.base_path if task_id is None else f"{self.base_path}/{task_id}"

    def _get_task(self, task_id: int) -> Dict[str, Any]:
        response = self.http.get(self._url(task_id))
        response.raise_for_status()
        return response.json()

    # PUBLIC_INTERFACE
    def load(self) -> bool:
        """Fetch every task, render the list and rebind the row actions."""
        try:
            response = self.http.get(self._url())
            response.raise_for_status()
            tasks = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error loading tasks: %s", exc)
            self.notifier.alert("Error loading tasks")
            return False

        self.tasks = tasks
        self.view.render(tasks)
        self.view.bind({"toggle": self.toggle, "edit": self.edit, "delete": self.delete})
        return True

    # PUBLIC_INTERFACE
    def submit(self, title: str, description: str = "") -> bool:
        """
        Save the form: update the task being edited, or create a new one.
        """
        title = (title or "").strip()
        description = (description or "").strip()
        if not title:
            self.notifier.alert("Title is required")
            return False

        try:
            if self.editing_id is not None:
                current = self._get_task(self.editing_id)
                response = self.http.put(
                    self._url(self.editing_id),
                    json={
                        "title": title,
                        "description": description,
                        "completed": bool(current.get("completed")),
                    },
                )
            else:
                response = self.http.post(self._url(), json={"title": title, "description": description})
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error saving task: %s", exc)
            self.notifier.alert("Error saving task")
            return False

        if response.is_error:
            self.notifier.alert(f"Error: {_server_error(response)}")
            return False

        self.reset_form()
        self.load()
        return True

    # PUBLIC_INTERFACE
    def edit(self, task_id: int) -> bool:
        """Enter edit mode for ``task_id`` and fill the form with its values."""
        try:
            task = self._get_task(task_id)
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error loading task for edit: %s", exc)
            self.notifier.alert("Error loading task")
            return False

        self.editing_id = task_id
        self.view.show_form(task["title"], task.get("description") or "", editing=True)
        return True

    # PUBLIC_INTERFACE
    def cancel_edit(self) -> None:
        self.reset_form()

    def reset_form(self) -> None:
        self.editing_id = None
        self.view.reset_form()

    # PUBLIC_INTERFACE
    def toggle(self, task_id: int, completed: bool) -> bool:
        """Set the completed flag of ``task_id``, keeping its other fields."""
        try:
            task = self._get_task(task_id)
            response = self.http.put(
                self._url(task_id),
                json={"title": task["title"], "description": task.get("description"), "completed": completed},
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error toggling task: %s", exc)
            self.notifier.alert("Error updating task")
            return False

        if response.is_error:
            self.notifier.alert("Error updating task status")
            return False

        self.load()
        return True

    # PUBLIC_INTERFACE
    def delete(self, task_id: int) -> bool:
        """Delete ``task_id`` after the user confirms."""
        if not self.notifier.confirm("Are you sure you want to delete this task?"):
            return False

        try:
            response = self.http.delete(self._url(task_id))
        except httpx.HTTPError as exc:
            logger.error("Error deleting task: %s", exc)
            self.notifier.alert("Error deleting task")
            return False

        if response.is_error:
            self.notifier.alert("Error deleting task")
            return False

        self.load()
        return True
