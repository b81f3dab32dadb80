from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from html import escape
from typing import Any, Callable, Dict, List, Mapping, Protocol, Sequence, Tuple

# action name -> handler(task_id, *args)
Actions = Mapping[str, Callable[..., Any]]

EMPTY_MESSAGE = "No tasks yet. Create your first task!"


# PUBLIC_INTERFACE
class TaskView(Protocol):
    """What the controller needs from a UI: render a list, wire actions, drive the form."""

    def render(self, tasks: Sequence[Mapping[str, Any]]) -> str:
        ...

    def bind(self, actions: Actions) -> None:
        ...

    def show_form(self, title: str, description: str, editing: bool) -> None:
        ...

    def reset_form(self) -> None:
        ...


def _format_timestamp(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M:%S")
    except ValueError:
        return str(value)


@dataclass
class FormState:
    title: str = ""
    description: str = ""
    submit_label: str = "Add Task"
    cancel_visible: bool = False


# PUBLIC_INTERFACE
@dataclass
class HtmlTaskView:
    """
    Renders tasks as HTML fragments.

    Every ``render`` replaces ``markup`` and the table of rendered buttons as
    a whole, and drops the handlers bound to the previous render. ``click``
    plays the role of a user pressing one of the rendered buttons.
    """

    markup: str = ""
    form: FormState = field(default_factory=FormState)
    _buttons: Dict[Tuple[str, int], Tuple[Any, ...]] = field(default_factory=dict, repr=False)
    _handlers: Dict[str, Callable[..., Any]] = field(default_factory=dict, repr=False)

    def render(self, tasks: Sequence[Mapping[str, Any]]) -> str:
        self._handlers = {}
        self._buttons = {}
        if not tasks:
            self.markup = f"<p>{escape(EMPTY_MESSAGE)}</p>"
            return self.markup

        self.markup = "".join(self._render_item(task) for task in tasks)
        return self.markup

    def _render_item(self, task: Mapping[str, Any]) -> str:
        task_id = int(task["id"])
        completed = bool(task.get("completed"))
        toggle_to = not completed
        self._buttons[("toggle", task_id)] = (toggle_to,)
        self._buttons[("edit", task_id)] = ()
        self._buttons[("delete", task_id)] = ()

        parts: List[str] = [
            f'<div class="task-item{" completed" if completed else ""}">',
            '<div class="task-title">',
            escape(str(task["title"])),
            f' <span class="status-badge {"status-completed" if completed else "status-pending"}">'
            f'{"Completed" if completed else "Pending"}</span>',
            "</div>",
        ]
        if task.get("description"):
            parts.append(f'<div class="task-description">{escape(str(task["description"]))}</div>')

        meta = f"Created: {escape(_format_timestamp(task.get('created_at')))}"
        if task.get("updated_at") != task.get("created_at"):
            meta += f"<br>Updated: {escape(_format_timestamp(task.get('updated_at')))}"
        parts.append(f'<div class="task-meta">{meta}</div>')

        parts.extend(
            [
                '<div class="task-actions">',
                f'<button data-action="toggle" data-id="{task_id}" data-completed="{str(toggle_to).lower()}">'
                f'{"Mark Incomplete" if completed else "Mark Complete"}</button>',
                f'<button class="edit" data-action="edit" data-id="{task_id}">Edit</button>',
                f'<button class="delete" data-action="delete" data-id="{task_id}">Delete</button>',
                "</div>",
                "</div>",
            ]
        )
        return "".join(parts)

    def bind(self, actions: Actions) -> None:
        self._handlers = dict(actions)

    def click(self, action: str, task_id: int) -> Any:
        """
        Dispatch a click on a rendered button.

        Raises:
            LookupError: no such button in the current render, or nothing bound
                to its action.
        """
        args = self._buttons.get((action, task_id))
        if args is None:
            raise LookupError(f"No '{action}' button rendered for task {task_id}")
        handler = self._handlers.get(action)
        if handler is None:
            raise LookupError(f"No handler bound for '{action}'")
        return handler(task_id, *args)

    def show_form(self, title: str, description: str, editing: bool) -> None:
        self.form = FormState(
            title=title,
            description=description,
            submit_label="Update Task" if editing else "Add Task",
            cancel_visible=editing,
        )

    def reset_form(self) -> None:
        self.form = FormState()

