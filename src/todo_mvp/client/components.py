"""
Text renderers for the task views, plus the form model behind TaskForm.

Each render_* function returns the lines of one component joined by newlines,
so pages can be printed to a terminal or asserted on in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from ..schemas import (
    DESCRIPTION_MAX_LENGTH,
    TITLE_MAX_LENGTH,
    CreateTaskRequest,
    TaskDto,
    UpdateTaskRequest,
)


class StatusFilter(str, Enum):
    ALL = "all"
    OPEN = "open"
    COMPLETED = "completed"


_FILTER_LABELS = {
    StatusFilter.ALL: "All",
    StatusFilter.OPEN: "Open",
    StatusFilter.COMPLETED: "Completed",
}


def filter_tasks(tasks: Iterable[TaskDto], status_filter: StatusFilter) -> List[TaskDto]:
    """Keep the tasks matching the status filter, preserving order."""
    if status_filter is StatusFilter.ALL:
        return list(tasks)
    want_completed = status_filter is StatusFilter.COMPLETED
    return [t for t in tasks if t.is_completed == want_completed]


def format_optional_date(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.strftime("%Y-%m-%d %H:%M")


@dataclass
class TaskFormValues:
    """What the user typed into the create/edit form."""

    title: str = ""
    description: str = ""
    due_date: Optional[datetime] = None
    is_completed: bool = False

    @classmethod
    def from_task(cls, task: TaskDto) -> "TaskFormValues":
        return cls(
            title=task.title,
            description=task.description or "",
            due_date=task.due_date,
            is_completed=task.is_completed,
        )

    def validate(self) -> List[str]:
        errors: List[str] = []
        title = self.title.strip()
        if not title:
            errors.append("Title is required.")
        elif len(title) > TITLE_MAX_LENGTH:
            errors.append(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
        if len(self.description.strip()) > DESCRIPTION_MAX_LENGTH:
            errors.append(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters.")
        return errors

    def _description_or_none(self) -> Optional[str]:
        desc = self.description.strip()
        return desc if desc else None

    def to_create_request(self) -> CreateTaskRequest:
        return CreateTaskRequest(
            title=self.title.strip(),
            description=self._description_or_none(),
            due_date=self.due_date,
        )

    def to_update_request(self) -> UpdateTaskRequest:
        return UpdateTaskRequest(
            title=self.title.strip(),
            description=self._description_or_none(),
            is_completed=self.is_completed,
            due_date=self.due_date,
        )


def render_task_card(task: TaskDto, is_deleting: bool = False) -> str:
    badge = "Completed" if task.is_completed else "Open"
    lines = [f"#{task.id} {task.title} [{badge}]"]
    if task.description:
        lines.append(f"    {task.description}")
    due = format_optional_date(task.due_date)
    if due:
        lines.append(f"    Due: {due}")
    lines.append(f"    [Edit] [{'Deleting...' if is_deleting else 'Delete'}]")
    return "\n".join(lines)


def render_task_list(tasks: Sequence[TaskDto], is_deleting: bool = False) -> str:
    return "\n".join(render_task_card(t, is_deleting) for t in tasks)


def render_task_filter(value: StatusFilter, disabled: bool = False) -> str:
    options = " ".join(
        f"({label})" if f is value else label for f, label in _FILTER_LABELS.items()
    )
    suffix = " (disabled)" if disabled else ""
    return f"Filter: {options}{suffix}"


def render_task_form(
    editing: bool,
    values: TaskFormValues,
    is_saving: bool = False,
    error_message: Optional[str] = None,
    validation_errors: Sequence[str] = (),
) -> str:
    lines = ["Edit Task" if editing else "Create Task"]
    if error_message:
        lines.append(f"Error: {error_message}")
    for problem in validation_errors:
        lines.append(f"! {problem}")
    lines.append(f"Title *: {values.title}")
    lines.append(f"Description: {values.description}")
    lines.append(f"Due date: {format_optional_date(values.due_date) or ''}")
    if editing:
        lines.append(f"Completed: {'[x]' if values.is_completed else '[ ]'}")
    if is_saving:
        submit = "Saving..."
    else:
        submit = "Save" if editing else "Create"
    lines.append(f"[Cancel] [{submit}]")
    return "\n".join(lines)


def render_confirm_dialog(task: TaskDto, is_deleting: bool = False, error_message: Optional[str] = None) -> str:
    lines = ["Delete task", f'Delete "{task.title}"? This cannot be undone.']
    if error_message:
        lines.append(f"Delete error: {error_message}")
    confirm = "Deleting..." if is_deleting else "Delete"
    lines.append(f"[Cancel] [{confirm}]")
    return "\n".join(lines)
