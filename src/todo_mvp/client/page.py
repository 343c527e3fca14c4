from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Union

from ..schemas import TaskDto
from .components import (
    StatusFilter,
    TaskFormValues,
    filter_tasks,
    render_confirm_dialog,
    render_task_filter,
    render_task_form,
    render_task_list,
)
from .mutations import TaskMutations
from .query import QueryStatus, TasksQuery
from .tasks_api import ApiError


@dataclass(frozen=True)
class Closed:
    pass


@dataclass(frozen=True)
class Creating:
    pass


@dataclass(frozen=True)
class Editing:
    task: TaskDto


FormState = Union[Closed, Creating, Editing]


# PUBLIC_INTERFACE
class TasksPage:
    """
    Composition root of the client UI.

    Owns the form state, the status filter and the task awaiting delete
    confirmation. The visible list is always derived from the query result and
    the filter. After every successful create, update or delete the list is
    reloaded from the server; nothing is updated optimistically.
    """

    def __init__(self, query: TasksQuery, mutations: TaskMutations) -> None:
        self.query = query
        self.mutations = mutations
        self.form: FormState = Closed()
        self.form_values = TaskFormValues()
        self.validation_errors: List[str] = []
        self.status_filter = StatusFilter.ALL
        self.pending_delete: Optional[TaskDto] = None

    async def mount(self) -> None:
        await self.query.mount()

    @property
    def visible_tasks(self) -> List[TaskDto]:
        return filter_tasks(self.query.tasks, self.status_filter)

    def set_filter(self, value: Union[str, StatusFilter]) -> None:
        self.status_filter = StatusFilter(value)

    def open_create(self) -> None:
        self.form = Creating()
        self.form_values = TaskFormValues()
        self.validation_errors = []

    def open_edit(self, task: TaskDto) -> None:
        self.form = Editing(task)
        self.form_values = TaskFormValues.from_task(task)
        self.validation_errors = []

    def close_form(self) -> None:
        self.form = Closed()
        self.validation_errors = []

    async def submit(self, values: Optional[TaskFormValues] = None) -> bool:
        """
        Create or update depending on the form mode.

        Returns True when the server accepted the change. On failure the form
        stays open and the error is available from the mutation state.
        """
        if values is not None:
            self.form_values = values
        form = self.form
        if isinstance(form, Closed):
            return False

        self.validation_errors = self.form_values.validate()
        if self.validation_errors:
            return False

        try:
            if isinstance(form, Editing):
                await self.mutations.update(form.task.id, self.form_values.to_update_request())
            else:
                await self.mutations.create(self.form_values.to_create_request())
        except ApiError:
            return False

        self.close_form()
        await self.query.reload()
        return True

    def request_delete(self, task: TaskDto) -> None:
        self.pending_delete = task

    def cancel_delete(self) -> None:
        self.pending_delete = None

    async def confirm_delete(self) -> bool:
        """
        Delete the task awaiting confirmation, then reload.

        A task that is already gone still closes the dialog and reloads so the
        list reflects the server. A failed call keeps the dialog open.
        """
        task = self.pending_delete
        if task is None:
            return False
        try:
            deleted = await self.mutations.remove(task.id)
        except ApiError:
            return False

        self.pending_delete = None
        await self.query.reload()
        return deleted

    def render(self) -> str:
        sections = ["Tasks  [+ New Task] [" + ("Loading..." if self.query.is_loading else "Refresh") + "]"]
        sections.append(render_task_filter(self.status_filter, disabled=self.query.is_loading))

        form = self.form
        if not isinstance(form, Closed):
            sections.append(
                render_task_form(
                    editing=isinstance(form, Editing),
                    values=self.form_values,
                    is_saving=self.mutations.is_saving,
                    error_message=(
                        self.mutations.update_state.error
                        if isinstance(form, Editing)
                        else self.mutations.create_state.error
                    ),
                    validation_errors=self.validation_errors,
                )
            )

        if self.pending_delete is not None:
            sections.append(
                render_confirm_dialog(
                    self.pending_delete,
                    is_deleting=self.mutations.is_deleting,
                    error_message=self.mutations.remove_state.error,
                )
            )
        elif self.mutations.remove_state.error:
            sections.append(f"Delete error: {self.mutations.remove_state.error}")

        status = self.query.status
        if status is QueryStatus.LOADING:
            sections.append("Loading tasks...")
        elif status is QueryStatus.ERROR:
            sections.append(f"Couldn't load tasks: {self.query.error or 'Unknown error'}\n[Retry]")
        elif status is QueryStatus.SUCCESS:
            visible = self.visible_tasks
            if not self.query.tasks:
                sections.append("No tasks yet.")
            elif not visible:
                sections.append("No tasks match this filter.")
            else:
                sections.append(render_task_list(visible, is_deleting=self.mutations.is_deleting))

        return "\n\n".join(sections)
