from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Optional, TypeVar

from ..schemas import CreateTaskRequest, TaskDto, UpdateTaskRequest
from .tasks_api import TasksApi

T = TypeVar("T")


@dataclass
class OperationState:
    pending: bool = False
    error: Optional[str] = None


# PUBLIC_INTERFACE
class TaskMutations:
    """
    create / update / remove, each with its own pending flag and error message,
    so a failed delete never blocks a create running at the same time.

    Failures are recorded and re-raised. Nothing here reloads the list.
    """

    def __init__(self, api: TasksApi) -> None:
        self._api = api
        self.create_state = OperationState()
        self.update_state = OperationState()
        self.remove_state = OperationState()

    @property
    def is_saving(self) -> bool:
        return self.create_state.pending or self.update_state.pending

    @property
    def is_deleting(self) -> bool:
        return self.remove_state.pending

    async def _run(self, state: OperationState, call: Awaitable[T]) -> T:
        state.pending = True
        state.error = None
        try:
            return await call
        except Exception as e:
            state.error = str(e) or "Unknown error."
            raise
        finally:
            state.pending = False

    async def create(self, request: CreateTaskRequest) -> TaskDto:
        return await self._run(self.create_state, self._api.create_task(request))

    async def update(self, task_id: int, request: UpdateTaskRequest) -> Optional[TaskDto]:
        return await self._run(self.update_state, self._api.update_task(task_id, request))

    async def remove(self, task_id: int) -> bool:
        return await self._run(self.remove_state, self._api.delete_task(task_id))
