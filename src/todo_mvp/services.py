from __future__ import annotations

import logging
from typing import List, Optional

from .models import Task
from .repositories import TaskRepository
from .schemas import CreateTaskRequest, TaskDto, UpdateTaskRequest

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TaskService:
    """
    Task use-cases on top of a repository.

    Maps entities to TaskDto and never raises for a missing task: lookups
    return None and writes return False.
    """

    def __init__(self, repository: TaskRepository) -> None:
        self._repository = repository

    def list_tasks(self) -> List[TaskDto]:
        return [TaskDto.from_entity(t) for t in self._repository.list_all()]

    def get_task(self, task_id: int) -> Optional[TaskDto]:
        task = self._repository.get_by_id(task_id)
        return None if task is None else TaskDto.from_entity(task)

    def create_task(self, request: CreateTaskRequest) -> TaskDto:
        task = Task(
            title=request.title,
            description=request.description,
            due_date=request.due_date,
            is_completed=False,
        )
        created = self._repository.add(task)
        logger.info("Created task %s", created.id)
        return TaskDto.from_entity(created)

    def update_task(self, task_id: int, request: UpdateTaskRequest) -> bool:
        existing = self._repository.get_by_id(task_id)
        if existing is None:
            logger.debug("Update skipped, task %s not found", task_id)
            return False

        existing.title = request.title
        existing.description = request.description
        existing.is_completed = request.is_completed
        existing.due_date = request.due_date

        # The row can vanish between the read and the write; report that as not found.
        updated = self._repository.update(existing)
        if updated:
            logger.info("Updated task %s", task_id)
        return updated

    def delete_task(self, task_id: int) -> bool:
        deleted = self._repository.delete_by_id(task_id)
        if deleted:
            logger.info("Deleted task %s", task_id)
        return deleted
