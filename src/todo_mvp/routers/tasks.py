from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from ..errors import TaskNotFoundError
from ..schemas import ApiErrorResponse, CreateTaskRequest, TaskDto, UpdateTaskRequest
from ..services import TaskService

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
)

_ERROR_RESPONSES = {
    400: {"model": ApiErrorResponse, "description": "Validation failed"},
    404: {"model": ApiErrorResponse, "description": "Task not found"},
}


def get_task_service(request: Request) -> TaskService:
    """
    Dependency returning the service assembled by create_app.
    """
    return request.app.state.task_service


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskDto],
    summary="List Tasks",
    description="Return every task ordered by id ascending. The list may be empty.",
)
@router.get("/", response_model=List[TaskDto], include_in_schema=False)
def list_tasks(service: TaskService = Depends(get_task_service)) -> List[TaskDto]:
    return service.list_tasks()


# PUBLIC_INTERFACE
@router.get(
    "/{task_id:int}",
    response_model=TaskDto,
    summary="Get Task",
    description="Get a single task by id.",
    responses={404: _ERROR_RESPONSES[404]},
)
def get_task(task_id: int, service: TaskService = Depends(get_task_service)) -> TaskDto:
    """
    Retrieve a single task by its id, 404 if absent.
    """
    task = service.get_task(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskDto,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task and return it with a Location header pointing at the resource.",
    responses={400: _ERROR_RESPONSES[400]},
)
@router.post("/", response_model=TaskDto, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_task(
    payload: CreateTaskRequest,
    response: Response,
    service: TaskService = Depends(get_task_service),
) -> TaskDto:
    created = service.create_task(payload)
    response.headers["Location"] = f"{router.prefix}/{created.id}"
    return created


# PUBLIC_INTERFACE
@router.put(
    "/{task_id:int}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Replace Task",
    description=(
        "Replace title, description, isCompleted and dueDate of an existing task. "
        "Omitted optional fields are cleared."
    ),
    responses=_ERROR_RESPONSES,
)
def update_task(
    task_id: int,
    payload: UpdateTaskRequest,
    service: TaskService = Depends(get_task_service),
) -> Response:
    if not service.update_task(task_id, payload):
        raise TaskNotFoundError(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id:int}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Task",
    description="Delete a task by id. Deletion is permanent.",
    responses={404: _ERROR_RESPONSES[404]},
)
def delete_task(task_id: int, service: TaskService = Depends(get_task_service)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    if not service.delete_task(task_id):
        raise TaskNotFoundError(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
