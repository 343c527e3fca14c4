"""
Async client for the task API: the HTTP calls, the list query, the
mutations and the page model that ties them together.
"""
from __future__ import annotations

from typing import Optional

import httpx

from .components import StatusFilter, TaskFormValues, filter_tasks
from .mutations import OperationState, TaskMutations
from .page import Closed, Creating, Editing, FormState, TasksPage
from .query import QueryStatus, TasksQuery
from .tasks_api import ApiError, TasksApi

__all__ = [
    "ApiError",
    "Closed",
    "Creating",
    "Editing",
    "FormState",
    "OperationState",
    "QueryStatus",
    "StatusFilter",
    "TaskFormValues",
    "TaskMutations",
    "TasksApi",
    "TasksPage",
    "TasksQuery",
    "build_page",
    "filter_tasks",
]


# PUBLIC_INTERFACE
def build_page(base_url: Optional[str], client: Optional[httpx.AsyncClient] = None) -> TasksPage:
    """Wire one TasksApi into a query, a mutations object and the page."""
    api = TasksApi(base_url, client=client)
    return TasksPage(TasksQuery(api), TaskMutations(api))
