from __future__ import annotations

import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from ..schemas import CreateTaskRequest, TaskDto, UpdateTaskRequest

logger = logging.getLogger(__name__)

TASKS_PATH = "/api/tasks"


class ApiError(Exception):
    """
    A task API call failed: transport error, non-2xx status or unexpected body.

    str(error) is a message fit to show to the user.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _envelope_reason(response: httpx.Response) -> Optional[str]:
    # Prefer the server's own explanation when the body is an error envelope.
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    details = body.get("details")
    if body.get("error") == "ValidationFailed" and isinstance(details, list) and details:
        return " ".join(str(d) for d in details)
    message = body.get("message")
    return str(message) if message else None


class TasksApi:
    """
    Async client for the task HTTP API.

    :param base_url: API root, e.g. "http://localhost:8000"
    :param client: optional pre-built httpx.AsyncClient (closed by its owner, not here)
    :param timeout: request timeout in seconds for the client built here
    """

    def __init__(
        self,
        base_url: Optional[str],
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 5.0,
    ) -> None:
        self.base = (base_url or "").rstrip("/")
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "TasksApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _url(self, path: str) -> str:
        if not self.base:
            raise ApiError("API base URL is not configured.")
        return f"{self.base}{path}"

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = self._url(path)
        try:
            return await self._client.request(method, url, headers={"Accept": "application/json"}, **kwargs)
        except httpx.InvalidURL as e:
            logger.warning("%s %s has an invalid URL: %s", method, path, e)
            raise ApiError(f"Invalid API URL for {method} {path}: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(f"Network error while calling {method} {path}: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
        if response.is_success:
            return
        text = f"HTTP {response.status_code} while calling {method} {path}."
        reason = _envelope_reason(response)
        if reason:
            text = f"{text} {reason}"
        raise ApiError(text, status_code=response.status_code)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Unexpected API response: body is not JSON.") from e

    @staticmethod
    def _parse_task(data: Any) -> TaskDto:
        try:
            return TaskDto.model_validate(data)
        except ValidationError as e:
            raise ApiError("Unexpected API response: malformed task.") from e

    async def get_tasks(self) -> List[TaskDto]:
        """
        Fetch all tasks.
        :return: tasks in server order (id ascending)
        """
        response = await self._send("GET", TASKS_PATH)
        self._raise_for_status(response, "GET", TASKS_PATH)
        data = self._json(response)
        if not isinstance(data, list):
            raise ApiError("Unexpected API response: expected an array of tasks.")
        return [self._parse_task(item) for item in data]

    async def create_task(self, request: CreateTaskRequest) -> TaskDto:
        """
        Create a task.
        :return: the created task including its server-assigned id
        """
        payload = request.model_dump(mode="json", by_alias=True)
        response = await self._send("POST", TASKS_PATH, json=payload)
        self._raise_for_status(response, "POST", TASKS_PATH)
        if response.status_code == 204 or not response.content:
            raise ApiError("API returned no content for create. Expected task payload.")
        return self._parse_task(self._json(response))

    async def update_task(self, task_id: int, request: UpdateTaskRequest) -> Optional[TaskDto]:
        """
        Replace a task. Returns the updated task when the API sends one back, otherwise None.
        """
        path = f"{TASKS_PATH}/{task_id}"
        payload = request.model_dump(mode="json", by_alias=True)
        response = await self._send("PUT", path, json=payload)
        self._raise_for_status(response, "PUT", path)
        if response.status_code == 204 or not response.content:
            return None
        if "application/json" not in response.headers.get("content-type", ""):
            return None
        return self._parse_task(self._json(response))

    async def delete_task(self, task_id: int) -> bool:
        """
        Delete a task. Returns True if deleted, False if the API answers 404.
        """
        path = f"{TASKS_PATH}/{task_id}"
        response = await self._send("DELETE", path)
        if response.status_code == 404:
            return False
        self._raise_for_status(response, "DELETE", path)
        return True
