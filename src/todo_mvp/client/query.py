from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from ..schemas import TaskDto
from .tasks_api import ApiError, TasksApi

logger = logging.getLogger(__name__)


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


# PUBLIC_INTERFACE
class TasksQuery:
    """
    Loads the task list and exposes status, error and tasks.

    idle -> loading -> success | error, and back to loading on every reload().
    A reload cancels the load still in flight, so a slow stale response can
    never overwrite a newer one. The cancelled load is not reported as an error.

    When a load fails the previously loaded tasks are kept as they were;
    callers decide whether to show them next to the error.
    """

    def __init__(self, api: TasksApi) -> None:
        self._api = api
        self.status = QueryStatus.IDLE
        self.error: Optional[str] = None
        self.tasks: List[TaskDto] = []
        self._inflight: Optional[asyncio.Task] = None

    @property
    def is_loading(self) -> bool:
        return self.status is QueryStatus.LOADING

    async def mount(self) -> None:
        """Initial load, the equivalent of the first render."""
        await self.reload()

    async def reload(self) -> None:
        previous = self._inflight
        if previous is not None and not previous.done():
            previous.cancel()

        # What to fall back to if the caller abandons this load.
        settled = self.status if self.status is not QueryStatus.LOADING else QueryStatus.IDLE
        self.status = QueryStatus.LOADING
        self.error = None

        load = asyncio.ensure_future(self._api.get_tasks())
        self._inflight = load
        try:
            result = await load
        except asyncio.CancelledError:
            if self._inflight is not load:
                logger.debug("Superseded task load cancelled")
                return
            # Our own caller was cancelled, not superseded by a newer reload.
            self._inflight = None
            self.status = settled
            raise
        except ApiError as e:
            if self._inflight is load:
                self.error = str(e)
                self.status = QueryStatus.ERROR
                self._inflight = None
            return

        if self._inflight is load:
            self.tasks = result
            self.status = QueryStatus.SUCCESS
            self._inflight = None
