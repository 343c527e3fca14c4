from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .errors import install_exception_handlers
from .repositories import TaskRepository, get_repository
from .routers import health as health_router
from .routers import tasks as tasks_router
from .services import TaskService
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "CRUD operations for tasks."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    repository: Optional[TaskRepository] = None,
) -> FastAPI:
    """
    Assemble the application: repository -> service -> routers.

    The repository defaults to the one selected by settings.persistence_backend;
    pass one explicitly to share or isolate storage (tests do this).
    """
    settings = settings or get_settings()
    repository = repository if repository is not None else get_repository(settings)

    app = FastAPI(
        title="Todo MVP",
        description="Task management API with pluggable storage backends.",
        version="0.1.0",
        openapi_tags=openapi_tags,
    )
    app.state.settings = settings
    app.state.task_service = TaskService(repository)

    install_exception_handlers(app)

    allow_all = settings.cors_allow_origins == ["*"] or len(settings.cors_allow_origins) == 0
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location"],
    )

    app.include_router(health_router.router)
    app.include_router(tasks_router.router)

    logger.debug("Application assembled with %s", type(repository).__name__)
    return app

