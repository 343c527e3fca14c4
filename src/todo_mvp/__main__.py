"""
Run the API with uvicorn using the environment-driven settings.

Usage:
    python -m todo_mvp
"""
from __future__ import annotations

import uvicorn

from .logging_setup import setup_logging
from .settings import get_settings


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    from .main import create_app

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
