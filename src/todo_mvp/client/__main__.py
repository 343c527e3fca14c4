"""
Print the task page once, as loaded from the configured API.

Usage:
    API_BASE_URL=http://localhost:8000 python -m todo_mvp.client [all|open|completed]
"""
from __future__ import annotations

import asyncio
import sys

import httpx

from ..logging_setup import setup_logging
from ..settings import get_settings
from . import build_page


async def _show(status_filter: str) -> str:
    settings = get_settings()
    async with httpx.AsyncClient(timeout=5.0) as client:
        page = build_page(settings.api_base_url, client=client)
        page.set_filter(status_filter)
        await page.mount()
        return page.render()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    status_filter = sys.argv[1] if len(sys.argv) > 1 else "all"
    print(asyncio.run(_show(status_filter)))


if __name__ == "__main__":
    main()
