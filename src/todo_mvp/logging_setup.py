from __future__ import annotations

import logging
import sys
from typing import Union


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep todo_mvp logs, let uvicorn report requests and startup,
    and only pass WARNING+ from every other library.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("todo_mvp") or name.startswith("uvicorn"):
            return True
        if name == "py.warnings":
            return record.levelno >= logging.ERROR
        return record.levelno >= logging.WARNING


# PUBLIC_INTERFACE
def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure the root logger with a single filtered stderr handler.

    Call this once at process start, before the first log record is emitted.
    Calling it again replaces the handler instead of stacking a duplicate.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    logging.captureWarnings(True)
