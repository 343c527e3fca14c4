from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from .schemas import ApiErrorResponse

logger = logging.getLogger(__name__)

NOT_FOUND = "NotFound"
VALIDATION_FAILED = "ValidationFailed"
SERVER_ERROR = "ServerError"


class StorageError(RuntimeError):
    """Raised by a repository when the underlying storage cannot serve the call."""


class TaskNotFoundError(LookupError):
    """Raised by the HTTP layer when a task id has no matching row."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task with id '{task_id}' was not found.")
        self.task_id = task_id


def error_response(
    status_code: int,
    error: str,
    message: Optional[str] = None,
    details: Optional[Sequence[str]] = None,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Build a JSON response carrying the uniform error envelope."""
    body = ApiErrorResponse(error=error, message=message, details=list(details) if details is not None else None)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


def _field_label(loc: Sequence[Any]) -> Optional[str]:
    # loc looks like ("body", "title"); the body itself has no field name
    names = [part for part in loc if isinstance(part, str) and part != "body"]
    if not names:
        return None
    name = names[-1]
    return name[:1].upper() + name[1:]


def format_validation_errors(errors: Sequence[Dict[str, Any]]) -> List[str]:
    """
    Turn pydantic error dicts into one readable sentence per violated rule.
    """
    details: List[str] = []
    for err in errors:
        kind = err.get("type", "")
        label = _field_label(err.get("loc", ()))
        msg = str(err.get("msg", "Invalid value."))

        if kind == "json_invalid":
            text = "Request body is not valid JSON."
        elif kind == "missing":
            text = f"{label} is required." if label else "Request body is required."
        elif kind == "value_error":
            text = msg.removeprefix("Value error, ")
        elif label:
            text = f"{label}: {msg}"
        else:
            text = msg

        if text not in details:
            details.append(text)
    return details


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Return 400 with the ValidationFailed envelope.

    Response format:
        {
            "error": "ValidationFailed",
            "message": "Request validation failed.",
            "details": ["Title is required.", ...]
        }
    """
    details = format_validation_errors(exc.errors())
    logger.debug("Validation failed for %s %s: %s", request.method, request.url.path, details)
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        VALIDATION_FAILED,
        message="Request validation failed.",
        details=details,
    )


async def not_found_handler(request: Request, exc: TaskNotFoundError) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND, message=str(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown routes, wrong methods) in the envelope."""
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        code = NOT_FOUND
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        code = "MethodNotAllowed"
    elif exc.status_code >= 500:
        code = SERVER_ERROR
    else:
        code = "HttpError"
    message = exc.detail if isinstance(exc.detail, str) else None
    return error_response(exc.status_code, code, message=message, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Log the failure with a fresh trace id and answer 500 without exception details.
    """
    trace_id = uuid.uuid4().hex
    logger.error(
        "Unhandled exception. TraceId=%s, Method=%s, Path=%s",
        trace_id,
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        SERVER_ERROR,
        message="An unexpected error occurred.",
        details=[f"TraceId: {trace_id}"],
        headers={"X-Trace-Id": trace_id},
    )


async def catch_unhandled_exceptions(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    Turn an unexpected exception into the ServerError envelope inside the
    middleware stack, so CORS headers are still applied to the 500 response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)


# PUBLIC_INTERFACE
def install_exception_handlers(app: FastAPI) -> None:
    """
    Register the handlers that map every failure onto the error envelope.

    Call this before adding CORSMiddleware: middleware added later wraps the
    catch-all added here.
    """
    app.middleware("http")(catch_unhandled_exceptions)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(TaskNotFoundError, not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_exception_handler)
