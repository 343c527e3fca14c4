from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import Task

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000

# Shared type for incoming dueDate which can be a date, datetime, or ISO8601 string
DueDateInput = Union[date, datetime, str]


def _parse_due_date(value: Optional[DueDateInput]) -> Optional[datetime]:
    """
    Internal helper to normalize dueDate input into a datetime.
    - If value is a string, parse via datetime.fromisoformat (a trailing 'Z' is accepted);
      if time is missing, set to 00:00.
    - If value is a date (not datetime), convert to datetime at 00:00.
    - If value is a datetime, return as-is.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, 0, 0, 0)

    if isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        if s.endswith("Z") or s.endswith("z"):
            s = s[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(s)
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, 0, 0, 0)
            except ValueError as e:
                raise ValueError(
                    "DueDate must be an ISO8601 date or datetime (e.g., '2025-01-31' or '2025-01-31T13:45:00Z')."
                ) from e

    raise ValueError("DueDate must be an ISO8601 date or datetime string.")


def _normalize_title(v: Optional[str]) -> str:
    if v is None:
        raise ValueError("Title is required.")
    if not isinstance(v, str):
        raise ValueError("Title must be a string.")
    s = v.strip()
    if not s:
        raise ValueError("Title is required.")
    if len(s) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters.")
    return s


def _check_description(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters.")
    return v


class _CamelModel(BaseModel):
    """Base for wire models: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# PUBLIC_INTERFACE
class CreateTaskRequest(_CamelModel):
    """
    Body of POST /api/tasks. The server always creates tasks as not completed.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "dueDate": "2025-02-01T09:00:00Z",
            }
        },
    )

    title: str = Field(..., description="Short title for the task (1..200 chars after trimming)")
    description: Optional[str] = Field(default=None, description="Optional detailed description (<= 2000 chars)")
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date/time. Accepts ISO8601 date or datetime; dates are set to 00:00",
    )

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        """
        Strip whitespace and enforce 1..200 length.
        """
        return _normalize_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _check_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class UpdateTaskRequest(_CamelModel):
    """
    Body of PUT /api/tasks/{id}.

    Full replace: every mutable field is written, so an omitted description or
    dueDate clears the stored value and an omitted isCompleted resets it to False.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "description": "Milk, eggs, bread, and paper towels",
                "isCompleted": True,
                "dueDate": "2025-02-02T09:30:00Z",
            }
        },
    )

    title: str = Field(..., description="Short title for the task (1..200 chars after trimming)")
    description: Optional[str] = Field(default=None, description="Optional detailed description (<= 2000 chars)")
    is_completed: bool = Field(default=False, description="Completion status flag")
    due_date: Optional[datetime] = Field(
        default=None,
        description="Due date/time. Accepts ISO8601 date or datetime; dates are set to 00:00",
    )

    @field_validator("title", mode="before")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> str:
        return _normalize_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]) -> Optional[str]:
        return _check_description(v)

    @field_validator("due_date", mode="before")
    @classmethod
    def parse_due_date(cls, v: Optional[DueDateInput]) -> Optional[datetime]:
        return _parse_due_date(v)


# PUBLIC_INTERFACE
class TaskDto(_CamelModel):
    """
    Representation of a task returned by the API (and parsed back by the client).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "isCompleted": False,
                "dueDate": "2025-02-01T00:00:00Z",
                "createdAt": "2025-01-25T10:15:30.123456Z",
                "updatedAt": None,
            }
        },
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    is_completed: bool = Field(..., description="Completion status flag")
    due_date: Optional[datetime] = Field(default=None, description="Due date/time as an ISO8601 datetime")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")
    updated_at: Optional[datetime] = Field(default=None, description="Last update timestamp (UTC), null if never updated")

    @classmethod
    def from_entity(cls, task: Task) -> "TaskDto":
        return cls(
            id=task.id,
            title=task.title,
            description=task.description,
            is_completed=task.is_completed,
            due_date=task.due_date,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


# PUBLIC_INTERFACE
class ApiErrorResponse(BaseModel):
    """
    Uniform body of every non-2xx response.

    error is a short code: NotFound, ValidationFailed or ServerError.
    """

    error: str = Field(..., description="Short error code")
    message: Optional[str] = Field(default=None, description="Human-readable message")
    details: Optional[List[str]] = Field(default=None, description="Violated rules or diagnostic identifiers")


# PUBLIC_INTERFACE
class HealthResponse(BaseModel):
    """Body of GET /api/health."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str = Field("ok", description="Always 'ok' while the process serves requests")
    timestamp_utc: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
