from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# PUBLIC_INTERFACE
class TaskPayload(BaseModel):
    """
    Request body for creating or replacing a task.

    ``title`` is optional at the schema level so that a missing or blank
    title reaches the router, which answers with a 400 "Title is required".
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Short title for the task", max_length=255)
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: bool = Field(default=False, description="Completion status flag (ignored on create)")

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, v: Any) -> Any:
        """
        Strip surrounding whitespace before the length check; a blank title
        becomes None. Non-string input is left for type validation.
        """
        if not isinstance(v, str):
            return v
        s = v.strip()
        return s or None


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 123,
                "title": "Buy groceries",
                "description": "Milk, eggs, bread",
                "completed": False,
                "created_at": "2025-01-25T10:15:30",
                "updated_at": "2025-01-26T09:00:00",
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Short title for the task")
    description: Optional[str] = Field(default=None, description="Optional detailed description")
    completed: bool = Field(..., description="Completion status flag")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class HealthOut(BaseModel):
    """Liveness report, independent of the database."""

    status: str = Field(..., description="Always 'OK' while the process serves requests")
    timestamp: datetime = Field(..., description="Current server time (UTC)")
    uptime: float = Field(..., description="Seconds since the application started")


class ErrorOut(BaseModel):
    """Error body shared by every failing endpoint."""

    error: str = Field(..., description="Human readable error message")
