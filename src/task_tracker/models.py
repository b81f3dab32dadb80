from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a row of the ``tasks`` table.

    Fields:
    - id: Unique integer identifier assigned by the database
    - title: Short title, never empty at rest
    - description: Optional detailed description
    - completed: Boolean completion flag, never null
    - created_at: Insert timestamp set by the database
    - updated_at: Last update timestamp, refreshed on every update
    """

    id: int
    title: str
    description: Optional[str]
    completed: bool
    created_at: datetime
    updated_at: datetime
