"""
SQL statements against the ``tasks`` table.

Every function takes the pooled engine from ``StorageGateway`` as its first
argument and holds no state of its own. Database failures propagate as
``sqlalchemy.exc.SQLAlchemyError``.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete as sql_delete
from sqlalchemy import insert, select
from sqlalchemy import update as sql_update
from sqlalchemy.engine import Engine, RowMapping

from .db import tasks
from .models import TaskEntity


def _row_to_entity(row: RowMapping) -> TaskEntity:
    return {
        "id": int(row["id"]),
        "title": str(row["title"]),
        "description": row["description"],
        "completed": bool(row["completed"]),
        "created_at": row["created_at"],
        "updated_at": row["updated_at"],
    }


# PUBLIC_INTERFACE
def list_all(pool: Engine) -> List[TaskEntity]:
    """Return every task, newest first. Empty list when the table is empty."""
    stmt = select(tasks).order_by(tasks.c.created_at.desc(), tasks.c.id.desc())
    with pool.connect() as conn:
        rows = conn.execute(stmt).mappings().all()
    return [_row_to_entity(r) for r in rows]


# PUBLIC_INTERFACE
def get_by_id(pool: Engine, task_id: int) -> Optional[TaskEntity]:
    """Return the task with ``task_id`` or None if there is no such row."""
    stmt = select(tasks).where(tasks.c.id == task_id)
    with pool.connect() as conn:
        row = conn.execute(stmt).mappings().first()
    return _row_to_entity(row) if row is not None else None


# PUBLIC_INTERFACE
def create(pool: Engine, title: str, description: Optional[str]) -> TaskEntity:
    """
    Insert a new, not completed task and return the stored row.

    The caller guarantees ``title`` is non-empty.
    """
    stmt = insert(tasks).values(title=title, description=description, completed=False)
    with pool.begin() as conn:
        result = conn.execute(stmt)
        new_id = result.inserted_primary_key[0]
        row = conn.execute(select(tasks).where(tasks.c.id == new_id)).mappings().one()
    return _row_to_entity(row)


# PUBLIC_INTERFACE
def update(
    pool: Engine,
    task_id: int,
    title: str,
    description: Optional[str],
    completed: bool,
) -> Optional[TaskEntity]:
    """
    Overwrite title, description and completed of an existing task.

    Returns the refreshed row, or None when no row has ``task_id``. The
    affected-row count decides "not found" before any re-read happens.
    """
    stmt = (
        sql_update(tasks)
        .where(tasks.c.id == task_id)
        .values(title=title, description=description, completed=bool(completed))
    )
    with pool.begin() as conn:
        result = conn.execute(stmt)
        if result.rowcount == 0:
            return None
        row = conn.execute(select(tasks).where(tasks.c.id == task_id)).mappings().first()
    return _row_to_entity(row) if row is not None else None


# PUBLIC_INTERFACE
def delete(pool: Engine, task_id: int) -> bool:
    """Delete a task. Return True if a row was removed, False if none matched."""
    with pool.begin() as conn:
        result = conn.execute(sql_delete(tasks).where(tasks.c.id == task_id))
    return result.rowcount > 0
