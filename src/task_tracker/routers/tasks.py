from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Request, Response, status
from sqlalchemy.engine import Engine

from .. import repositories
from ..db import StorageGateway
from ..errors import storage_errors, task_not_found, title_required
from ..schemas import ErrorOut, TaskOut, TaskPayload

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
)


def get_gateway(request: Request) -> StorageGateway:
    """
    Dependency returning the gateway the application was built with.
    """
    return request.app.state.gateway


def _pool(gateway: StorageGateway) -> Engine:
    return gateway.get_connection_pool()


def _require_title(payload: Optional[TaskPayload]) -> TaskPayload:
    """
    A missing body, a JSON null body and a missing or blank title all mean
    "no title".
    """
    if payload is None or not payload.title:
        raise title_required()
    return payload


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TaskOut],
    summary="List Tasks",
    description="List every task, newest first. Returns an empty array when there are none.",
    responses={
        200: {"description": "Tasks retrieved successfully"},
        500: {"model": ErrorOut, "description": "Storage error"},
    },
)
def list_tasks(gateway: StorageGateway = Depends(get_gateway)) -> List[TaskOut]:
    """
    List all tasks ordered by creation time, descending.
    """
    with storage_errors("Failed to fetch tasks"):
        items = repositories.list_all(_pool(gateway))
    return [TaskOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.get(
    "/{task_id}",
    response_model=TaskOut,
    summary="Get Task",
    description="Get a single task by ID.",
    responses={
        200: {"description": "Task found"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Storage error"},
    },
)
def get_task(task_id: int, gateway: StorageGateway = Depends(get_gateway)) -> TaskOut:
    """
    Retrieve a single task by its ID.
    """
    with storage_errors("Failed to fetch task"):
        item = repositories.get_by_id(_pool(gateway), task_id)
    if item is None:
        raise task_not_found()
    return TaskOut(**item)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TaskOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Task",
    description="Create a new task. It always starts out not completed.",
    responses={
        201: {"description": "Task created successfully"},
        400: {"model": ErrorOut, "description": "Title missing"},
        500: {"model": ErrorOut, "description": "Storage error"},
    },
)
def create_task(
    payload: Optional[TaskPayload] = Body(default=None),
    gateway: StorageGateway = Depends(get_gateway),
) -> TaskOut:
    """
    Create a new task from title and description.
    """
    payload = _require_title(payload)
    with storage_errors("Failed to create task"):
        created = repositories.create(_pool(gateway), payload.title, payload.description)
    return TaskOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/{task_id}",
    response_model=TaskOut,
    summary="Replace Task",
    description=(
        "Replace title, description and completed of an existing task. "
        "Omitted fields are reset (description to null, completed to false)."
    ),
    responses={
        200: {"description": "Task updated"},
        400: {"model": ErrorOut, "description": "Title missing"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Storage error"},
    },
)
def put_task(
    task_id: int,
    payload: Optional[TaskPayload] = Body(default=None),
    gateway: StorageGateway = Depends(get_gateway),
) -> TaskOut:
    """
    Full update (replace) of a task.
    """
    payload = _require_title(payload)
    with storage_errors("Failed to update task"):
        updated = repositories.update(
            _pool(gateway),
            task_id,
            payload.title,
            payload.description,
            payload.completed,
        )
    if updated is None:
        raise task_not_found()
    return TaskOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Task",
    description="Delete a task by ID.",
    responses={
        204: {"description": "Task deleted"},
        404: {"model": ErrorOut, "description": "Task not found"},
        500: {"model": ErrorOut, "description": "Storage error"},
    },
)
def delete_task(task_id: int, gateway: StorageGateway = Depends(get_gateway)) -> Response:
    """
    Delete a task. Returns 204 on success, 404 if not found.
    """
    with storage_errors("Failed to delete task"):
        ok = repositories.delete(_pool(gateway), task_id)
    if not ok:
        raise task_not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
