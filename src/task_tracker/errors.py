from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import status
from sqlalchemy.exc import SQLAlchemyError

from .db import StorageError

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TaskAPIError(Exception):
    """
    An error answered to the client as ``{"error": message}`` with the given
    HTTP status code.
    """

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def title_required() -> TaskAPIError:
    return TaskAPIError(status.HTTP_400_BAD_REQUEST, "Title is required")


def task_not_found() -> TaskAPIError:
    return TaskAPIError(status.HTTP_404_NOT_FOUND, "Task not found")


# PUBLIC_INTERFACE
@contextmanager
def storage_errors(message: str) -> Iterator[None]:
    """
    Turn any storage failure inside the block into a 500 carrying the generic
    ``message``. The original exception is logged with its traceback and is
    never sent to the client.
    """
    try:
        yield
    except (SQLAlchemyError, StorageError) as exc:
        logger.exception("%s: %s", message, exc)
        raise TaskAPIError(status.HTTP_500_INTERNAL_SERVER_ERROR, message) from exc
    except Exception as exc:
        logger.exception("%s (unexpected error): %s", message, exc)
        raise TaskAPIError(status.HTTP_500_INTERNAL_SERVER_ERROR, message) from exc
