from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import StorageGateway
from .errors import TaskAPIError
from .logging_setup import setup_logging
from .routers import health as health_router
from .routers import tasks as tasks_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)

openapi_tags = [
    {"name": "health", "description": "Service health and status endpoints."},
    {"name": "tasks", "description": "CRUD operations for tasks."},
]


# PUBLIC_INTERFACE
def create_app(
    settings: Optional[Settings] = None,
    gateway: Optional[StorageGateway] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    The storage gateway is created here (or injected) and attached to
    ``app.state``; the lifespan initializes it before the first request and
    disposes it on shutdown. A failing ``initialize()`` aborts startup.
    """
    settings = settings or get_settings()
    gateway = gateway or StorageGateway(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        gateway.initialize()
        app.state.started_at = time.monotonic()
        logger.info("Task tracker ready")
        try:
            yield
        finally:
            gateway.dispose()

    app = FastAPI(
        title="Task Tracker",
        description="Backend API service for creating, listing, editing, completing and deleting tasks.",
        version="0.1.0",
        openapi_tags=openapi_tags,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.started_at = time.monotonic()

    allow_all = (settings.cors_allow_origins == ["*"]) or (len(settings.cors_allow_origins) == 0)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if allow_all else settings.cors_allow_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(TaskAPIError)
    async def task_api_error_handler(request: Request, exc: TaskAPIError) -> JSONResponse:
        """
        Render domain errors as ``{"error": message}``.
        """
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """
        Return a consistent JSON structure for malformed requests.

        Response format:
            {
                "error": "Request validation failed",
                "detail": [... pydantic/fastapi error details ...]
            }
        """
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Request validation failed",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    app.include_router(health_router.router)
    app.include_router(tasks_router.router)
    return app


# PUBLIC_INTERFACE
def run() -> None:
    """Console entry point: configure logging and serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


app = create_app()


if __name__ == "__main__":
    run()
