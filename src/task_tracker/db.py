from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    event,
    false,
    func,
    text,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import QueuePool
from sqlalchemy.schema import DDL

from .settings import Settings

logger = logging.getLogger(__name__)

metadata = MetaData()

tasks = Table(
    "tasks",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", String(255), nullable=False),
    Column("description", Text, nullable=True),
    Column("completed", Boolean, nullable=False, default=False, server_default=false()),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now(), onupdate=func.now()),
    sqlite_autoincrement=True,
)

# MySQL refreshes updated_at itself on every UPDATE, whoever issues it.
mysql_updated_at_ddl = DDL(
    "ALTER TABLE %(table)s MODIFY updated_at DATETIME NOT NULL "
    "DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"
).execute_if(dialect="mysql")
event.listen(tasks, "after_create", mysql_updated_at_ddl)

# Callers wait for a free connection instead of failing fast.
_POOL_WAIT_SECONDS = 24 * 60 * 60


class StorageError(Exception):
    """Base class for storage gateway failures."""


class StorageNotInitializedError(StorageError):
    """Raised when the pool is requested before ``initialize()`` completed."""

    def __init__(self) -> None:
        super().__init__("Database not initialized. Call initialize() first.")


class StorageInitializationError(StorageError):
    """Raised when connecting or bootstrapping the schema fails at startup."""


# PUBLIC_INTERFACE
class StorageGateway:
    """
    Owns the pooled database handle and the one-time schema bootstrap.

    One instance is built at startup and passed to the HTTP layer; nothing
    reaches it through module globals.
    """

    def __init__(self, settings: Settings) -> None:
        self._url = settings.database_url
        self._pool_size = max(int(settings.db_pool_size), 1)
        self._engine: Optional[Engine] = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    def _create_engine(self) -> Engine:
        url = make_url(self._url)
        connect_args = {}
        if url.get_backend_name() == "sqlite":
            # Pooled connections are handed to worker threads.
            connect_args["check_same_thread"] = False
        return create_engine(
            url,
            poolclass=QueuePool,
            pool_size=self._pool_size,
            max_overflow=0,
            pool_timeout=_POOL_WAIT_SECONDS,
            pool_pre_ping=True,
            connect_args=connect_args,
        )

    def initialize(self) -> Engine:
        """
        Build the connection pool, verify connectivity and ensure the
        ``tasks`` table exists. Safe to call more than once.

        Raises:
            StorageInitializationError: the database is unreachable or the
                schema could not be created.
        """
        if self._engine is not None:
            return self._engine

        engine = self._create_engine()
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info(
                "Database connected (backend=%s, pool_size=%d)",
                engine.url.get_backend_name(),
                self._pool_size,
            )
            metadata.create_all(engine, checkfirst=True)
            logger.info("Tasks table initialized")
        except SQLAlchemyError as exc:
            engine.dispose()
            logger.error("Database initialization failed: %s", exc)
            raise StorageInitializationError(str(exc)) from exc

        self._engine = engine
        return engine

    def get_connection_pool(self) -> Engine:
        """Return the pooled engine, or raise if ``initialize()`` has not run."""
        if self._engine is None:
            raise StorageNotInitializedError()
        return self._engine

    def dispose(self) -> None:
        """Close every pooled connection; the gateway can be initialized again."""
        if self._engine is None:
            return
        self._engine.dispose()
        self._engine = None
        logger.info("Database pool disposed")
