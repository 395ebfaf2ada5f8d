from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, AsyncSession, create_async_engine

from schoolhub.core.config import Settings, settings

logger = logging.getLogger(__name__)


class Database:
    """Process-wide handle on the connection pool.

    The engine (and with it the pool) is created on first use and torn down by
    :meth:`dispose`. Route handlers never see this object; they only receive
    the connection bound into their request's tenant context.
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 10,
        max_overflow: int = 10,
        pool_timeout: float = 10.0,
        statement_timeout_ms: int | None = None,
    ) -> None:
        self.url = url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.pool_timeout = pool_timeout
        self.statement_timeout_ms = statement_timeout_ms
        self._engine: AsyncEngine | None = None

    @classmethod
    def from_settings(cls, config: Settings) -> Database:
        return cls(
            config.database_url,
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_timeout=config.db_pool_timeout_seconds,
            statement_timeout_ms=config.db_statement_timeout_ms,
        )

    def _connect_args(self) -> dict[str, object]:
        if not self.statement_timeout_ms:
            return {}
        if make_url(self.url).get_driver_name() != "asyncpg":
            return {}
        return {"server_settings": {"statement_timeout": str(self.statement_timeout_ms)}}

    @property
    def initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            logger.info("Creating database engine pool_size=%s", self.pool_size)
            self._engine = create_async_engine(
                self.url,
                future=True,
                pool_pre_ping=True,
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_timeout=self.pool_timeout,
                connect_args=self._connect_args(),
            )
        return self._engine

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        async with self.engine.connect() as connection:
            yield connection

    def session(self, connection: AsyncConnection) -> AsyncSession:
        return AsyncSession(bind=connection, expire_on_commit=False)

    async def dispose(self) -> None:
        if self._engine is None:
            return
        engine, self._engine = self._engine, None
        await engine.dispose()
        logger.info("Database engine disposed")


database = Database.from_settings(settings)


def get_database() -> Database:
    return database
