from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from services.portfolio.app.errors import translate_store_errors
from services.portfolio.app.logging import logger
from services.portfolio.app.tables import create_schema


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive across sessions.
        return create_async_engine(
            database_url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    # NullPool avoids cross-event-loop pooled connections during tests and keeps behavior simple.
    return create_async_engine(database_url, echo=echo, pool_pre_ping=True, poolclass=NullPool)


class Database:
    """Process-wide handle on the persistent store.

    Opened once at startup and closed at shutdown; repositories receive it by
    injection instead of importing a module-level engine.
    """

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.database_url = database_url
        self.echo = echo
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("database is not open")
        return self._engine

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    async def open(self, *, create_tables: bool = True) -> None:
        if self._engine is not None:
            return
        self._engine = create_engine(self.database_url, echo=self.echo)
        self._sessionmaker = async_sessionmaker(self._engine, expire_on_commit=False, class_=AsyncSession)
        if create_tables:
            try:
                with translate_store_errors("schema", "create"):
                    await create_schema(self._engine)
            except Exception:
                await self.close()
                raise
        logger.info("database_opened", dialect=self._engine.dialect.name)

    async def close(self) -> None:
        if self._engine is None:
            return
        await self._engine.dispose()
        self._engine = None
        self._sessionmaker = None
        logger.info("database_closed")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("database is not open")
        async with self._sessionmaker() as session:
            yield session

    async def ping(self) -> None:
        with translate_store_errors("database", "ping"):
            async with self.session() as session:
                await session.execute(sa.text("SELECT 1"))
