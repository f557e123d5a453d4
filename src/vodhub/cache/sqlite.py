"""SQLite cache backend.

Uses the SQLAlchemy 2.0 asyncio extension with the aiosqlite driver. Rows
carry their own TTL and creation time; expiry is evaluated when a row is
read. If the database cannot be opened, ``initialize`` raises
``BackendUnavailable`` so the factory can fall back to memory.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import orjson
from sqlalchemy import event, func, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from vodhub.cache.base import CacheStore, ResultItem, SearchCacheEntry, normalize_keyword
from vodhub.cache.tables import Base, DetailCacheTable, SearchCacheTable
from vodhub.errors import BackendUnavailable

logger = logging.getLogger(__name__)


def _enable_wal(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


class SqliteCacheStore(CacheStore):
    """Embedded relational cache backend."""

    name = "sqlite"

    def __init__(self, db_path: str | Path = "cache.db", **kwargs: Any):
        super().__init__(**kwargs)
        self.db_path = Path(db_path)
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def url(self) -> str:
        return f"sqlite+aiosqlite:///{self.db_path}"

    async def initialize(self) -> None:
        try:
            engine = create_async_engine(self.url)
        except Exception as e:
            raise BackendUnavailable(f"SQLite cache unavailable at {self.db_path}: {e}") from e

        event.listen(engine.sync_engine, "connect", _enable_wal)
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except Exception as e:
            await engine.dispose()
            raise BackendUnavailable(f"SQLite cache unavailable at {self.db_path}: {e}") from e

        self._engine = engine
        self._session_factory = async_sessionmaker(
            engine, class_=AsyncSession, expire_on_commit=False
        )
        logger.info(f"SQLite cache initialized at {self.db_path}")

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        """Transactional scope around a series of operations."""
        if self._session_factory is None:
            raise BackendUnavailable("SQLite cache used before initialize()")
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def get_search(self, keyword: str) -> SearchCacheEntry | None:
        key = normalize_keyword(keyword)
        async with self._session() as session:
            row = await session.get(SearchCacheTable, key)
            if row is None:
                return None
            entry = SearchCacheEntry(
                keyword=key,
                data=orjson.loads(row.data),
                ttl=row.ttl,
                ts=row.created_at,
            )
        if entry.is_expired(self.clock()):
            return None
        return entry

    async def set_search(self, keyword: str, data: list[ResultItem], ttl: int = 0) -> None:
        key = normalize_keyword(keyword)
        async with self._session() as session:
            await session.merge(
                SearchCacheTable(
                    keyword=key,
                    data=orjson.dumps(data).decode(),
                    ttl=ttl,
                    created_at=self.clock(),
                )
            )

    async def get_detail(self, key: str) -> Any | None:
        async with self._session() as session:
            row = await session.get(DetailCacheTable, key)
            return orjson.loads(row.data) if row is not None else None

    async def set_detail(self, key: str, data: Any) -> None:
        async with self._session() as session:
            await session.merge(
                DetailCacheTable(
                    cache_key=key,
                    data=orjson.dumps(data).decode(),
                    created_at=self.clock(),
                )
            )

    async def stats(self) -> dict[str, int]:
        async with self._session() as session:
            search = await session.scalar(select(func.count()).select_from(SearchCacheTable))
            detail = await session.scalar(select(func.count()).select_from(DetailCacheTable))
        return {"search": search or 0, "detail": detail or 0}
