"""
Project connection handle.

A ``ProjectDatabase`` is the one live connection pool a project owns: the
resolved configuration, the async engine and its session factory.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import AsyncIterator, List, Sequence, Union

from sqlalchemy import Table, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from .config import EmbeddedDatabaseConfig, ServerDatabaseConfig
from .utils import SyncOptions, create_engine, create_sessionmaker, sync_tables


@dataclass(eq=False)
class ProjectDatabase:
    """Live database handle of a single project."""

    name: str
    config: Union[EmbeddedDatabaseConfig, ServerDatabaseConfig]
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession] = field(repr=False)

    @classmethod
    def from_config(
        cls,
        name: str,
        config: Union[EmbeddedDatabaseConfig, ServerDatabaseConfig],
    ) -> "ProjectDatabase":
        """Build a handle (engine + session factory) without connecting yet."""
        engine = create_engine(config)
        return cls(name=name, config=config, engine=engine, session_factory=create_sessionmaker(engine))

    @property
    def dialect(self) -> str:
        """Dialect name reported by the engine (``sqlite``, ``mysql``, ``postgresql``)."""
        return self.engine.dialect.name

    async def verify(self) -> None:
        """Open a connection and run a trivial query to prove connectivity."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a new session bound to this project's engine."""
        async with self.session_factory() as session:
            yield session

    async def sync(self, tables: Sequence[Table], options: SyncOptions = SyncOptions()) -> List[str]:
        """Synchronize ``tables`` with this database, see ``sync_tables``."""
        return await sync_tables(self.engine, tables, options)

    async def dispose(self) -> None:
        """Close every pooled connection."""
        await self.engine.dispose()
