"""
Database utility functions for engine creation and schema sync.

Functions:
- build_url: Maps a resolved ``DatabaseConfig`` to an async SQLAlchemy URL
- create_engine: Creates the async engine with per-variant pool options
- create_sessionmaker: Creates an async session factory with safe defaults
- sync_tables: Creates, alters or recreates a set of tables
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from sqlalchemy import Table, inspect, text
from sqlalchemy.engine import URL, Connection
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool
from sqlalchemy.schema import CreateColumn

from .config import EmbeddedDatabaseConfig, ServerDatabaseConfig

MEMORY_STORAGE = ":memory:"

ASYNC_DRIVERS = {
    "sqlite": "sqlite+aiosqlite",
    "mysql": "mysql+aiomysql",
    "postgresql": "postgresql+asyncpg",
}


@dataclass(frozen=True)
class SyncOptions:
    """Schema synchronization options.

    Attributes:
        alter: Add columns declared on the model but missing from the live table
        force: Drop and recreate the tables (destroys data)
    """

    alter: bool = False
    force: bool = False


def build_url(config: Union[EmbeddedDatabaseConfig, ServerDatabaseConfig]) -> URL:
    """Build the async connection URL for a resolved configuration.

    Args:
        config: Embedded or server configuration

    Returns:
        SQLAlchemy URL using the async driver of the dialect
    """
    driver = ASYNC_DRIVERS[config.dialect]
    if isinstance(config, EmbeddedDatabaseConfig):
        if config.storage == MEMORY_STORAGE:
            return URL.create(driver)
        return URL.create(driver, database=config.storage)
    return URL.create(
        driver,
        username=config.username,
        password=config.password or None,
        host=config.host,
        port=config.port,
        database=config.database,
    )


def engine_options(config: Union[EmbeddedDatabaseConfig, ServerDatabaseConfig]) -> Dict[str, Any]:
    """Return the ``create_async_engine`` keyword arguments for a configuration."""
    options: Dict[str, Any] = {"echo": config.echo}
    if isinstance(config, EmbeddedDatabaseConfig):
        if config.storage == MEMORY_STORAGE:
            # One shared connection, otherwise every checkout sees an empty database.
            options["poolclass"] = StaticPool
            options["connect_args"] = {"check_same_thread": False}
        return options

    pool = config.pool
    options.update(
        pool_size=pool.max_size,
        max_overflow=0,
        pool_timeout=pool.acquire_timeout_ms / 1000,
        pool_recycle=max(int(pool.idle_timeout_ms / 1000), 1),
        pool_pre_ping=True,
    )
    return options


def create_engine(config: Union[EmbeddedDatabaseConfig, ServerDatabaseConfig]) -> AsyncEngine:
    """Create an async SQLAlchemy engine for a resolved configuration.

    For file-backed SQLite the parent directory of the database file is
    created first, so a fresh checkout can start without manual setup.
    """
    if isinstance(config, EmbeddedDatabaseConfig) and config.storage != MEMORY_STORAGE:
        Path(config.storage).expanduser().parent.mkdir(parents=True, exist_ok=True)
    return create_async_engine(build_url(config), **engine_options(config))


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create an ``async_sessionmaker`` with safe defaults for this project."""
    return async_sessionmaker(engine, expire_on_commit=False)


def _add_missing_columns(connection: Connection, tables: Sequence[Table]) -> List[str]:
    inspector = inspect(connection)
    added: List[str] = []
    preparer = connection.dialect.identifier_preparer
    for table in tables:
        if not inspector.has_table(table.name):
            continue
        existing = {column["name"] for column in inspector.get_columns(table.name)}
        for column in table.columns:
            if column.name in existing:
                continue
            column_ddl = CreateColumn(column).compile(dialect=connection.dialect)
            connection.execute(text(f"ALTER TABLE {preparer.format_table(table)} ADD COLUMN {column_ddl}"))
            added.append(f"{table.name}.{column.name}")
    return added


async def sync_tables(engine: AsyncEngine, tables: Sequence[Table], options: SyncOptions = SyncOptions()) -> List[str]:
    """Synchronize the given tables with the live database.

    - default: create missing tables, leave existing ones untouched
    - ``alter``: additionally add model columns missing from existing tables
    - ``force``: drop the tables and create them again

    Args:
        engine: Async engine of the project database
        tables: Tables to synchronize (only these are touched)
        options: Sync options

    Returns:
        Names (``table.column``) of the columns added by ``alter``.
    """
    if not tables:
        return []
    table_list = list(tables)
    async with engine.begin() as conn:
        if options.force:
            await conn.run_sync(lambda sync_conn: table_list[0].metadata.drop_all(sync_conn, tables=table_list))
        await conn.run_sync(lambda sync_conn: table_list[0].metadata.create_all(sync_conn, tables=table_list))
        if options.alter and not options.force:
            return await conn.run_sync(_add_missing_columns, table_list)
    return []
