"""Test configuration for database unit tests.

This module provides common fixtures for testing the multi-project database
layer with in-memory and file-backed SQLite databases.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional, Type

import pytest
import pytest_asyncio
from sqlmodel import Field, SQLModel

from hsn_api.core.database import ProjectDatabase
from hsn_api.core.database.config import EmbeddedDatabaseConfig


class Widget(SQLModel, table=True):
    """Entity used only by the database layer tests."""

    __tablename__ = "test_widgets"
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=50)
    color: Optional[str] = Field(default=None, max_length=20)
    size: Optional[int] = Field(default=0)


@pytest.fixture
def widget_entity() -> Type[Widget]:
    return Widget


@pytest_asyncio.fixture
async def memory_database() -> AsyncGenerator[ProjectDatabase, None]:
    """A verified in-memory project database."""
    database = ProjectDatabase.from_config("acme", EmbeddedDatabaseConfig(storage=":memory:"))
    await database.verify()
    try:
        yield database
    finally:
        await database.dispose()


@pytest_asyncio.fixture
async def file_database(tmp_path) -> AsyncGenerator[ProjectDatabase, None]:
    """A project database stored in a temporary SQLite file."""
    storage = tmp_path / "data" / "acme_local.sqlite"
    database = ProjectDatabase.from_config("acme", EmbeddedDatabaseConfig(storage=str(storage)))
    try:
        yield database
    finally:
        await database.dispose()
