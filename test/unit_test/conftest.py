from typing import AsyncGenerator, Optional, Union
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from hsn_api.core.database import DatabaseEnvironment, DatabaseManager, EmbeddedDatabaseConfig
from hsn_api.server.core.config import Settings
from hsn_api.server.main import create_app
from hsn_api.utils.mailer import Mailer


def memory_resolver(project_name: str, env: Optional[Union[str, DatabaseEnvironment]] = None) -> EmbeddedDatabaseConfig:
    """Resolve every project to its own in-memory SQLite database."""
    return EmbeddedDatabaseConfig(storage=":memory:")


@pytest.fixture
def resolver():
    return memory_resolver


@pytest_asyncio.fixture
async def manager() -> AsyncGenerator[DatabaseManager, None]:
    """A database manager whose projects live in in-memory SQLite databases."""
    db_manager = DatabaseManager(config_resolver=memory_resolver)
    yield db_manager
    await db_manager.close_all()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_env="test",
        allowed_origins_raw="http://localhost:3000,http://localhost:5500",
        max_body_bytes=64 * 1024,
        db_env="local",
    )


@pytest.fixture
def mailer() -> MagicMock:
    """Mailer stand-in whose notifications always succeed."""
    stub = MagicMock(spec=Mailer)
    stub.send_contact_notification = AsyncMock(return_value={"success": True, "message_id": "<test@hsntech.in>"})
    return stub


@pytest.fixture
def app(settings: Settings, manager: DatabaseManager, mailer: MagicMock) -> FastAPI:
    return create_app(settings=settings, manager=manager, mailer=mailer)


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as ac:
        yield ac
