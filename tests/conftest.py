"""Shared test fixtures."""

from collections.abc import AsyncIterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncEngine

from tournamention.config import Settings
from tournamention.core.rendezvous import CommandContext
from tournamention.db.engine import create_engine, create_schema, get_session
from tournamention.db.repository import Repository


@pytest.fixture
def settings() -> Settings:
    """Test settings with defaults."""
    return Settings(tournamention_env="test", database_url="sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def engine(tmp_path: Path) -> AsyncIterator[AsyncEngine]:
    """File-backed SQLite engine so concurrent sessions see committed data."""
    eng = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'tournamention.db'}")
    await create_schema(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
async def repo(engine: AsyncEngine) -> AsyncIterator[Repository]:
    """Yield a repository with a session bound to the test database."""
    async with get_session(engine) as session:
        yield Repository(session)


def _make_member(display_name: str = "Ada", avatar_url: str | None = "https://cdn.test/ada.png"):
    member = MagicMock()
    member.display_name = display_name
    if avatar_url is None:
        member.avatar = None
    else:
        member.avatar = MagicMock()
        member.avatar.url = avatar_url
    return member


def _make_client(member: MagicMock | None = None) -> MagicMock:
    """A platform client whose guild returns *member* for any member fetch."""
    guild = MagicMock()
    guild.fetch_member = AsyncMock(return_value=member or _make_member())
    client = MagicMock()
    client.fetch_guild = AsyncMock(return_value=guild)
    return client


@pytest.fixture
def make_member():
    """Factory for a mocked guild member."""
    return _make_member


@pytest.fixture
def make_client():
    """Factory for a mocked platform client returning a given member."""
    return _make_client


@pytest.fixture
def client() -> MagicMock:
    return _make_client()


@pytest.fixture
def context(client: MagicMock, engine: AsyncEngine, settings: Settings) -> CommandContext:
    return CommandContext(client=client, engine=engine, settings=settings)
