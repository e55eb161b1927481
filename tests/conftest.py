"""
Blog API — Test Configuration (conftest.py)
============================================

Fixture Hierarchy (all function-scoped):
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── make_author / make_post: transient ORM objects (never flushed)
    ├── result_of: wraps a value the way AsyncSession.execute() returns it
    ├── test_app: app on a fresh SQLite file, tables created
    └── test_client: HTTPX AsyncClient against test_app
"""

import os
import uuid

# Must be set before anything imports blog_api.config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blog_api.database import init_models  # noqa: E402
from blog_api.main import create_app  # noqa: E402
from blog_api.models import Author, Post  # noqa: E402


@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        mock_db_session.execute.return_value = result_of(author)
        result = await author_service.update_author(mock_db_session, ...)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def result_of():
    """Build a fake Result whose scalar accessors return `value`."""
    def _result(value: Any = None) -> MagicMock:
        result = MagicMock()
        result.scalar_one_or_none.return_value = value
        result.scalars.return_value.all.return_value = value if isinstance(value, list) else []
        result.rowcount = len(value) if isinstance(value, list) else 0
        return result
    return _result


@pytest.fixture
def make_author():
    def _make(first: str = "Ada", last: str = "Lovelace", user_name: str = "ada") -> Author:
        return Author(id=uuid.uuid4(), first_name=first, last_name=last, user_name=user_name)
    return _make


@pytest.fixture
def make_post(make_author):
    def _make(title: str = "T", content: str = "C", author: Author = None) -> Post:
        return Post(
            id=uuid.uuid4(),
            title=title,
            content=content,
            author=author or make_author(),
            comments=[],
        )
    return _make


@pytest.fixture
def assign_id_on_flush(mock_db_session):
    """Mimic the INSERT assigning a primary key to whatever was db.add()-ed."""
    async def _flush():
        for call in mock_db_session.add.call_args_list:
            obj = call.args[0]
            if obj.id is None:
                obj.id = uuid.uuid4()
    mock_db_session.flush = AsyncMock(side_effect=_flush)
    return mock_db_session


@pytest_asyncio.fixture
async def test_app(tmp_path):
    """
    An app on its own SQLite file with the tables already created.

    ASGITransport does not send lifespan events, so the engine is disposed here.
    """
    app = create_app(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def test_client(test_app):
    """HTTPX AsyncClient talking to test_app over ASGITransport."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
