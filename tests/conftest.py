"""Shared test fixtures.

Tests run against in-memory SQLite (aiosqlite) with the ORM schema, a fake
content generator and no Redis.
"""

from __future__ import annotations

import json
import os
from collections.abc import AsyncGenerator, Callable

os.environ["DREAMGAME_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DREAMGAME_REDIS_URL"] = ""
os.environ["DREAMGAME_JWT_SECRET"] = "test-secret"
os.environ["DREAMGAME_LOG_FORMAT"] = "console"
os.environ["DREAMGAME_OPENAI_API_KEY"] = ""

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from dreamgame.config import get_settings  # noqa: E402

get_settings.cache_clear()

from dreamgame.auth.jwt import create_access_token  # noqa: E402
from dreamgame.database import get_session  # noqa: E402
from dreamgame.db.base import Base  # noqa: E402
from dreamgame.db.models import User  # noqa: E402
from dreamgame.dependencies import get_content_generator, get_redis_dep  # noqa: E402
from dreamgame.errors import ContentGenerationError  # noqa: E402
from dreamgame.main import create_app  # noqa: E402
from dreamgame.users.service import create_user  # noqa: E402

class FakeContentGenerator:
    """Returns canned milestone JSON and records every request."""

    def __init__(
        self,
        reply: str | None = None,
        fail: bool = False,
        fields: list[str] | None = None,
    ) -> None:
        self.fail = fail
        self.fields = fields or ["summary"]
        self.reply = reply
        self.calls: list[list[dict[str, str]]] = []

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        if self.fail:
            raise ContentGenerationError("generator offline")
        if self.reply is not None:
            return self.reply
        return json.dumps({
            "title": f"Milestone {len(self.calls)}",
            "description": "Interview three potential customers about their biggest pain point",
            "category": "market_research",
            "fields": self.fields,
        })


def _enable_sqlite_transactions(engine: AsyncEngine) -> None:
    """Let SQLAlchemy own BEGIN so SAVEPOINT and rollback behave on pysqlite."""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, _connection_record):  # noqa: ANN001
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):  # noqa: ANN001
        conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    _enable_sqlite_transactions(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    """A direct session for service-level tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def fake_generator() -> FakeContentGenerator:
    return FakeContentGenerator()


@pytest_asyncio.fixture
async def make_user(session_factory: async_sessionmaker[AsyncSession]) -> Callable:
    """Factory creating committed users in their own session."""
    counter = 0

    async def _make(**fields) -> User:  # noqa: ANN003
        nonlocal counter
        counter += 1
        async with session_factory() as session:
            user = await create_user(session, fields.pop("username", f"founder{counter}"))
            for name, value in fields.items():
                setattr(user, name, value)
            await session.commit()
            return user

    return _make


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    fake_generator: FakeContentGenerator,
) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, wired to the test database."""
    app = create_app()

    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_content_generator] = lambda: fake_generator
    app.dependency_overrides[get_redis_dep] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def _auth_headers(user_id: int) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def auth_headers() -> Callable[[int], dict[str, str]]:
    return _auth_headers


@pytest_asyncio.fixture
async def onboarded_user(make_user: Callable) -> User:
    return await make_user(
        username="ada",
        business_industry="technology",
        business_stage="startup",
        entrepreneur_experience="some",
        has_completed_onboarding=True,
    )


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, onboarded_user: User) -> AsyncClient:
    """Client authenticated as a freshly onboarded user."""
    client.headers.update(_auth_headers(onboarded_user.id))
    return client
