"""Shared fixtures: an in-memory SQLite database wired into the app's session factory."""

import os

# Must be set before relaystore settings are imported
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["GRAPHQL_RATE_LIMIT"] = "10000/minute"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"
os.environ["OPENTELEMETRY_ENABLED"] = "false"

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import relaystore.models  # noqa: F401  (attach models to Base.metadata)
from relaystore import crud, database
from relaystore.graphql.schema import Context
from relaystore.schemas.post import PostCreate
from relaystore.schemas.user import UserCreate
from relaystore.schemas.video import VideoCreate


@pytest_asyncio.fixture
async def db_engine():
    # StaticPool keeps every session on the one in-memory connection
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(database.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine, monkeypatch):
    factory = async_sessionmaker(
        bind=db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )
    monkeypatch.setattr(database, "AsyncSessionLocal", factory)
    return factory


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def context(db_session) -> Context:
    return Context(db=db_session)


@pytest_asyncio.fixture
async def test_client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    from relaystore.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# --- Data factories ---


@pytest.fixture
def create_users(db_session):
    async def _create(*names: str):
        users = [
            await crud.user.acreate(db_session, obj_in=UserCreate(name=name))
            for name in names
        ]
        await db_session.commit()
        return users

    return _create


@pytest.fixture
def create_post(db_session):
    async def _create(title: str):
        post = await crud.post.acreate(db_session, obj_in=PostCreate(title=title))
        await db_session.commit()
        return post

    return _create


@pytest.fixture
def create_video(db_session):
    async def _create(name: str, post_id=None):
        video = await crud.video.acreate(
            db_session, obj_in=VideoCreate(name=name, post_id=post_id)
        )
        await db_session.commit()
        return video

    return _create
