import importlib
from datetime import datetime, timedelta

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import threadline.db.models  # noqa: F401
from threadline.app import app
from threadline.api.deps import get_db_session
from threadline.db.base import Base
from threadline.db.models import User, Post, Repost, Comment
from threadline.utils.id_generator import (
    generate_user_id, generate_post_id, generate_repost_id, generate_comment_id
)
from threadline.utils.user_cache import UserCache

BASE_TIME = datetime(2024, 1, 1)


def at(seconds: int) -> datetime:
    return BASE_TIME + timedelta(seconds=seconds)


class DummyRedis:
    """In-memory stand-in for the RedisClient wrapper."""

    def __init__(self):
        self.store = {}
        self.is_connected = True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite 的事务处理不支持 SAVEPOINT，改为显式 BEGIN
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache(monkeypatch):
    redis = DummyRedis()
    user_cache = UserCache(client=redis, ttl=60)
    for module_name in ("threadline.services.user_service", "threadline.services.follow_service"):
        monkeypatch.setattr(importlib.import_module(module_name), "user_cache", user_cache)
    return user_cache


@pytest.fixture
async def client(session_factory, cache):
    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except BaseException:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    async def factory(username: str, **fields) -> User:
        user = User(
            id=generate_user_id(),
            name=fields.pop("name", username.title()),
            username=username,
            email=f"{username}@example.com",
            password_hash="unused",
            **fields,
        )
        session.add(user)
        await session.flush()
        return user

    return factory


@pytest.fixture
def make_post(session):
    async def factory(author: User, text: str = "hello", created: int = 0, parent: Post = None) -> Post:
        post = Post(
            id=generate_post_id(),
            user_id=author.id,
            parent_id=parent.id if parent else None,
            text=text,
            created_at=at(created),
            updated_at=at(created),
        )
        session.add(post)
        await session.flush()
        return post

    return factory


@pytest.fixture
def make_repost(session):
    async def factory(user: User, post: Post, created: int = 0, comment: str = None) -> Repost:
        repost = Repost(
            id=generate_repost_id(),
            user_id=user.id,
            original_post_id=post.id,
            comment=comment,
            created_at=at(created),
            updated_at=at(created),
        )
        session.add(repost)
        await session.flush()
        return repost

    return factory


@pytest.fixture
def make_comment(session):
    async def factory(author: User, post: Post, text: str = "nice", parent: Comment = None, created: int = 0) -> Comment:
        comment = Comment(
            id=generate_comment_id(),
            post_id=post.id,
            user_id=author.id,
            parent_id=parent.id if parent else None,
            text=text,
            created_at=at(created),
            updated_at=at(created),
        )
        session.add(comment)
        await session.flush()
        return comment

    return factory
