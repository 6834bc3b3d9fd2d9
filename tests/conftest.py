import asyncio

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from moodlift import db
from moodlift.db_init import init_db
from moodlift.settings import reset_settings
from moodlift.store import RowStore, StoreError

BACKEND_TOKEN = "test-backend-secret"


@pytest.fixture(autouse=True)
def app_env(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'moodlift.db'}")
    monkeypatch.setenv("BACKEND_SESSION_SECRET", BACKEND_TOKEN)
    monkeypatch.setenv("APP_TIMEZONE", "UTC")
    monkeypatch.setenv("SITE_URL", "https://moodlift.test/")
    monkeypatch.setenv("SESSION_COOKIE_SECURE", "false")
    monkeypatch.delenv("SESSION_ENCRYPTION_KEY", raising=False)
    monkeypatch.delenv("OAUTH_TOKEN_URL", raising=False)
    monkeypatch.setattr(db, "_engine", None)
    monkeypatch.setattr(db, "_session_factory", None)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}", poolclass=NullPool)
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def store(engine):
    asyncio.run(init_db(engine))
    return RowStore(async_sessionmaker(engine, expire_on_commit=False))


class _BrokenQuery:
    def __getattr__(self, name):
        def chain(*args, **kwargs):
            return self

        return chain

    async def execute(self):
        raise StoreError("database unavailable")

    async def maybe_single(self):
        raise StoreError("database unavailable")


class BrokenStore:
    def table(self, name):
        return _BrokenQuery()


@pytest.fixture
def broken_store():
    return BrokenStore()


@pytest.fixture
def auth_headers():
    return {"X-Backend-Token": BACKEND_TOKEN, "X-User-Id": "user-1", "X-User-Email": "Mia@Example.com"}
