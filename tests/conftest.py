"""Test fixtures — a fresh in-memory database and blob store per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (aiosqlite). StaticPool
   keeps the single connection alive, so every session sees the same
   database for the whole test.
2. Tables are created from the models, and the engine is thrown away
   afterwards: no cross-test pollution, no cleanup queries.
3. get_db and get_blob_store are overridden, so routes run against the
   test session and an InMemoryBlobStore that tests can inspect.

Environment variables are set before pipecraft is imported, because the
settings singleton and the module-level engine are built at import time.
"""

import os

os.environ["PIPECRAFT_DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["PIPECRAFT_ENVIRONMENT"] = "development"
os.environ["PIPECRAFT_BCRYPT_ROUNDS"] = "4"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from pipecraft.auth.jwt import TokenCodec  # noqa: E402
from pipecraft.config import get_settings  # noqa: E402
from pipecraft.db.engine import get_db, init_models  # noqa: E402
from pipecraft.main import app  # noqa: E402
from pipecraft.services.auth_service import AuthService  # noqa: E402
from pipecraft.storage.blob import InMemoryBlobStore, get_blob_store  # noqa: E402


def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    await init_models(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def db_session(db_engine):
    session = AsyncSession(bind=db_engine, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture()
def blob_store():
    return InMemoryBlobStore()


@pytest_asyncio.fixture()
async def client(db_session, blob_store):
    """HTTP client running the real app against the test database.

    Learn: Auth is NOT overridden. Tests authenticate either with the
    cookies set by /api/users/login or with the Bearer headers from the
    admin / member fixtures below.
    """

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_store] = lambda: blob_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def codec():
    return TokenCodec(get_settings())


async def _make_account(db_session, codec, email: str, name: str, role: str) -> dict:
    svc = AuthService(db_session, codec)
    user = await svc.register(email=email, name=name, password="password123", role=role)
    token = codec.issue_access(user.id, user.email, user.name, user.role)
    return {
        "id": user.id,
        "email": user.email,
        "password": "password123",
        "headers": {"Authorization": f"Bearer {token}"},
    }


@pytest_asyncio.fixture()
async def admin(db_session, codec):
    """An admin account plus ready-made Bearer headers."""
    return await _make_account(db_session, codec, "admin@pipecraft.test", "Admin", "admin")


@pytest_asyncio.fixture()
async def member(db_session, codec):
    """A plain user account plus ready-made Bearer headers."""
    return await _make_account(db_session, codec, "member@pipecraft.test", "Member", "user")
