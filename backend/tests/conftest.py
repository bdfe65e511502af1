"""
Artfolio Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own SQLite file database (aiosqlite) with the full
       schema, so services run real queries instead of mocks.

Fixture Hierarchy:
    Function-scoped:
    ├── db_engine: fresh SQLite database with all tables
    │   ├── db_session: AsyncSession for service-level tests
    │   └── test_client: HTTPX AsyncClient with get_db_session overridden
    ├── artist / other_artist / client: registered users (+ tokens)
    ├── sample_image_bytes: real PNG produced with Pillow
    └── temp_storage: scratch directory for MediaService tests
"""

import io
import os
import tempfile

# Settings are read at import time: environment first, app imports after
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///" + os.path.join(
    tempfile.mkdtemp(prefix="artfolio_db_"), "app.db"
)
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="artfolio_test_")
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from dataclasses import dataclass
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import artfolio.models  # noqa: F401
from artfolio.database import Base, build_engine, get_db_session
from artfolio.models.user import UserRole
from artfolio.schemas.user import RegisterRequest
from artfolio.services.auth_service import Identity, auth_service


@dataclass
class RegisteredUser:
    """A user created through AuthService, with a token for API calls."""
    identity: Identity
    token: str

    @property
    def id(self):
        return self.identity.id

    @property
    def headers(self):
        return {"Authorization": f"Bearer {self.token}"}


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """
    Session for service-level tests. Services only flush, so everything a
    test writes is visible inside this session without committing.
    """
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app in-process.

    get_db_session is swapped for one bound to the per-test database; it
    commits after each request like the real dependency.
    """
    from artfolio.main import app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db_session, None)


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════


async def _register(session_factory, email: str, display_name: str, role: UserRole) -> RegisteredUser:
    async with session_factory() as session:
        response = await auth_service.register(
            session,
            RegisterRequest(email=email, password="secret123", display_name=display_name, role=role),
        )
        await session.commit()
    async with session_factory() as session:
        identity = await auth_service.resolve_identity(session, response.token)
    return RegisteredUser(identity=identity, token=response.token)


@pytest_asyncio.fixture
async def artist(session_factory) -> RegisteredUser:
    return await _register(session_factory, "ada@example.com", "Ada Painter", UserRole.ARTIST)


@pytest_asyncio.fixture
async def other_artist(session_factory) -> RegisteredUser:
    return await _register(session_factory, "ben@example.com", "Ben Sculptor", UserRole.ARTIST)


@pytest_asyncio.fixture
async def client(session_factory) -> RegisteredUser:
    return await _register(session_factory, "cleo@example.com", "Cleo Collector", UserRole.CLIENT)


# ══════════════════════════════════════════════════════════════════════════
# Files
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def temp_storage(tmp_path):
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


def make_image_bytes(size=(800, 600), fmt="PNG", color=(200, 80, 40)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def sample_image_bytes():
    """A real 800x600 PNG, small enough for every size limit."""
    return make_image_bytes()
