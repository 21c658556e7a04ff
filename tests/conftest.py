"""
Journeo Backend — Test Configuration (conftest.py)
====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test runs against a fresh in-memory SQLite database: the schema
       is created from the ORM metadata before the test and the engine is
       disposed afterwards, which throws the database away.

Fixture Hierarchy:
    Function-scoped:
    ├── db_engine:     schema created on the shared in-memory database
    ├── db_session:    AsyncSession for service-level tests
    ├── test_client:   HTTPX AsyncClient bound to the FastAPI app
    ├── admin / alice / bob:  persisted users (ADMIN, USER, USER)
    ├── user_factory:  inserts further users
    ├── *_headers:     Authorization headers for those users
    ├── guide_payload: factory for valid GuideRequest bodies
    └── make_guide:    creates a guide through the API (optionally assigned)
"""

import os
import tempfile

# Override settings BEFORE any journeo import: the engine, settings and
# storage singletons are built at import time.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="journeo_test_")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOGIN_RATE_LIMIT_ATTEMPTS"] = "1000"
os.environ["JWT_SECRET"] = "journeo-test-secret-not-for-production"
os.environ["API_PREFIX"] = ""
os.environ["AUTO_CREATE_SCHEMA"] = "false"
os.environ["SEED_DEMO_DATA"] = "false"

from typing import Any, Dict, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from journeo.models import Role, User
from journeo.security import create_access_token, hash_password


async def create_user(
    email: str,
    password: str = "secret123",
    role: Role = Role.USER,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    """Insert a user directly, bypassing the API."""
    from journeo.database import async_session_factory

    async with async_session_factory() as session:
        user = User(
            email=email,
            password_hash=hash_password(password),
            role=role,
            first_name=first_name,
            last_name=last_name,
        )
        session.add(user)
        await session.commit()
        return user


def bearer(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.email, user.role.value)}"}


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def db_engine():
    """
    Creates every table on the in-memory database.

    Disposing the engine closes its single pooled connection, which drops
    the in-memory database; the next test starts from nothing.
    """
    import journeo.models  # noqa: F401
    from journeo.database import Base, engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(db_engine):
    """
    Provides an AsyncSession for calling services directly.

    Usage:
        async def test_create(db_session):
            guide = await guide_service.create_guide(db_session, request)
    """
    from journeo.database import async_session_factory

    async with async_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def temp_storage(tmp_path):
    """A fresh media directory for storage tests."""
    storage_dir = tmp_path / "storage"
    storage_dir.mkdir()
    return str(storage_dir)


# ══════════════════════════════════════════════════════════════════════════
# HTTP
# ══════════════════════════════════════════════════════════════════════════


@pytest_asyncio.fixture
async def test_client(db_engine):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from journeo.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# Users and tokens
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def user_factory(db_engine):
    """
    Inserts extra users.

    Usage:
        carol = await user_factory("carol@example.com", "pw", Role.USER)
    """
    return create_user


@pytest_asyncio.fixture
async def admin(db_engine) -> User:
    return await create_user("admin@hws.com", "admin123", Role.ADMIN, "Admin", "Journeo")


@pytest_asyncio.fixture
async def alice(db_engine) -> User:
    return await create_user("alice@example.com", "alice-pw", Role.USER, "Alice", "Martin")


@pytest_asyncio.fixture
async def bob(db_engine) -> User:
    return await create_user("bob@example.com", "bob-pw", Role.USER, "Bob", "Durand")


@pytest.fixture
def admin_headers(admin) -> Dict[str, str]:
    return bearer(admin)


@pytest.fixture
def alice_headers(alice) -> Dict[str, str]:
    return bearer(alice)


@pytest.fixture
def bob_headers(bob) -> Dict[str, str]:
    return bearer(bob)


# ══════════════════════════════════════════════════════════════════════════
# Guides
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def guide_payload():
    """Factory for a valid guide body in wire (camelCase) form."""

    def _payload(**overrides: Any) -> Dict[str, Any]:
        body = {
            "title": "Paris en famille",
            "description": "Musées et jardins",
            "numberOfDays": 2,
            "mobility": "A_PIED",
            "season": "ETE",
            "targetAudience": "FAMILLE",
        }
        body.update(overrides)
        return body

    return _payload


@pytest.fixture
def make_guide(test_client, admin_headers, guide_payload):
    """
    Creates a guide through the API and returns its JSON.

    Usage:
        guide = await make_guide(title="Loire", members=[alice])
    """

    async def _make(members=(), **overrides: Any) -> Dict[str, Any]:
        response = await test_client.post(
            "/guides", json=guide_payload(**overrides), headers=admin_headers
        )
        assert response.status_code == 201, response.text
        guide = response.json()
        for member in members:
            assigned = await test_client.post(
                f"/guides/{guide['id']}/users/{member.id}", headers=admin_headers
            )
            assert assigned.status_code == 200, assigned.text
            guide = assigned.json()
        return guide

    return _make


@pytest.fixture
def activity_payload():
    def _payload(**overrides: Any) -> Dict[str, Any]:
        body = {
            "title": "Musée d'Orsay",
            "type": "MUSEE",
            "dayNumber": 1,
            "orderInDay": 1,
            "durationMinutes": 90,
            "startTime": "09:30",
            "latitude": 48.86,
            "longitude": 2.3266,
        }
        body.update(overrides)
        return body

    return _payload
