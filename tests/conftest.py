# tests/conftest.py
"""Shared fixtures: in-memory MongoDB, seeded users and an HTTP client."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.auth import AuthService
from app.db import Database
from app.main import app
from app.models.enums import UserRole
from app.models.user import User
from app.permissions import CallerIdentity
from app.services.blog_service import BlogService

# Hashed once for every seeded user
PASSWORD = "password123"
PASSWORD_HASH = AuthService.get_password_hash(PASSWORD)


async def make_user(
    name: str, email: str, role: UserRole = UserRole.STUDENT, is_active: bool = True
) -> User:
    user = User(
        name=name,
        email=email,
        password_hash=PASSWORD_HASH,
        role=role,
        is_active=is_active,
    )
    await user.insert()
    return user


def bearer_headers(user: User) -> dict[str, str]:
    token = AuthService.create_access_token(data={"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def database() -> AsyncGenerator[Database, None]:
    """Fresh in-memory database per test, attached to the app."""
    db = Database(client=AsyncMongoMockClient(tz_aware=True), name="coaching_test")
    await db.connect()
    app.state.database = db
    yield db
    app.state.database = None


@pytest.fixture
async def blog_service(database: Database) -> BlogService:
    return BlogService(database)


@pytest.fixture
async def author(database: Database) -> User:
    return await make_user("Asha Verma", "asha@example.com")


@pytest.fixture
async def reader(database: Database) -> User:
    return await make_user("Ravi Kumar", "ravi@example.com")


@pytest.fixture
async def admin(database: Database) -> User:
    return await make_user("Demo Admin", "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def author_identity(author: User) -> CallerIdentity:
    return CallerIdentity.from_user(author)


@pytest.fixture
def reader_identity(reader: User) -> CallerIdentity:
    return CallerIdentity.from_user(reader)


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing."""
    async with AsyncClient(
        base_url="http://test",
        transport=ASGITransport(app=app),
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers():
    """Build an Authorization header carrying a fresh access token for a user."""
    return bearer_headers
