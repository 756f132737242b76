import os
from typing import AsyncGenerator, Callable

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("MONGODB_DB_NAME", "bingenie_test")
os.environ.setdefault("SECRET_KEY", "test-secret-key-min-32-characters-long")
os.environ.setdefault("GENERATOR_DEFAULT_URL", "https://generator.test/gen")


class FakeGenerator:
    """Stands in for the external generator; records every request it receives."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body: object = {"cards": ["4016580000000001"], "count": 1}
        self.raise_exc: Exception | None = None

    def respond(self, status_code: int, body: object) -> None:
        self.status_code = status_code
        self.body = body

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_exc is not None:
            raise self.raise_exc
        if isinstance(self.body, (bytes, str)):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    from mongomock_motor import AsyncMongoMockClient

    from app.db.init import init_db
    await init_db(client=AsyncMongoMockClient())
    yield


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def generator_client(generator):
    from app.services.generator import GeneratorClient
    return GeneratorClient(transport=httpx.MockTransport(generator.handler), timeout=5)


@pytest_asyncio.fixture
async def make_client(db, generator_client) -> AsyncGenerator[Callable, None]:
    """Factory for API clients, optionally carrying a session cookie."""
    from app.deps import SESSION_COOKIE_NAME
    from app.main import app
    from app.services.generator import get_generator_client

    app.dependency_overrides[get_generator_client] = lambda: generator_client
    clients: list[AsyncClient] = []

    def _make(session: str | None = None) -> AsyncClient:
        headers = {"Cookie": f"{SESSION_COOKIE_NAME}={session}"} if session else {}
        ac = AsyncClient(transport=ASGITransport(app=app), base_url="http://test", headers=headers)
        clients.append(ac)
        return ac

    yield _make
    for ac in clients:
        await ac.aclose()
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(make_client) -> AsyncClient:
    return make_client()


@pytest_asyncio.fixture
async def make_user(db) -> Callable:
    """Create a user (and profile) directly in the database; returns (user, session cookie)."""
    from app.core.security import create_session_cookie, hash_password
    from app.models.profile import Profile
    from app.models.user import User
    from app.services.users import session_payload_for_user

    async def _make(email: str, credits: int = 0, is_admin: bool = False, with_profile: bool = True):
        user = User(email=email, password_hash=hash_password("secret123"), full_name=email.split("@")[0])
        await user.insert()
        if with_profile:
            await Profile(
                user_id=user.id,
                email=email,
                full_name=user.full_name,
                credits=credits,
                is_admin=is_admin,
            ).insert()
        return user, create_session_cookie(session_payload_for_user(user))

    return _make
