"""Pytest configuration and shared fixtures.

This module provides centralized test fixtures for:
- HTTP client for API testing, with storage, mailer and Google overrides
- Test database engine and sessions (SQLite file unless DATABASE_TEST_URL is set)
- Signed-in accounts with bearer tokens
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from google.auth.exceptions import GoogleAuthError
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from kinchart import models  # noqa: F401
from kinchart.database import Base, get_db
from kinchart.main import app
from kinchart.models import AuthSession, User
from kinchart.services.google import GoogleTokenVerifier, get_google_verifier
from kinchart.services.mailer import get_mailer
from kinchart.services.member_context import MemberContextRegistry
from kinchart.services.storage import DocumentStorage, get_storage

TEST_GOOGLE_CLIENT_ID = "test-client.apps.googleusercontent.com"


class RecordingMailer:
    """Mailer stub that keeps the codes it was asked to send."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str]] = []

    async def send_code(self, email: str, code: str) -> None:
        self.sent.append((email, code))

    def last_code(self, email: str) -> str:
        return [code for to, code in self.sent if to == email][-1]


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_engine(tmp_path):
    """Create test database engine with automatic schema management.

    Creates all tables before tests, drops them after.
    Uses DATABASE_TEST_URL env var if set, otherwise a SQLite file per test.
    """
    db_url = os.environ.get("DATABASE_TEST_URL") or f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"
    engine = create_async_engine(db_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker) -> AsyncSession:
    """Test database session. Writes made through it must be committed
    before the API can see them."""
    async with session_maker() as session:
        yield session
        await session.rollback()


# =============================================================================
# HTTP Client Fixtures
# =============================================================================


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def storage(tmp_path) -> DocumentStorage:
    return DocumentStorage(
        root=tmp_path / "storage",
        public_base_url="http://test",
        signing_secret="test-signing-secret",
    )


@pytest.fixture
def google_claims() -> dict:
    """Claims carried by the test ID token; tests may edit them."""
    return {
        "aud": TEST_GOOGLE_CLIENT_ID,
        "iss": "https://accounts.google.com",
        "sub": "google-sub-1",
        "email": "Priya@Example.com",
        "email_verified": True,
        "name": "Priya Sharma",
    }


class FakeTokenVerification:
    """Stands in for ``verify_oauth2_token``: "good-token" decodes to the
    claims, then audience and issuer are checked like google-auth does."""

    def __init__(self, claims: dict) -> None:
        self.claims = claims
        self.calls: list[str] = []
        self.error: Exception | None = None

    def __call__(self, token: str, request, audience: str) -> dict:
        self.calls.append(token)
        if self.error is not None:
            raise self.error
        if token != "good-token":
            raise ValueError("Could not verify token signature.")
        if self.claims.get("aud") != audience:
            raise ValueError("Token has wrong audience")
        if self.claims.get("iss") not in ("accounts.google.com", "https://accounts.google.com"):
            raise GoogleAuthError("Wrong issuer.")
        return dict(self.claims)


@pytest.fixture
def google_verification(google_claims) -> FakeTokenVerification:
    return FakeTokenVerification(google_claims)


@pytest.fixture
def google_verifier(google_verification) -> GoogleTokenVerifier:
    return GoogleTokenVerifier(
        client_id=TEST_GOOGLE_CLIENT_ID,
        verify_token=google_verification,
        request=object(),
    )


@pytest_asyncio.fixture
async def client(session_maker, mailer, storage, google_verifier):
    """Async test client for FastAPI app with test database.

    Overrides the app's get_db dependency to use the test database, and
    starts every test with an empty member-context registry.
    """

    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_google_verifier] = lambda: google_verifier
    app.state.member_contexts = MemberContextRegistry()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


# =============================================================================
# Account Fixtures
# =============================================================================


async def create_account(session_maker, email: str, token: str, expires_in: timedelta = timedelta(hours=1)) -> User:
    """Insert an account with a bearer session and commit."""
    async with session_maker() as session:
        user = User(email=email, email_verified=True)
        session.add(user)
        await session.flush()
        session.add(
            AuthSession(
                token=token,
                user_id=user.id,
                provider="email",
                expires_at=datetime.now(timezone.utc) + expires_in,
            )
        )
        await session.commit()
        return user


@pytest_asyncio.fixture
async def user(session_maker) -> User:
    """Signed-in account without a profile."""
    return await create_account(session_maker, "owner@example.com", "owner-token")


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    """Authentication headers for API requests."""
    return {"Authorization": "Bearer owner-token"}


@pytest_asyncio.fixture
async def other_user(session_maker) -> User:
    """A second account, for ownership checks."""
    return await create_account(session_maker, "stranger@example.com", "stranger-token")


@pytest.fixture
def other_headers(other_user) -> dict[str, str]:
    return {"Authorization": "Bearer stranger-token"}


@pytest_asyncio.fixture
async def family_member(client, auth_headers) -> dict:
    """A family member ("Mom") of the signed-in account."""
    response = await client.post(
        "/api/family",
        json={"full_name": "Mom", "relation": "Mother"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def make_account(session_maker):
    """Factory for extra accounts: ``await make_account(email, token, expires_in)``."""

    async def _make(email: str, token: str, expires_in: timedelta = timedelta(hours=1)) -> User:
        return await create_account(session_maker, email, token, expires_in)

    return _make


class FailingCommitSession(AsyncSession):
    """Session whose commit always fails, as on a lost database connection."""

    async def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("database is locked"))


@pytest.fixture
def fail_commits(client, test_engine):
    """Call to make the commit of every later request fail."""
    failing_maker = async_sessionmaker(test_engine, class_=FailingCommitSession, expire_on_commit=False)

    def _install() -> None:
        async def failing_get_db():
            async with failing_maker() as session:
                try:
                    yield session
                    await session.commit()
                except Exception:
                    await session.rollback()
                    raise

        app.dependency_overrides[get_db] = failing_get_db

    return _install
