"""Shared test fixtures and configuration."""

import pytest
from typing import Generator, AsyncGenerator
from unittest.mock import AsyncMock
import os

# Set TESTING flag to prevent loading .env file
os.environ['TESTING'] = '1'

# Set up test environment BEFORE any imports
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'
os.environ['DEBUG'] = 'true'

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from reprotrack.database import Base
from reprotrack.models import User
from reprotrack.services.mother_registry import MotherRegistry
from reprotrack.services.litter_ledger import LitterLedger
from reprotrack.services.offspring_registry import OffspringRegistry
from reprotrack.services.report_aggregator import ReportAggregator


TEST_DATABASE_URL = os.environ.get('TEST_DATABASE_URL', 'sqlite+aiosqlite:///:memory:')

FAKE_SUMMARY = (
    '{"highPerformers": ["EWE-1"], "lowPerformers": [], "concerningTrends": [], '
    '"averagePerformers": [], "potentialRecordErrors": [], "insights": "Strong season."}'
)


@pytest.fixture(autouse=True)
def setup_test_env() -> Generator[None, None, None]:
    """Set up test environment variables before each test."""
    original_env = os.environ.copy()

    # Set TESTING flag
    os.environ['TESTING'] = '1'

    # Set required environment variables for testing
    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///:memory:'
    os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests that need to test missing variables."""
    original_env = os.environ.copy()

    # Clear all environment variables except TESTING
    os.environ.clear()
    os.environ['TESTING'] = '1'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


def make_test_engine():
    """Engine for the test database; in-memory SQLite shares one connection."""
    if TEST_DATABASE_URL.startswith('sqlite'):
        return create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL, echo=False, pool_pre_ping=True)


@pytest.fixture
async def test_engine():
    """Provide an engine with all tables created, dropped afterwards."""
    engine = make_test_engine()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def async_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session for tests."""
    async_session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def test_user(async_session: AsyncSession) -> User:
    """Create a test user."""
    user = User(
        email="test@example.com",
        hashed_password="hashed_password_placeholder",
        name="Test User",
        is_active=True,
        is_superuser=False,
        is_verified=False
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user


@pytest.fixture
async def other_user(async_session: AsyncSession) -> User:
    """Create a second user to check that records are isolated per owner."""
    user = User(
        email="other@example.com",
        hashed_password="hashed_password_placeholder",
        name="Other User",
        is_active=True,
        is_superuser=False,
        is_verified=False
    )
    async_session.add(user)
    await async_session.commit()
    await async_session.refresh(user)
    return user


@pytest.fixture
def owner_id(test_user: User):
    """Owner id of the test user."""
    return test_user.id


@pytest.fixture
def fake_summarizer() -> AsyncMock:
    """Summarizer double returning a fixed, valid summary."""
    summarizer = AsyncMock()
    summarizer.summarize = AsyncMock(return_value=FAKE_SUMMARY)
    return summarizer


@pytest.fixture
def mothers(async_session: AsyncSession) -> MotherRegistry:
    return MotherRegistry(async_session)


@pytest.fixture
def litters(async_session: AsyncSession, mothers: MotherRegistry) -> LitterLedger:
    return LitterLedger(async_session, mothers)


@pytest.fixture
def offspring(async_session: AsyncSession, litters: LitterLedger) -> OffspringRegistry:
    return OffspringRegistry(async_session, litters)


@pytest.fixture
def reports(async_session: AsyncSession, mothers: MotherRegistry, fake_summarizer) -> ReportAggregator:
    return ReportAggregator(async_session, fake_summarizer, mothers)


@pytest.fixture
async def async_client(async_session: AsyncSession, test_user: User, fake_summarizer):
    """Create test client with database session, auth and summarizer overrides."""
    from httpx import AsyncClient, ASGITransport
    from reprotrack.main import app
    from reprotrack.database import get_async_session
    from reprotrack.dependencies import current_active_user, get_summarizer

    async def override_get_async_session():
        yield async_session

    async def override_current_active_user():
        return test_user

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[current_active_user] = override_current_active_user
    app.dependency_overrides[get_summarizer] = lambda: fake_summarizer

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def unauthenticated_client(async_session: AsyncSession):
    """Create test client with database session override but NO auth override.

    Use this for tests that need to test the full authentication flow
    (registration, login, etc.) without pre-authenticated users.
    """
    from httpx import AsyncClient, ASGITransport
    from reprotrack.main import app
    from reprotrack.database import get_async_session

    async def override_get_async_session():
        yield async_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def auth_headers(test_user: User):
    """Create authentication headers for test user."""
    # Since we're overriding the dependency, we don't need a real token
    # But we'll provide headers for consistency
    return {"Authorization": f"Bearer test_token_{test_user.id}"}
