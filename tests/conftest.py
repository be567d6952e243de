"""Shared fixtures: an in-memory database per test and an HTTP client bound to it."""

import uuid
from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from backend.app.config import settings
from backend.app.db import create_schema, drop_schema, enable_sqlite_pragmas, get_db
from backend.app.main import app
from backend.app.models.feature import (
    Feature,
    FeatureComment,
    FeatureStatus,
    FeatureVote,
    VoteType,
)
from backend.app.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_INTERNAL_TOKEN = "test-internal-token"


@pytest.fixture(autouse=True)
def internal_token(monkeypatch: pytest.MonkeyPatch) -> str:
    """Configure the shared secret the identity-provider hooks require."""
    monkeypatch.setattr(settings, "internal_token", TEST_INTERNAL_TOKEN)
    return TEST_INTERNAL_TOKEN


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_pragmas(test_engine)
    await create_schema(test_engine)
    yield test_engine
    await drop_schema(test_engine)
    await test_engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests share the test session."""

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield db
            await db.commit()
        except Exception:
            await db.rollback()
            raise

    app.dependency_overrides[get_db] = _override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def auth(user: User | str) -> dict[str, str]:
    """Identity header for requests made as ``user``."""
    user_id = user if isinstance(user, str) else user.id
    return {settings.user_header: user_id}


def internal_auth(token: str = TEST_INTERNAL_TOKEN) -> dict[str, str]:
    """Header the identity provider sends on /_internal calls."""
    return {settings.internal_token_header: token}


async def create_user(
    db: AsyncSession,
    user_id: str | None = None,
    role: str | None = None,
    email: str | None = None,
    display_name: str | None = None,
) -> User:
    user = User(
        id=user_id or str(uuid.uuid4()),
        role=role,
        email=email,
        display_name=display_name,
    )
    db.add(user)
    await db.flush()
    return user


async def create_feature(
    db: AsyncSession,
    created_by: str,
    title: str = "Test Feature",
    description: str | None = None,
    status: FeatureStatus = FeatureStatus.backlog,
    category: str | None = None,
    created_at: str | None = None,
) -> Feature:
    feature = Feature(
        title=title,
        description=description,
        status=status,
        category=category,
        created_by=created_by,
    )
    if created_at is not None:
        feature.created_at = created_at
        feature.updated_at = created_at
    db.add(feature)
    await db.flush()
    return feature


async def create_vote(
    db: AsyncSession,
    feature_id: str,
    user_id: str,
    vote_type: VoteType = VoteType.upvote,
) -> FeatureVote:
    vote = FeatureVote(feature_id=feature_id, user_id=user_id, vote_type=vote_type)
    db.add(vote)
    await db.flush()
    return vote


async def create_comment(
    db: AsyncSession,
    feature_id: str,
    user_id: str,
    content: str = "Would use this daily",
) -> FeatureComment:
    comment = FeatureComment(feature_id=feature_id, user_id=user_id, content=content)
    db.add(comment)
    await db.flush()
    return comment
