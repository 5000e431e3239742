from typing import Any, Dict

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings
from core.database import enable_sqlite_foreign_keys, get_db
from core.security import create_access_token
from models.base import Base
from models import daily_quota, match, profile, swipe  # noqa: F401
from models.profile import Profile
from schemas.profile import ProfileData
from services import match_events


def make_profile(user_id: str, **overrides: Any) -> ProfileData:
    data: Dict[str, Any] = {"user_id": user_id, "age": 30}
    data.update(overrides)
    return ProfileData(**data)


@pytest.fixture(autouse=True)
def quota_limits():
    original = {
        "DAILY_LIKE_LIMIT": settings.DAILY_LIKE_LIMIT,
        "DAILY_SUPERLIKE_LIMIT": settings.DAILY_SUPERLIKE_LIMIT,
        "QUOTA_TIMEZONE": settings.QUOTA_TIMEZONE,
    }
    settings.DAILY_LIKE_LIMIT = 10
    settings.DAILY_SUPERLIKE_LIMIT = 1
    settings.QUOTA_TIMEZONE = "UTC"
    try:
        yield
    finally:
        for key, value in original.items():
            setattr(settings, key, value)


@pytest.fixture(autouse=True)
def no_match_listeners():
    match_events.clear_listeners()
    yield
    match_events.clear_listeners()


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def save_profile(db):
    async def _save(user_id: str, **overrides: Any) -> Profile:
        data = make_profile(user_id, **overrides).model_dump(mode="json")
        row = Profile(**data)
        db.add(row)
        await db.commit()
        return row

    return _save


@pytest.fixture
async def client(session_factory):
    from main import app

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http:
        yield http
    app.dependency_overrides.clear()


def auth_headers(user_id: str, unlimited: bool = False) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user_id, unlimited=unlimited)}"}
