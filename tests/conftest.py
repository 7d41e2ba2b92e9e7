"""
Pytest configuration and fixtures

Every test gets its own SQLite database file with the schema created from
the ORM metadata and the exercise catalog seeded. Foreign keys are switched
on so ON DELETE CASCADE behaves as it does on PostgreSQL.
"""
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

import ironlog.models  # noqa: F401 - register all models
from ironlog.core.security import create_access_token
from ironlog.db.base import Base
from ironlog.db.seed import seed_catalog
from ironlog.db.session import enable_sqlite_foreign_keys, get_db, make_session_maker
from ironlog.main import app
from ironlog.models import User
from ironlog.services.validation import validate_submission
from ironlog.services.writer import save_workout


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ironlog-test.db'}")
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = make_session_maker(engine)
    async with session_maker() as session:
        await seed_catalog(session)
        await session.commit()
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return make_session_maker(engine)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    return uuid.uuid4()


@pytest.fixture
def auth_headers():
    """Build Authorization headers for a user id."""

    def _headers(uid):
        return {"Authorization": f"Bearer {create_access_token(uid)}"}

    return _headers


@pytest.fixture
def save(db):
    """Validate and save a workout built from (exercise_id, [(reps, weight_kg), ...]) pairs."""

    async def _save(uid, *exercises, total_volume=None):
        payload = {
            "exercises": [
                {"exercise_id": exercise_id, "sets": [{"reps": r, "weight_kg": w} for r, w in sets]}
                for exercise_id, sets in exercises
            ],
        }
        if total_volume is not None:
            payload["totalVolume"] = total_volume
        validated = await validate_submission(db, payload, uid)
        return await save_workout(db, validated)

    return _save


@pytest.fixture
def user_totals(db):
    """(total_volume, total_workouts) as currently stored for a user."""

    async def _totals(uid):
        result = await db.execute(select(User.total_volume, User.total_workouts).where(User.id == uid))
        row = result.one_or_none()
        return (row.total_volume, row.total_workouts) if row else (0.0, 0)

    return _totals


@pytest.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
