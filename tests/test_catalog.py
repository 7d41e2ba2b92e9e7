"""Exercise catalog reads."""
import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from ironlog.core.errors import CatalogUnavailable
from ironlog.db.seed import EXERCISE_CATALOG, seed_catalog
from ironlog.db.session import make_session_maker
from ironlog.services.catalog import list_exercises, resolve_exercises


async def test_flat_list_holds_every_seeded_exercise(db):
    catalog = await list_exercises(db)
    assert len(catalog.flat) == len(EXERCISE_CATALOG)
    assert {ex.id for ex in catalog.flat} == {row[0] for row in EXERCISE_CATALOG}


async def test_grouped_by_primary_muscle_group(db):
    catalog = await list_exercises(db)
    assert set(catalog.grouped) == {row[2] for row in EXERCISE_CATALOG}
    chest = {ex.id for ex in catalog.grouped["Chest"]}
    assert chest == {"barbell-bench-press", "bench-press"}
    for group, exercises in catalog.grouped.items():
        assert all(ex.primary_muscle_group == group for ex in exercises)


async def test_seed_is_idempotent(db):
    assert await seed_catalog(db) == 0


async def test_resolve_returns_only_known_ids(db):
    found = await resolve_exercises(db, ["squats", "not-an-exercise", ""])
    assert set(found) == {"squats"}
    assert found["squats"].name == "Squats"


async def test_unreachable_store_raises_catalog_unavailable(tmp_path):
    # Schema never created: every catalog query fails at the storage layer
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    try:
        async with make_session_maker(engine)() as session:
            with pytest.raises(CatalogUnavailable):
                await list_exercises(session)
            with pytest.raises(CatalogUnavailable):
                await resolve_exercises(session, ["squats"])
    finally:
        await engine.dispose()
