"""Workout deletion: ownership, cascade and aggregate reversal."""
import uuid

import pytest
from sqlalchemy import func, select

from ironlog.core.errors import Forbidden, NotFound
from ironlog.models import DailyVolume, Workout, WorkoutExercise, WorkoutSet
from ironlog.services.deletion import delete_workout


async def _count(db, model, *where):
    return await db.scalar(select(func.count()).select_from(model).where(*where))


async def test_delete_reverses_volume_and_cascades(db, save, user_id, user_totals):
    keep_id = await save(user_id, ("squats", [(10, 100)]))
    # two exercises, three sets, 500 kg*reps in total
    doomed_id = await save(user_id, ("bench-press", [(10, 20), (5, 20)]), ("squats", [(10, 20)]))
    assert await user_totals(user_id) == (1500, 2)

    removed = await delete_workout(db, doomed_id, user_id)

    assert removed == 500
    assert await user_totals(user_id) == (1000, 1)
    assert await _count(db, Workout, Workout.id == doomed_id) == 0
    assert await _count(db, WorkoutExercise, WorkoutExercise.workout_id == doomed_id) == 0
    assert await _count(db, WorkoutSet) == 1
    assert await _count(db, Workout, Workout.id == keep_id) == 1
    daily = (await db.execute(select(DailyVolume.volume).where(DailyVolume.user_id == user_id))).scalars().all()
    assert daily == [1000]


async def test_other_user_cannot_delete(db, save, user_id, other_user_id, user_totals):
    workout_id = await save(user_id, ("deadlifts", [(5, 100)]))

    with pytest.raises(Forbidden):
        await delete_workout(db, workout_id, other_user_id)
    await db.rollback()

    assert await _count(db, Workout, Workout.id == workout_id) == 1
    assert await user_totals(user_id) == (500, 1)


async def test_missing_workout(db, user_id):
    with pytest.raises(NotFound):
        await delete_workout(db, uuid.uuid4(), user_id)


async def test_second_delete_is_not_found(db, save, user_id, user_totals):
    workout_id = await save(user_id, ("deadlifts", [(5, 100)]))
    await delete_workout(db, workout_id, user_id)

    with pytest.raises(NotFound):
        await delete_workout(db, workout_id, user_id)
    assert await user_totals(user_id) == (0, 0)


async def test_totals_match_remaining_workouts_after_mixed_operations(db, save, user_id, user_totals):
    ids = [
        await save(user_id, ("squats", [(5, 100)])),
        await save(user_id, ("bench-press", [(8, 62.5), (8, 62.5)])),
        await save(user_id, ("pull-up", [(10, 0)]), ("bicep-curls", [(12, 12.5)])),
        await save(user_id, ("leg-press", [(10, 180)])),
    ]
    await delete_workout(db, ids[1], user_id)
    await delete_workout(db, ids[3], user_id)
    ids.append(await save(user_id, ("lunges", [(12, 22.5)])))

    remaining = (
        await db.execute(select(func.coalesce(func.sum(Workout.total_volume), 0), func.count()).where(Workout.user_id == user_id))
    ).one()
    total_volume, total_workouts = await user_totals(user_id)
    assert total_workouts == remaining[1] == 3
    assert total_volume == pytest.approx(remaining[0])
    assert total_volume == pytest.approx(500 + 150 + 270)
