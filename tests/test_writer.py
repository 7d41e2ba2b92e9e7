"""Workout persistence: atomic save, server-side volume, compensation on failure."""
import asyncio
import logging
import uuid

import pytest
from sqlalchemy import func, select

from ironlog.core.constants import ALERT_LOGGER_NAME
from ironlog.core.errors import CompensationFailed, PersistenceFailure
from ironlog.models import DailyVolume, Exercise, Workout, WorkoutExercise, WorkoutSet
from ironlog.services import writer
from ironlog.services.validation import ValidatedExercise, ValidatedSet, ValidatedWorkout


async def _count(db, model, *where):
    return await db.scalar(select(func.count()).select_from(model).where(*where))


async def _boom(*args, **kwargs):
    raise RuntimeError("connection lost mid-batch")


class TestSave:
    async def test_single_set_workout(self, db, save, user_id, user_totals):
        db.add(Exercise(id="ex1", name="Bench Press", primary_muscle_group="Chest"))
        await db.commit()

        workout_id = await save(user_id, ("ex1", [(10, 100)]))

        stored = await db.scalar(select(Workout.total_volume).where(Workout.id == workout_id))
        assert stored == 1000
        assert await user_totals(user_id) == (1000, 1)
        assert await _count(db, WorkoutExercise, WorkoutExercise.workout_id == workout_id) == 1

    async def test_client_volume_is_advisory(self, db, save, user_id, user_totals, caplog):
        with caplog.at_level(logging.WARNING, logger="ironlog.services.writer"):
            workout_id = await save(user_id, ("squats", [(5, 100), (5, 110)]), total_volume=9999)

        assert await db.scalar(select(Workout.total_volume).where(Workout.id == workout_id)) == 1050
        assert await user_totals(user_id) == (1050, 1)
        assert any("differs from computed" in r.getMessage() for r in caplog.records)

    async def test_zero_weight_set_is_stored_and_adds_nothing(self, db, save, user_id, user_totals):
        workout_id = await save(user_id, ("pull-up", [(12, 0), (10, 0)]), ("bicep-curls", [(10, 15)]))

        assert await user_totals(user_id) == (150, 1)
        weights = (
            await db.execute(
                select(WorkoutSet.weight_kg)
                .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
                .where(WorkoutExercise.workout_id == workout_id)
            )
        ).scalars().all()
        assert sorted(weights) == [0, 0, 15]

    async def test_payload_order_is_kept_in_positions(self, db, save, user_id):
        workout_id = await save(user_id, ("squats", [(5, 100), (3, 120)]), ("lunges", [(12, 20)]))

        rows = (
            await db.execute(
                select(WorkoutExercise.exercise_id, WorkoutExercise.position)
                .where(WorkoutExercise.workout_id == workout_id)
                .order_by(WorkoutExercise.position)
            )
        ).all()
        assert [tuple(r) for r in rows] == [("squats", 0), ("lunges", 1)]
        squat_sets = (
            await db.execute(
                select(WorkoutSet.position, WorkoutSet.reps)
                .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
                .where(WorkoutExercise.workout_id == workout_id, WorkoutExercise.exercise_id == "squats")
                .order_by(WorkoutSet.position)
            )
        ).all()
        assert [tuple(r) for r in squat_sets] == [(0, 5), (1, 3)]

    async def test_same_day_saves_accumulate_daily_volume(self, db, save, user_id, user_totals):
        await save(user_id, ("deadlifts", [(5, 140)]))
        await save(user_id, ("leg-press", [(10, 50)]))

        assert await user_totals(user_id) == (1200, 2)
        rows = (await db.execute(select(DailyVolume.volume).where(DailyVolume.user_id == user_id))).scalars().all()
        assert rows == [1200]

    async def test_users_do_not_share_totals(self, save, user_id, other_user_id, user_totals):
        await save(user_id, ("squats", [(10, 100)]))
        await save(other_user_id, ("squats", [(1, 50)]))

        assert await user_totals(user_id) == (1000, 1)
        assert await user_totals(other_user_id) == (50, 1)


class TestFailure:
    async def test_failure_after_header_removes_header(self, db, save, user_id, user_totals, monkeypatch):
        monkeypatch.setattr(writer, "apply_workout_delta", _boom)

        with pytest.raises(PersistenceFailure) as exc_info:
            await save(user_id, ("bench-press", [(10, 100)]), ("squats", [(5, 100)]))

        err = exc_info.value
        assert not isinstance(err, CompensationFailed)
        assert err.workout_id is not None
        assert isinstance(err.__cause__, RuntimeError)
        assert await _count(db, Workout, Workout.id == err.workout_id) == 0
        assert await _count(db, WorkoutExercise) == 0
        assert await _count(db, WorkoutSet) == 0
        assert await _count(db, DailyVolume) == 0
        assert await user_totals(user_id) == (0, 0)

    async def test_cancelled_save_removes_header(self, db, save, user_id, user_totals, monkeypatch):
        async def _cancelled(*args, **kwargs):
            raise asyncio.CancelledError()

        monkeypatch.setattr(writer, "apply_workout_delta", _cancelled)

        with pytest.raises(asyncio.CancelledError):
            await save(user_id, ("squats", [(5, 100)]))

        assert await _count(db, Workout) == 0
        assert await _count(db, WorkoutExercise) == 0
        assert await user_totals(user_id) == (0, 0)

    async def test_unknown_exercise_at_storage_layer(self, db, user_id, user_totals):
        # Passed validation against a catalog entry that has since disappeared
        validated = ValidatedWorkout(
            user_id=user_id,
            exercises=(ValidatedExercise("retired-lift", "Retired Lift", (ValidatedSet(5, 50.0),)),),
        )

        with pytest.raises(PersistenceFailure) as exc_info:
            await writer.save_workout(db, validated)

        assert await _count(db, Workout, Workout.id == exc_info.value.workout_id) == 0
        assert await user_totals(user_id) == (0, 0)

    async def test_failed_compensation_is_alerted(self, db, save, user_id, monkeypatch, caplog):
        async def _delete_fails(db, workout_id):
            raise RuntimeError("database went away")

        monkeypatch.setattr(writer, "apply_workout_delta", _boom)
        monkeypatch.setattr(writer, "_delete_header", _delete_fails)

        with caplog.at_level(logging.CRITICAL, logger=ALERT_LOGGER_NAME):
            with pytest.raises(CompensationFailed) as exc_info:
                await save(user_id, ("bench-press", [(10, 100)]))

        err = exc_info.value
        assert isinstance(err, PersistenceFailure)
        assert isinstance(err.cause, RuntimeError)
        assert "went away" in str(err.compensation_error)
        alerts = [r for r in caplog.records if r.name == ALERT_LOGGER_NAME]
        assert len(alerts) == 1
        assert alerts[0].levelno == logging.CRITICAL
        assert str(err.workout_id) in alerts[0].getMessage()
        # The stray header is the documented inconsistent state an operator must clean up
        assert await _count(db, Workout, Workout.id == err.workout_id) == 1
        assert await _count(db, WorkoutSet) == 0

    async def test_next_save_succeeds_after_a_failure(self, db, save, user_id, user_totals, monkeypatch):
        monkeypatch.setattr(writer, "apply_workout_delta", _boom)
        with pytest.raises(PersistenceFailure):
            await save(user_id, ("squats", [(5, 100)]))
        monkeypatch.undo()

        workout_id = await save(user_id, ("squats", [(5, 100)]))

        assert isinstance(workout_id, uuid.UUID)
        assert await _count(db, Workout) == 1
        assert await user_totals(user_id) == (500, 1)
