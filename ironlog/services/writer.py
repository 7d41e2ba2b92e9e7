"""Workout persistence: header, exercises, sets and aggregates as one logical unit.

The header is committed first so the workout id exists; the exercise/set
tree and every aggregate change then commit together in a second
transaction. If that transaction fails the header is deleted again. A
failed delete is the only path that can leave a stray header behind and is
reported as ``CompensationFailed`` on the alert channel.
"""

from __future__ import annotations

import logging
import math
import uuid

from sqlalchemy import delete, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.constants import VOLUME_MISMATCH_TOLERANCE
from ironlog.core.errors import CompensationFailed, PersistenceFailure
from ironlog.core.logging import alert_logger
from ironlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from ironlog.services.aggregates import apply_workout_delta, compute_volume, ensure_user, utc_day
from ironlog.services.validation import ValidatedWorkout

logger = logging.getLogger(__name__)


async def _insert_header(db: AsyncSession, user_id: uuid.UUID) -> Workout:
    try:
        await ensure_user(db, user_id)
        header = Workout(user_id=user_id)
        db.add(header)
        await db.flush()
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to create workout header for user %s", user_id)
        raise PersistenceFailure() from e
    return header


async def _insert_tree(db: AsyncSession, header: Workout, workout: ValidatedWorkout) -> float:
    """Exercises, sets, stored volume and aggregates; caller commits or rolls back."""
    volume = compute_volume(s for item in workout.exercises for s in item.sets)

    for position, item in enumerate(workout.exercises):
        db.add(
            WorkoutExercise(
                workout_id=header.id,
                exercise_id=item.exercise_id,
                position=position,
                sets=[
                    WorkoutSet(position=set_position, reps=s.reps, weight_kg=s.weight_kg)
                    for set_position, s in enumerate(item.sets)
                ],
            )
        )
    await db.flush()

    await db.execute(
        update(Workout)
        .where(Workout.id == header.id)
        .values(total_volume=volume)
        .execution_options(synchronize_session=False)
    )
    await apply_workout_delta(db, workout.user_id, utc_day(header.created_at), volume, 1)
    return volume


async def _delete_header(db: AsyncSession, workout_id: uuid.UUID) -> None:
    await db.execute(
        delete(Workout).where(Workout.id == workout_id).execution_options(synchronize_session=False)
    )
    await db.commit()


async def _compensate(db: AsyncSession, workout_id: uuid.UUID, user_id: uuid.UUID, cause: BaseException) -> None:
    try:
        await _delete_header(db, workout_id)
    except Exception as compensation_error:
        try:
            await db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback after failed compensation also failed")
        alert_logger.critical(
            "Compensating delete failed; workout header %s for user %s needs manual cleanup "
            "(write error: %r, delete error: %r)",
            workout_id,
            user_id,
            cause,
            compensation_error,
        )
        raise CompensationFailed(workout_id, cause, compensation_error) from compensation_error
    logger.warning("Removed workout header %s after failed write", workout_id)


def _check_client_volume(workout: ValidatedWorkout, volume: float) -> None:
    claimed = workout.client_total_volume
    if claimed is None:
        return
    if not math.isclose(claimed, volume, rel_tol=VOLUME_MISMATCH_TOLERANCE, abs_tol=VOLUME_MISMATCH_TOLERANCE):
        logger.warning(
            "Client volume %.2f differs from computed %.2f for user %s; using computed value",
            claimed,
            volume,
            workout.user_id,
        )


async def save_workout(db: AsyncSession, workout: ValidatedWorkout) -> uuid.UUID:
    """Persist ``workout`` and return its id. Nothing partial survives a failure."""
    header = await _insert_header(db, workout.user_id)
    workout_id = header.id

    try:
        volume = await _insert_tree(db, header, workout)
        await db.commit()
    except BaseException as e:
        # Cancellation lands here too; the header must not outlive the request
        logger.exception("Failed to write exercises/sets for workout %s", workout_id)
        try:
            await db.rollback()
        except SQLAlchemyError:
            logger.exception("Rollback of workout %s failed", workout_id)
        await _compensate(db, workout_id, workout.user_id, e)
        if not isinstance(e, Exception):
            raise
        raise PersistenceFailure(workout_id=workout_id) from e

    _check_client_volume(workout, volume)
    logger.info(
        "Saved workout %s for user %s: %d exercises, volume %.2f",
        workout_id,
        workout.user_id,
        len(workout.exercises),
        volume,
    )
    return workout_id
