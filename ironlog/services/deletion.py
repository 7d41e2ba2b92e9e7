"""Workout deletion: ownership check, cascade delete and aggregate reversal in one transaction."""

from __future__ import annotations

import logging
import uuid

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.errors import Forbidden, NotFound, PersistenceFailure
from ironlog.models.workout import Workout
from ironlog.services.aggregates import apply_workout_delta, utc_day, workout_volume

logger = logging.getLogger(__name__)


async def delete_workout(db: AsyncSession, workout_id: uuid.UUID, user_id: uuid.UUID) -> float:
    """Delete ``workout_id`` owned by ``user_id``; returns the volume removed from the aggregates.

    Exercises and sets go with the header through ON DELETE CASCADE.
    """
    row = (
        await db.execute(
            select(Workout.user_id, Workout.created_at).where(Workout.id == workout_id).with_for_update()
        )
    ).one_or_none()
    if row is None:
        raise NotFound("Workout not found")
    if row.user_id != user_id:
        raise Forbidden("Workout belongs to another user")

    try:
        volume = await workout_volume(db, workout_id)
        result = await db.execute(
            delete(Workout).where(Workout.id == workout_id).execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            # Removed by a concurrent request between the lookup and the delete
            await db.rollback()
            raise NotFound("Workout not found")
        await apply_workout_delta(db, user_id, utc_day(row.created_at), -volume, -1)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.exception("Failed to delete workout %s", workout_id)
        raise PersistenceFailure("Could not delete workout", workout_id=workout_id) from e

    logger.info("Deleted workout %s for user %s (volume %.2f)", workout_id, user_id, volume)
    return volume
