"""Running aggregates: user totals and the DailyVolume series.

Every change here is a single statement evaluated by the database
(``col = col + :delta`` or an upsert), so concurrent saves for the same
user serialize on the row lock instead of losing updates.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Protocol

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.models.daily_volume import DailyVolume
from ironlog.models.user import User
from ironlog.models.workout import WorkoutExercise, WorkoutSet


class _HasRepsAndWeight(Protocol):
    reps: int
    weight_kg: float


def compute_volume(sets: Iterable[_HasRepsAndWeight]) -> float:
    """sum(reps * weight_kg); zero-weight sets count as valid sets contributing 0."""
    return float(sum(s.reps * s.weight_kg for s in sets))


def utc_day(ts: datetime) -> date:
    """Calendar date of ``ts`` in UTC (naive values are taken as UTC already)."""
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc)
    return ts.date()


def _insert_for(db: AsyncSession):
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return pg_insert
    if dialect == "sqlite":
        return sqlite_insert
    raise NotImplementedError(f"Upsert not supported on dialect {dialect!r}")


async def ensure_user(db: AsyncSession, user_id: uuid.UUID) -> None:
    """Create the users row for ``user_id`` if it does not exist yet."""
    insert = _insert_for(db)
    stmt = (
        insert(User)
        .values(id=user_id, total_volume=0.0, total_workouts=0)
        .on_conflict_do_nothing(index_elements=[User.id])
    )
    await db.execute(stmt)


async def workout_volume(db: AsyncSession, workout_id: uuid.UUID) -> float:
    """Recompute a stored workout's volume from its sets."""
    result = await db.execute(
        select(func.coalesce(func.sum(WorkoutSet.reps * WorkoutSet.weight_kg), 0.0))
        .select_from(WorkoutSet)
        .join(WorkoutExercise, WorkoutExercise.id == WorkoutSet.workout_exercise_id)
        .where(WorkoutExercise.workout_id == workout_id)
    )
    return float(result.scalar_one())


async def apply_workout_delta(
    db: AsyncSession,
    user_id: uuid.UUID,
    day: date,
    volume: float,
    workouts: int,
) -> None:
    """Add ``volume`` and ``workouts`` (negative on delete) to the user totals and the day's volume."""
    await db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            total_volume=User.total_volume + volume,
            total_workouts=User.total_workouts + workouts,
        )
        .execution_options(synchronize_session=False)
    )

    if workouts > 0:
        insert = _insert_for(db)
        stmt = insert(DailyVolume).values(user_id=user_id, date=day, volume=volume)
        stmt = stmt.on_conflict_do_update(
            index_elements=[DailyVolume.user_id, DailyVolume.date],
            set_={"volume": DailyVolume.volume + stmt.excluded.volume},
        )
        await db.execute(stmt)
    else:
        await db.execute(
            update(DailyVolume)
            .where(DailyVolume.user_id == user_id, DailyVolume.date == day)
            .values(volume=DailyVolume.volume + volume)
            .execution_options(synchronize_session=False)
        )
