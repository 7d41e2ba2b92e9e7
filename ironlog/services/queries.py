"""Workout reads: detail with nested exercises/sets, paginated history, user totals."""

from __future__ import annotations

import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from ironlog.core.errors import Forbidden, NotFound, ValidationFailed, ValidationIssue
from ironlog.models.daily_volume import DailyVolume
from ironlog.models.user import User
from ironlog.models.workout import Workout, WorkoutExercise
from ironlog.schemas.workout import (
    DailyVolumePoint,
    UserStats,
    WorkoutDetail,
    WorkoutExerciseRead,
    WorkoutSetRead,
    WorkoutSummary,
)


async def get_workout(db: AsyncSession, workout_id: uuid.UUID, requester_id: uuid.UUID) -> WorkoutDetail:
    """Full workout tree in one query. Only the owner may read it."""
    result = await db.execute(
        select(Workout)
        .where(Workout.id == workout_id)
        .options(
            joinedload(Workout.exercises).joinedload(WorkoutExercise.exercise),
            joinedload(Workout.exercises).joinedload(WorkoutExercise.sets),
        )
        .execution_options(populate_existing=True)
    )
    workout = result.unique().scalar_one_or_none()
    if workout is None:
        raise NotFound("Workout not found")
    if workout.user_id != requester_id:
        raise Forbidden("Workout belongs to another user")

    return WorkoutDetail(
        id=workout.id,
        user_id=workout.user_id,
        created_at=workout.created_at,
        total_volume=workout.total_volume,
        exercises=[
            WorkoutExerciseRead(
                id=we.id,
                exercise_id=we.exercise_id,
                position=we.position,
                name=we.exercise.name,
                primary_muscle_group=we.exercise.primary_muscle_group,
                secondary_muscle_group=we.exercise.secondary_muscle_group,
                created_at=we.created_at,
                sets=[WorkoutSetRead.model_validate(s) for s in sorted(we.sets, key=lambda s: s.position)],
            )
            for we in sorted(workout.exercises, key=lambda we: we.position)
        ],
    )


async def list_workouts(
    db: AsyncSession,
    user_id: uuid.UUID,
    page: int = 1,
    page_size: int = 20,
) -> list[WorkoutSummary]:
    """User's workouts, newest first; page N starts at (N - 1) * page_size."""
    issues = []
    if page < 1:
        issues.append(ValidationIssue(loc=("query", "page"), msg="page must be at least 1"))
    if page_size < 1:
        issues.append(ValidationIssue(loc=("query", "page_size"), msg="page_size must be at least 1"))
    if issues:
        raise ValidationFailed(issues)

    exercise_counts = (
        select(WorkoutExercise.workout_id, func.count(WorkoutExercise.id).label("n"))
        .group_by(WorkoutExercise.workout_id)
        .subquery()
    )
    stmt = (
        select(Workout, func.coalesce(exercise_counts.c.n, 0).label("exercise_count"))
        .outerjoin(exercise_counts, exercise_counts.c.workout_id == Workout.id)
        .where(Workout.user_id == user_id)
        .order_by(Workout.created_at.desc(), Workout.id.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    result = await db.execute(stmt)
    return [
        WorkoutSummary(
            id=w.id,
            created_at=w.created_at,
            total_volume=w.total_volume,
            exercise_count=int(count or 0),
        )
        for w, count in result.all()
    ]


async def get_user_stats(
    db: AsyncSession,
    user_id: uuid.UUID,
    from_date: date | None = None,
    to_date: date | None = None,
) -> UserStats:
    """Running totals plus the daily volume series (oldest first)."""
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()

    stmt = select(DailyVolume).where(DailyVolume.user_id == user_id)
    if from_date:
        stmt = stmt.where(DailyVolume.date >= from_date)
    if to_date:
        stmt = stmt.where(DailyVolume.date <= to_date)
    rows = (await db.execute(stmt.order_by(DailyVolume.date))).scalars().all()

    return UserStats(
        total_volume=user.total_volume if user else 0.0,
        total_workouts=user.total_workouts if user else 0,
        daily_volume=[DailyVolumePoint.model_validate(r) for r in rows],
    )
