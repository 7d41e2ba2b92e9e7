"""Exercise catalog seed data and loader."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.models.exercise import Exercise

logger = logging.getLogger(__name__)

# (id, name, primary_muscle_group, secondary_muscle_group)
EXERCISE_CATALOG: list[tuple[str, str, str, str | None]] = [
    # Upper body
    ("barbell-bench-press", "Barbell Bench Press", "Chest", "Triceps"),
    ("bench-press", "Bench Press", "Chest", "Triceps"),
    ("bent-over-row", "Bent-Over Row", "Back", "Biceps"),
    ("shoulder-press", "Shoulder Press", "Shoulders", "Triceps"),
    ("pull-up", "Pull-up", "Back", "Biceps"),
    # Lower body
    ("squats", "Squats", "Legs", "Glutes"),
    ("deadlifts", "Deadlifts", "Back", "Hamstrings"),
    ("calf-raises", "Calf Raises", "Calves", None),
    ("lunges", "Lunges", "Legs", "Glutes"),
    ("leg-press", "Leg Press", "Legs", "Glutes"),
    # Arms
    ("bicep-curls", "Bicep Curls", "Biceps", None),
    ("tricep-extensions", "Tricep Extensions", "Triceps", None),
    ("hammer-curls", "Hammer Curls", "Biceps", None),
    ("skull-crushers", "Skull Crushers", "Triceps", None),
]


async def seed_catalog(db: AsyncSession) -> int:
    """Insert catalog rows that are not present yet. Returns how many were added."""
    result = await db.execute(select(Exercise.id))
    existing = set(result.scalars().all())
    added = 0
    for exercise_id, name, primary, secondary in EXERCISE_CATALOG:
        if exercise_id in existing:
            continue
        db.add(
            Exercise(
                id=exercise_id,
                name=name,
                primary_muscle_group=primary,
                secondary_muscle_group=secondary,
            )
        )
        added += 1
    await db.flush()
    logger.info("Seeded %d catalog exercises (%d already present)", added, len(existing))
    return added
