"""Exercise catalog reads. Read-only; no retries here, callers decide."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.errors import CatalogUnavailable
from ironlog.models.exercise import Exercise
from ironlog.schemas.exercise import CatalogRead, ExerciseRead

logger = logging.getLogger(__name__)


async def list_exercises(db: AsyncSession) -> CatalogRead:
    """All catalog exercises, flat and grouped by primary muscle group."""
    try:
        result = await db.execute(select(Exercise).order_by(Exercise.name))
        exercises = result.scalars().all()
    except SQLAlchemyError as e:
        logger.error("Catalog read failed: %s", e)
        raise CatalogUnavailable() from e

    flat = [ExerciseRead.model_validate(ex) for ex in exercises]
    grouped: dict[str, list[ExerciseRead]] = {}
    for ex in flat:
        grouped.setdefault(ex.primary_muscle_group, []).append(ex)
    return CatalogRead(grouped=grouped, flat=flat)


async def resolve_exercises(db: AsyncSession, exercise_ids: Iterable[str]) -> dict[str, Exercise]:
    """Map each known id to its catalog row. Unknown ids are simply absent from the result."""
    ids = {i for i in exercise_ids if i}
    if not ids:
        return {}
    try:
        result = await db.execute(select(Exercise).where(Exercise.id.in_(ids)))
        return {ex.id: ex for ex in result.scalars().all()}
    except SQLAlchemyError as e:
        logger.error("Catalog lookup failed: %s", e)
        raise CatalogUnavailable() from e
