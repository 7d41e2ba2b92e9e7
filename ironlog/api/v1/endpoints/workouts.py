"""Workout endpoints: save, history, detail, delete."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.config import get_settings
from ironlog.core.errors import Unauthenticated, ValidationFailed, ValidationIssue
from ironlog.core.security import get_principal, require_principal
from ironlog.db.session import get_db
from ironlog.schemas.workout import WorkoutCreated, WorkoutDetail, WorkoutSummary
from ironlog.services.deletion import delete_workout as delete_workout_service
from ironlog.services.queries import get_workout as get_workout_service
from ironlog.services.queries import list_workouts as list_workouts_service
from ironlog.services.validation import validate_submission
from ironlog.services.writer import save_workout

router = APIRouter()
settings = get_settings()


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError as e:
        raise ValidationFailed([ValidationIssue(loc=("body",), msg="request body must be valid JSON")]) from e


@router.post("", response_model=WorkoutCreated)
async def create_workout(
    request: Request,
    principal: uuid.UUID | None = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Save a workout with all its exercises and sets. Volume is computed server-side."""
    # Body is read only after the caller is known, so auth failures win over malformed JSON
    if principal is None:
        raise Unauthenticated()
    payload = await _read_json(request)
    validated = await validate_submission(db, payload, principal)
    workout_id = await save_workout(db, validated)
    return WorkoutCreated(id=workout_id)


@router.get("", response_model=list[WorkoutSummary])
async def list_workouts(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    principal: uuid.UUID = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """The caller's workouts, newest first."""
    return await list_workouts_service(db, principal, page, page_size)


@router.get("/{workout_id}", response_model=WorkoutDetail)
async def get_workout(
    workout_id: uuid.UUID,
    principal: uuid.UUID = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """A workout with its exercises (joined to the catalog) and sets."""
    return await get_workout_service(db, workout_id, principal)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: uuid.UUID,
    principal: uuid.UUID = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    """Delete a workout and its exercises/sets, reversing its effect on the totals."""
    await delete_workout_service(db, workout_id, principal)
    return None
