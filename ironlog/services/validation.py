"""Workout submission validation.

Turns a raw JSON payload into a ``ValidatedWorkout`` or raises
``ValidationFailed`` with every violation found, ordered as:
exercises list, then per-exercise fields (catalog id, sets list), then
per-set fields. The authenticated user check runs first and alone.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.constants import MAX_EXERCISES_PER_WORKOUT, MAX_SETS_PER_EXERCISE
from ironlog.core.errors import Forbidden, Unauthenticated, ValidationFailed, ValidationIssue
from ironlog.schemas.workout import WorkoutSubmission
from ironlog.services.catalog import resolve_exercises


@dataclass(frozen=True)
class ValidatedSet:
    reps: int
    weight_kg: float


@dataclass(frozen=True)
class ValidatedExercise:
    exercise_id: str
    exercise_name: str
    sets: tuple[ValidatedSet, ...]


@dataclass(frozen=True)
class ValidatedWorkout:
    """Normalized submission. Volume is computed by the writer, never taken from the client."""

    user_id: uuid.UUID
    exercises: tuple[ValidatedExercise, ...]
    client_total_volume: float | None = None


# (field, pydantic error type) -> message
_MESSAGES: dict[tuple[str, str], str] = {
    ("exercises", "too_short"): "at least one exercise required",
    ("exercises", "missing"): "at least one exercise required",
    ("exercises", "list_type"): "exercises must be a list",
    ("exercises", "too_long"): f"at most {MAX_EXERCISES_PER_WORKOUT} exercises per workout",
    ("sets", "too_short"): "at least one set required",
    ("sets", "missing"): "at least one set required",
    ("sets", "list_type"): "sets must be a list",
    ("sets", "too_long"): f"at most {MAX_SETS_PER_EXERCISE} sets per exercise",
    ("exercise_id", "missing"): "exercise_id is required",
    ("exercise_id", "string_too_short"): "exercise_id is required",
    ("reps", "greater_than_equal"): "reps must be at least 1",
    ("reps", "int_from_float"): "reps must be a whole number",
    ("reps", "int_parsing"): "reps must be a whole number",
    ("reps", "int_type"): "reps must be a whole number",
    ("reps", "missing"): "reps is required",
    ("weight_kg", "greater_than_equal"): "weight_kg must be 0 or more",
    ("weight_kg", "float_parsing"): "weight_kg must be a number",
    ("weight_kg", "float_type"): "weight_kg must be a number",
    ("weight_kg", "finite_number"): "weight_kg must be a finite number",
    ("weight_kg", "missing"): "weight_kg is required",
}


def _issue_from_pydantic(err: Mapping[str, Any]) -> ValidationIssue:
    loc = tuple(err["loc"])
    field = next((p for p in reversed(loc) if isinstance(p, str)), "")
    msg = _MESSAGES.get((field, err["type"]), err["msg"])
    return ValidationIssue(loc=loc, msg=msg)


def _rule_order(issue: ValidationIssue) -> tuple:
    # exercises list (depth 1) < exercise fields (depth 3) < set fields (depth 5)
    indexes = tuple(p for p in issue.loc if isinstance(p, int))
    return (len(issue.loc), indexes)


def _check_payload_user(payload: Mapping[str, Any], principal: uuid.UUID) -> None:
    claimed = payload.get("user_id")
    if claimed is None:
        return
    try:
        claimed_id = uuid.UUID(str(claimed))
    except ValueError:
        return  # reported as a field issue by the schema
    if claimed_id != principal:
        raise Forbidden("Workout user does not match the authenticated user")


async def validate_submission(
    db: AsyncSession,
    payload: Any,
    principal: uuid.UUID | None,
) -> ValidatedWorkout:
    """Validate ``payload`` for ``principal``; raise Unauthenticated, Forbidden or ValidationFailed."""
    if principal is None:
        raise Unauthenticated()

    if not isinstance(payload, Mapping):
        raise ValidationFailed([ValidationIssue(loc=(), msg="request body must be a JSON object")])

    _check_payload_user(payload, principal)

    issues: list[ValidationIssue] = []
    submission: WorkoutSubmission | None = None
    try:
        submission = WorkoutSubmission.model_validate(payload)
    except ValidationError as e:
        issues.extend(_issue_from_pydantic(err) for err in e.errors())

    # Catalog check runs on the raw payload too, so unknown ids are reported alongside shape errors
    raw_exercises = payload.get("exercises")
    referenced: list[tuple[int, str]] = []
    if isinstance(raw_exercises, list):
        for index, item in enumerate(raw_exercises):
            if isinstance(item, Mapping) and isinstance(item.get("exercise_id"), str) and item["exercise_id"]:
                referenced.append((index, item["exercise_id"]))
    catalog = await resolve_exercises(db, (exercise_id for _, exercise_id in referenced))
    for index, exercise_id in referenced:
        if exercise_id not in catalog:
            issues.append(
                ValidationIssue(loc=("exercises", index, "exercise_id"), msg=f"unknown exercise '{exercise_id}'")
            )

    if issues or submission is None:
        raise ValidationFailed(sorted(issues, key=_rule_order))

    return ValidatedWorkout(
        user_id=principal,
        exercises=tuple(
            ValidatedExercise(
                exercise_id=item.exercise_id,
                exercise_name=catalog[item.exercise_id].name,
                sets=tuple(ValidatedSet(reps=s.reps, weight_kg=s.weight_kg) for s in item.sets),
            )
            for item in submission.exercises
        ),
        client_total_volume=submission.total_volume,
    )
