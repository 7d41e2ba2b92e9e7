"""Workout submission and read schemas."""

import datetime as dt
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator
from pydantic_core import PydanticCustomError

from ironlog.core.constants import MAX_EXERCISES_PER_WORKOUT, MAX_SETS_PER_EXERCISE


class WorkoutSetCreate(BaseModel):
    reps: StrictInt = Field(..., ge=1)
    weight_kg: float = Field(..., ge=0, allow_inf_nan=False)

    @field_validator("weight_kg", mode="before")
    @classmethod
    def weight_must_be_numeric(cls, v):
        # JSON numbers only; no "60" strings or booleans
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise PydanticCustomError("float_type", "Input should be a valid number")
        return v


class WorkoutExerciseCreate(BaseModel):
    exercise_id: str = Field(..., min_length=1, max_length=64)
    name: str | None = None  # display only; the catalog name is authoritative
    sets: list[WorkoutSetCreate] = Field(..., min_length=1, max_length=MAX_SETS_PER_EXERCISE)


class WorkoutSubmission(BaseModel):
    """Inbound save payload. ``totalVolume`` is advisory and never persisted."""

    model_config = ConfigDict(populate_by_name=True)

    exercises: list[WorkoutExerciseCreate] = Field(..., min_length=1, max_length=MAX_EXERCISES_PER_WORKOUT)
    total_volume: float | None = Field(None, alias="totalVolume")
    created_at: datetime | None = None
    user_id: UUID | None = None
    name: str | None = Field(None, max_length=50)


class WorkoutCreated(BaseModel):
    success: bool = True
    id: UUID


class WorkoutSetRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    position: int
    reps: int
    weight_kg: float
    created_at: datetime


class WorkoutExerciseRead(BaseModel):
    """Exercise within a workout, joined to its catalog entry."""

    id: UUID
    exercise_id: str
    position: int
    name: str
    primary_muscle_group: str
    secondary_muscle_group: str | None = None
    created_at: datetime
    sets: list[WorkoutSetRead] = []


class WorkoutDetail(BaseModel):
    id: UUID
    user_id: UUID
    created_at: datetime
    total_volume: float
    exercises: list[WorkoutExerciseRead] = []


class WorkoutSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: UUID
    created_at: datetime
    total_volume: float
    exercise_count: int = 0


class DailyVolumePoint(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    date: dt.date
    volume: float


class UserStats(BaseModel):
    total_volume: float
    total_workouts: int
    daily_volume: list[DailyVolumePoint] = []
