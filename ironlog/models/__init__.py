"""ORM models - import all so Base.metadata is complete for migrations."""

from ironlog.models.daily_volume import DailyVolume
from ironlog.models.exercise import Exercise
from ironlog.models.user import User
from ironlog.models.workout import Workout, WorkoutExercise, WorkoutSet

__all__ = [
    "DailyVolume",
    "Exercise",
    "User",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
]
