"""Catalog exercise schemas."""

from pydantic import BaseModel, ConfigDict


class ExerciseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    primary_muscle_group: str
    secondary_muscle_group: str | None = None


class CatalogRead(BaseModel):
    """Catalog keyed by primary muscle group, plus the flat list."""

    grouped: dict[str, list[ExerciseRead]]
    flat: list[ExerciseRead]
