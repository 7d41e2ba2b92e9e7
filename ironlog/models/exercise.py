"""Catalog exercise - immutable reference data, seeded out of band."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from ironlog.db.base import Base


class Exercise(Base):
    """Exercise definition with a primary and optional secondary muscle group."""

    __tablename__ = "available_exercises"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)  # slug, e.g. "bench-press"
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    primary_muscle_group: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    secondary_muscle_group: Mapped[str | None] = mapped_column(String(100), nullable=True)
