"""User model - profile plus running workout aggregates."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ironlog.db.base import Base


class User(Base):
    """Account row keyed by the identity provider's user id.

    ``total_volume`` and ``total_workouts`` are running aggregates; only the
    workout writer and deletion service touch them, and always through a
    single UPDATE ... SET col = col + :delta statement.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    weight_kg: Mapped[float | None] = mapped_column(Float, nullable=True)
    height_cm: Mapped[float | None] = mapped_column(Float, nullable=True)
    unit_preference: Mapped[str] = mapped_column(String(10), default="metric", nullable=False)

    total_volume: Mapped[float] = mapped_column(Float, default=0.0, server_default="0", nullable=False)
    total_workouts: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    workouts: Mapped[list["Workout"]] = relationship(
        "Workout", back_populates="user", passive_deletes=True
    )
