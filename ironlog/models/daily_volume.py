"""DailyVolume model - per-user, per-day volume series."""

from __future__ import annotations

import uuid
import datetime as dt

from sqlalchemy import Date, Float, ForeignKey, Integer, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ironlog.db.base import Base


class DailyVolume(Base):
    """Sum of volume saved by a user on one date. Upserted on save, reduced on delete."""

    __tablename__ = "daily_volume"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_daily_volume_user_date"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    volume: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
