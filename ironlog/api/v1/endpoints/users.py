"""Current user's running totals and daily volume."""

from __future__ import annotations

import uuid
from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.core.security import require_principal
from ironlog.db.session import get_db
from ironlog.schemas.workout import UserStats
from ironlog.services.queries import get_user_stats

router = APIRouter()


@router.get("/me/stats", response_model=UserStats)
async def my_stats(
    from_date: date | None = None,
    to_date: date | None = None,
    principal: uuid.UUID = Depends(require_principal),
    db: AsyncSession = Depends(get_db),
):
    return await get_user_stats(db, principal, from_date, to_date)
