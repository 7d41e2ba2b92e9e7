"""Exercise catalog endpoint (read-only)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ironlog.db.session import get_db
from ironlog.schemas.exercise import CatalogRead
from ironlog.services.catalog import list_exercises

router = APIRouter()


@router.get("", response_model=CatalogRead, response_model_exclude_none=True)
async def get_catalog(db: AsyncSession = Depends(get_db)):
    """All exercises, flat and grouped by primary muscle group."""
    return await list_exercises(db)
