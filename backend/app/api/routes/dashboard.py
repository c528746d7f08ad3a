"""Dashboard Routes — admin statistics."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.schemas.dashboard import DashboardStats
from app.services.dashboard_stats import collect_dashboard_stats

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
async def get_stats(db: AsyncSession = Depends(get_db)):
    return DashboardStats.model_validate(await collect_dashboard_stats(db))
