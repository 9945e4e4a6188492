from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from fleetops.database import get_db
from fleetops.models.user import User
from fleetops.middleware.auth import get_current_active_user
from fleetops.schemas.dashboard import DashboardStats, ReportResponse
from fleetops.core.reports import dashboard_stats, build_report

router = APIRouter()


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Fleet counts and this month's revenue and expenses"""
    return await dashboard_stats(db, current_user)


@router.get("/reports", response_model=ReportResponse)
async def get_reports(
    months: int = Query(6, ge=1, le=24),
    current_user: User = Depends(get_current_active_user),
    db: AsyncSession = Depends(get_db)
):
    """Monthly revenue vs expenses, expense breakdown and vehicle performance"""
    return await build_report(db, current_user, months)
