"""
Dashboard API routes: payroll overview for admins and a per-worker summary.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.schemas.attendance import AttendanceResponse
from daily_payroll.schemas.dashboard import DashboardStats, UserDashboardStats
from daily_payroll.api.deps import get_current_active_user, require_admin, ensure_self_or_admin
from daily_payroll.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/stats", response_model=DashboardStats, summary="Payroll overview")
async def get_dashboard_stats(
    as_of: Optional[date] = Query(None, description="Reference day, defaults to today"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        stats = DashboardService(db).get_stats(as_of)
        stats["recent_activity"] = [AttendanceResponse.model_validate(record) for record in stats["recent_activity"]]
        return DashboardStats(**stats)

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get dashboard stats: {str(e)}"
        )

@router.get("/user-stats/{user_id}", response_model=UserDashboardStats, summary="Worker summary")
async def get_user_dashboard_stats(
    user_id: int,
    as_of: Optional[date] = Query(None, description="Reference day, defaults to today"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Present days, hours and overtime this month plus the unpaid salary total.

    - Workers only see their own summary
    """
    ensure_self_or_admin(current_user, user_id, "view")

    try:
        return UserDashboardStats(**DashboardService(db).get_user_stats(user_id, as_of))

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get user stats: {str(e)}"
        )
