"""
Dashboard figures for the payroll overview and the per-worker summary.
"""

import logging
from datetime import date
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from daily_payroll.config import settings
from daily_payroll.models.user import User
from daily_payroll.models.attendance import AttendanceRecord
from daily_payroll.models.salary import MonthlySalary
from daily_payroll.utils.datetime_utils import get_today, month_date_range

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10

class DashboardService:
    """Read-only aggregates over workers, attendance and salaries"""

    def __init__(self, db: Session):
        self.db = db

    def get_stats(self, as_of: Optional[date] = None) -> Dict[str, Any]:
        """
        Admin overview for the month containing `as_of` (default: today).

        Returns:
            total_workers: active users with the worker role
            monthly_attendance: present records this month
            pending_salaries: unpaid aggregates of this year
            recent_activity: latest attendance records, newest first
        """
        as_of = as_of or get_today(settings.TIMEZONE)
        first_day, last_day = month_date_range(as_of.year, as_of.month - 1)

        total_workers = self.db.query(User).filter(
            User.is_active == True,
            User.role == "worker"
        ).count()

        monthly_attendance = self.db.query(AttendanceRecord).filter(
            AttendanceRecord.date >= first_day,
            AttendanceRecord.date <= last_day,
            AttendanceRecord.status == "present"
        ).count()

        pending_salaries = self.db.query(MonthlySalary).filter(
            MonthlySalary.is_paid == False,
            MonthlySalary.year == as_of.year
        ).count()

        recent_activity = self.db.query(AttendanceRecord).order_by(
            AttendanceRecord.created_at.desc(),
            AttendanceRecord.id.desc()
        ).limit(RECENT_ACTIVITY_LIMIT).all()

        return {
            "total_workers": total_workers,
            "monthly_attendance": monthly_attendance,
            "pending_salaries": pending_salaries,
            "recent_activity": recent_activity,
        }

    def get_user_stats(self, user_id: int, as_of: Optional[date] = None) -> Dict[str, Any]:
        """
        A worker's month so far and what is still owed to them.

        pending_salary is the summed total of the worker's unpaid aggregates
        of the year.
        """
        as_of = as_of or get_today(settings.TIMEZONE)
        first_day, last_day = month_date_range(as_of.year, as_of.month - 1)

        records = self.db.query(AttendanceRecord).filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date >= first_day,
            AttendanceRecord.date <= last_day
        ).all()

        pending_salary = self.db.query(func.coalesce(func.sum(MonthlySalary.total_amount), 0)).filter(
            MonthlySalary.user_id == user_id,
            MonthlySalary.year == as_of.year,
            MonthlySalary.is_paid == False
        ).scalar()

        return {
            "user_id": user_id,
            "monthly_attendance": sum(1 for record in records if record.status == "present"),
            "total_hours": round(sum(record.hours_worked or 0 for record in records), 2),
            "total_overtime": round(sum(record.overtime or 0 for record in records), 2),
            "pending_salary": float(pending_salary or 0),
        }
