"""
Daily-rate salary calculation from a worker's monthly attendance records.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from daily_payroll.models.user import User
from daily_payroll.models.attendance import AttendanceRecord
from daily_payroll.schemas.attendance import AttendanceResponse
from daily_payroll.schemas.salary import SalaryBreakdown
from daily_payroll.utils.datetime_utils import get_month_number, month_date_range, working_days_in_month

logger = logging.getLogger(__name__)

class DailySalaryCalculator:
    """Derives monthly earnings from day rate x attendance"""

    def __init__(self, db: Session):
        self.db = db

    def calculate(self, user_id: int, month: str, year: int) -> SalaryBreakdown:
        """
        Compute the salary breakdown for one worker and month.

        Present days earn the day rate, absent days are reported as missed
        salary, late days are counted in neither tally. The working-day count
        is the weekday total of the month and does not cap present days.

        Args:
            user_id: worker ID
            month: English month name ("January".."December")
            year: calendar year

        Returns:
            The breakdown, or an all-zero breakdown when the worker does not
            exist or anything goes wrong. Never raises.
        """
        try:
            user = self.db.query(User).filter(User.id == user_id).first()
            if not user:
                logger.warning(f"Salary calculation skipped, user {user_id} not found")
                return SalaryBreakdown.zero()

            month_index = get_month_number(month)
            records = self.get_month_records(user_id, year, month_index)
            day_rate = user.effective_day_rate

            present_days = sum(1 for record in records if record.status == "present")
            absent_days = sum(1 for record in records if record.status == "absent")
            earned_amount = day_rate * present_days
            missed_amount = day_rate * absent_days

            return SalaryBreakdown(
                day_rate=max(0.0, day_rate),
                present_days=max(0, present_days),
                absent_days=max(0, absent_days),
                total_working_days=max(0, working_days_in_month(year, month_index)),
                earned_amount=max(0.0, earned_amount),
                missed_amount=max(0.0, missed_amount),
                total_amount=max(0.0, earned_amount),
                total_hours_worked=max(0.0, round(sum(record.hours_worked or 0 for record in records), 2)),
                total_overtime=max(0.0, round(sum(record.overtime or 0 for record in records), 2)),
                attendance_records=[AttendanceResponse.model_validate(record) for record in records],
            )

        except Exception as e:
            logger.error(f"Salary calculation failed for user {user_id} {month} {year}: {e}")
            return SalaryBreakdown.zero()

    def get_month_records(self, user_id: int, year: int, month_index: int) -> List[AttendanceRecord]:
        """All attendance records of a worker dated within the month"""
        first_day, last_day = month_date_range(year, month_index)
        return self.db.query(AttendanceRecord).filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date >= first_day,
            AttendanceRecord.date <= last_day
        ).order_by(AttendanceRecord.date).all()
