"""
Accrual service: keeps monthly salary aggregates consistent with daily attendance.

Every aggregate is recomputed from the full set of attendance records of its
worker and month, never patched incrementally, so the stored numbers depend
only on the current records and not on the order of the edits that produced
them.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from daily_payroll.config import settings
from daily_payroll.models.attendance import AttendanceRecord
from daily_payroll.models.salary import MonthlySalary
from daily_payroll.models.receipt import Receipt
from daily_payroll.schemas.salary import SalaryBreakdown
from daily_payroll.services.salary_calculator import DailySalaryCalculator
from daily_payroll.services.receipt_service import ReceiptService
from daily_payroll.services.user_service import UserService
from daily_payroll.utils.datetime_utils import get_today, month_name_for, format_date, utc_now

logger = logging.getLogger(__name__)

DELETED = "deleted"


@dataclass
class RecomputeResult:
    """Outcome of a best-effort recompute; failures are reported, never raised"""
    success: bool
    salary: Optional[MonthlySalary] = None
    receipt: Optional[Receipt] = None
    error: Optional[str] = None


class AccrualService:
    """Reconciles MonthlySalary aggregates with attendance records"""

    def __init__(self, db: Session):
        self.db = db
        self.calculator = DailySalaryCalculator(db)
        self.receipts = ReceiptService(db)
        self.users = UserService(db)

    def notify_attendance_changed(self, user_id: int, day: date, status: str) -> RecomputeResult:
        """
        Entry point for the attendance layer after a committed create, update or delete.

        A status of "deleted" recomputes without crediting; any other status
        goes through the upsert path. Failures are logged and returned, the
        attendance write that triggered the call stays committed.
        """
        if status == DELETED:
            result = self.on_attendance_deleted(user_id, day)
        else:
            result = self.on_attendance_upserted(user_id, day, status)

        if not result.success:
            logger.warning(
                f"Salary recompute for user {user_id} on {format_date(day)} failed and was skipped: {result.error}"
            )
        return result

    def on_attendance_upserted(self, user_id: int, day: date, status: str) -> RecomputeResult:
        """
        Recompute the month containing `day` and credit the day when present.

        Each call with status "present" appends a daily earning receipt, also
        when the same day was already credited.
        """
        try:
            month, year = month_name_for(day)
            salary, breakdown = self._recompute(user_id, month, year)

            receipt = None
            if status == "present":
                receipt = self.receipts.credit_day(user_id, day, breakdown.day_rate)

            self.db.commit()
            return RecomputeResult(success=True, salary=salary, receipt=receipt)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update daily earnings for user {user_id} on {day}: {e}")
            return RecomputeResult(success=False, error=str(e))

    def on_attendance_deleted(self, user_id: int, day: date) -> RecomputeResult:
        """Recompute the month of a deleted record; the record must already be gone."""
        try:
            month, year = month_name_for(day)
            salary, _ = self._recompute(user_id, month, year)
            self.db.commit()
            return RecomputeResult(success=True, salary=salary)

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to recompute earnings for user {user_id} after deleting {day}: {e}")
            return RecomputeResult(success=False, error=str(e))

    def sweep_absences(self, as_of_date: date) -> List[AttendanceRecord]:
        """
        Mark every active worker without a record for `as_of_date` as absent.

        Returns:
            The auto-marked records created by this sweep
        """
        created = []

        for worker in self.users.get_active_workers():
            existing = self.db.query(AttendanceRecord).filter(
                AttendanceRecord.user_id == worker.id,
                AttendanceRecord.date == as_of_date
            ).first()

            if existing:
                continue

            record = AttendanceRecord(
                user_id=worker.id,
                date=as_of_date,
                status="absent",
                hours_worked=0,
                overtime=0,
                auto_marked=True
            )

            try:
                self.db.add(record)
                self.db.commit()
            except IntegrityError:
                # recorded concurrently by the worker or an admin
                self.db.rollback()
                continue

            self.db.refresh(record)
            created.append(record)
            logger.info(f"Marked {worker.name} as absent for {format_date(as_of_date)}")

            self.on_attendance_upserted(worker.id, as_of_date, record.status)

        logger.info(f"Absence sweep for {format_date(as_of_date)} created {len(created)} records")
        return created

    def run_daily_absence_sweep(self) -> List[AttendanceRecord]:
        """Sweep for today's date in the configured timezone"""
        return self.sweep_absences(get_today(settings.TIMEZONE))

    def generate_monthly_batch(self, month: str, year: int) -> List[MonthlySalary]:
        """
        Create the missing aggregates of a month for every active worker.

        Existing aggregates are left untouched.
        """
        created = []

        for worker in self.users.get_active_workers():
            if self.get_salary(worker.id, month, year):
                continue

            salary = MonthlySalary(user_id=worker.id, month=month, year=year, bonuses=0, is_paid=False)
            self._apply_breakdown(salary, self.calculator.calculate(worker.id, month, year))

            try:
                self.db.add(salary)
                self.db.commit()
            except IntegrityError:
                self.db.rollback()
                continue

            self.db.refresh(salary)
            created.append(salary)
            logger.info(f"Generated salary record for {worker.name} - {month} {year}")

        return created

    def checkout(self, user_id: int, month: str, year: int) -> Optional[Tuple[MonthlySalary, Receipt]]:
        """
        Fetch or create the month's aggregate and emit a consolidated salary receipt.

        Returns:
            (salary, receipt), or None when the worker does not exist
        """
        user = self.users.get_user_by_id(user_id)
        if not user:
            return None

        try:
            salary = self.get_salary(user_id, month, year)
            if not salary:
                salary = MonthlySalary(user_id=user_id, month=month, year=year, bonuses=0, is_paid=False)
                self._apply_breakdown(salary, self.calculator.calculate(user_id, month, year))
                self.db.add(salary)
                self.db.flush()

            receipt = self.receipts.create_checkout_receipt(user, salary)
            self.db.commit()
            self.db.refresh(salary)
            self.db.refresh(receipt)

            logger.info(
                f"Salary checkout for {user.name} - {month} {year}: "
                f"{salary.present_days} days = {salary.total_amount:g} {settings.CURRENCY}"
            )
            return salary, receipt

        except Exception as e:
            self.db.rollback()
            logger.error(f"Salary checkout failed for user {user_id} {month} {year}: {e}")
            raise

    def create_salary(self, user_id: int, month: str, year: int, bonuses: float = 0,
                      notes: Optional[str] = None) -> Optional[MonthlySalary]:
        """
        Create a single aggregate on demand, derived from the month's attendance.

        Returns:
            The new aggregate, or None when the worker does not exist

        Raises:
            ValueError: if the period already has an aggregate or bonuses are negative
        """
        if not self.users.get_user_by_id(user_id):
            return None

        if bonuses is None or bonuses < 0:
            raise ValueError("Bonuses cannot be negative")

        if self.get_salary(user_id, month, year):
            raise ValueError("Salary record already exists for this period")

        salary = MonthlySalary(user_id=user_id, month=month, year=year, bonuses=bonuses, notes=notes, is_paid=False)
        self._apply_breakdown(salary, self.calculator.calculate(user_id, month, year))

        try:
            self.db.add(salary)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValueError("Salary record already exists for this period")

        self.db.refresh(salary)
        logger.info(f"Created salary record for user {user_id} - {month} {year}")
        return salary

    def mark_paid(self, salary_id: int) -> Optional[MonthlySalary]:
        """Flag an aggregate as paid; None when it does not exist"""
        salary = self.get_salary_by_id(salary_id)
        if not salary:
            return None

        if not salary.is_paid:
            salary.is_paid = True
            salary.paid_at = utc_now()
            self.db.commit()
            self.db.refresh(salary)
            logger.info(f"Salary {salary_id} marked as paid")

        return salary

    def adjust_salary(self, salary_id: int, bonuses: Optional[float] = None,
                      notes: Optional[str] = None) -> Optional[MonthlySalary]:
        """Set bonuses and notes; the total is re-derived from earned amount plus bonuses"""
        salary = self.get_salary_by_id(salary_id)
        if not salary:
            return None

        if bonuses is not None:
            if bonuses < 0:
                raise ValueError("Bonuses cannot be negative")
            salary.bonuses = bonuses
        if notes is not None:
            salary.notes = notes

        salary.total_amount = max(0.0, (salary.earned_amount or 0) + (salary.bonuses or 0))
        self.db.commit()
        self.db.refresh(salary)
        return salary

    def delete_salary(self, salary_id: int) -> bool:
        salary = self.get_salary_by_id(salary_id)
        if not salary:
            return False

        self.db.delete(salary)
        self.db.commit()
        return True

    def get_salary(self, user_id: int, month: str, year: int) -> Optional[MonthlySalary]:
        return self.db.query(MonthlySalary).filter(
            MonthlySalary.user_id == user_id,
            MonthlySalary.month == month,
            MonthlySalary.year == year
        ).first()

    def get_salary_by_id(self, salary_id: int) -> Optional[MonthlySalary]:
        return self.db.query(MonthlySalary).filter(MonthlySalary.id == salary_id).first()

    def list_salaries(
        self,
        user_id: int = None,
        month: str = None,
        year: int = None,
        is_paid: bool = None,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[MonthlySalary], int]:
        query = self.db.query(MonthlySalary)

        if user_id is not None:
            query = query.filter(MonthlySalary.user_id == user_id)
        if month:
            query = query.filter(MonthlySalary.month == month)
        if year is not None:
            query = query.filter(MonthlySalary.year == year)
        if is_paid is not None:
            query = query.filter(MonthlySalary.is_paid == is_paid)

        total = query.count()
        salaries = query.order_by(MonthlySalary.year.desc(), MonthlySalary.id.desc()).offset(skip).limit(limit).all()
        return salaries, total

    def _recompute(self, user_id: int, month: str, year: int) -> Tuple[MonthlySalary, SalaryBreakdown]:
        """Upsert the aggregate from a fresh calculation; flushes without committing."""
        breakdown = self.calculator.calculate(user_id, month, year)
        salary = self.get_salary(user_id, month, year)

        if salary is None:
            salary = MonthlySalary(user_id=user_id, month=month, year=year, bonuses=0, is_paid=False)
            self._apply_breakdown(salary, breakdown)
            try:
                self.db.add(salary)
                self.db.flush()
                return salary, breakdown
            except IntegrityError:
                # another recompute inserted the row first, overwrite it instead
                self.db.rollback()
                salary = self.get_salary(user_id, month, year)
                if salary is None:
                    raise

        if salary.is_paid:
            logger.warning(f"Recomputing salary {salary.id} for user {user_id} {month} {year} although it is already paid")

        self._apply_breakdown(salary, breakdown)
        self.db.flush()
        return salary, breakdown

    @staticmethod
    def _apply_breakdown(salary: MonthlySalary, breakdown: SalaryBreakdown):
        """Overwrite the derived fields; paid state, bonuses and notes are kept."""
        salary.day_rate = breakdown.day_rate
        salary.present_days = breakdown.present_days
        salary.absent_days = breakdown.absent_days
        salary.total_working_days = breakdown.total_working_days
        salary.earned_amount = breakdown.earned_amount
        salary.missed_amount = breakdown.missed_amount
        salary.total_amount = max(0.0, breakdown.total_amount + (salary.bonuses or 0))
