"""
Attendance service layer: daily attendance records and the salary recompute they trigger.
"""

import logging
from datetime import datetime, date
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from daily_payroll.config import settings
from daily_payroll.models.attendance import AttendanceRecord
from daily_payroll.schemas.attendance import AttendanceCreate, AttendanceUpdate
from daily_payroll.services.accrual_service import AccrualService, DELETED
from daily_payroll.utils.datetime_utils import get_local_timezone, month_name_for, to_naive_utc, utc_now
from daily_payroll.utils.validators import DataValidator

logger = logging.getLogger(__name__)

class AttendanceService:
    """Attendance record business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.validator = DataValidator()
        self.accrual = AccrualService(db)

    def create_record(self, record_data: AttendanceCreate) -> AttendanceRecord:
        """
        Create an attendance record and recompute the worker's month.

        Args:
            record_data: attendance data, user_id must be set

        Returns:
            The new record

        Raises:
            ValueError: if the worker already has a record for the day or the data is invalid
        """
        if record_data.user_id is None:
            raise ValueError("user_id is required")

        data = self._normalize_punches(record_data.model_dump())
        self.validator.ensure_valid(self.validator.validate_attendance_data(data))

        if self.get_record_for_day(record_data.user_id, record_data.date):
            raise ValueError("Attendance already recorded for this date")

        new_record = AttendanceRecord(
            user_id=record_data.user_id,
            date=record_data.date,
            check_in=data["check_in"],
            check_out=data["check_out"],
            hours_worked=0,
            overtime=0,
            status=record_data.status.value,
            auto_marked=record_data.auto_marked,
            notes=record_data.notes
        )
        new_record.refresh_hours(settings.STANDARD_WORK_HOURS)

        try:
            self.db.add(new_record)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValueError("Attendance already recorded for this date")

        self.db.refresh(new_record)
        logger.info(f"Recorded {new_record.status} for user {new_record.user_id} on {new_record.date}")

        self.accrual.notify_attendance_changed(new_record.user_id, new_record.date, new_record.status)
        self.db.refresh(new_record)
        return new_record

    def update_record(self, record_id: int, update_data: AttendanceUpdate) -> Optional[AttendanceRecord]:
        """
        Update an attendance record and recompute the affected month(s).

        Every update goes through the upsert path with the record's current
        status, so a present day is credited again even for a notes-only edit.

        Returns:
            The updated record, or None when it does not exist

        Raises:
            ValueError: if the data is invalid or the new date is already taken
        """
        record = self.get_record(record_id)
        if not record:
            return None

        update_dict = self._normalize_punches(update_data.model_dump(exclude_unset=True))
        if update_dict.get("status") is not None:
            update_dict["status"] = update_dict["status"].value

        merged = {
            "status": update_dict.get("status"),
            "notes": update_dict.get("notes"),
            "check_in": update_dict.get("check_in", self._stored_punch(record.check_in)),
            "check_out": update_dict.get("check_out", self._stored_punch(record.check_out)),
        }
        self.validator.ensure_valid(self.validator.validate_attendance_data(merged))

        previous_date = record.date

        for field, value in update_dict.items():
            if field in ("date", "status") and value is None:
                continue
            setattr(record, field, value)

        if record.check_in is None or record.check_out is None:
            record.hours_worked = 0
            record.overtime = 0
        record.refresh_hours(settings.STANDARD_WORK_HOURS)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ValueError("Attendance already recorded for this date")

        self.db.refresh(record)
        user_id, current_date, status = record.user_id, record.date, record.status

        if month_name_for(previous_date) != month_name_for(current_date):
            self.accrual.notify_attendance_changed(user_id, previous_date, DELETED)

        self.accrual.notify_attendance_changed(user_id, current_date, status)
        self.db.refresh(record)
        return record

    def delete_record(self, record_id: int) -> bool:
        """
        Delete an attendance record, then recompute its month without it.

        Returns:
            False when the record does not exist
        """
        record = self.get_record(record_id)
        if not record:
            return False

        user_id, record_date = record.user_id, record.date

        self.db.delete(record)
        self.db.commit()
        logger.info(f"Deleted attendance record {record_id} of user {user_id} on {record_date}")

        self.accrual.notify_attendance_changed(user_id, record_date, DELETED)
        return True

    def check_in(self, user_id: int, timestamp: datetime = None, notes: str = None) -> AttendanceRecord:
        """
        Record today's check-in as a present day.

        Raises:
            ValueError: if the worker already has a record for today
        """
        timestamp = timestamp or utc_now()
        today = self._local_day(timestamp)

        return self.create_record(AttendanceCreate(
            user_id=user_id,
            date=today,
            check_in=timestamp,
            status="present",
            notes=notes
        ))

    def check_out(self, user_id: int, timestamp: datetime = None, notes: str = None) -> AttendanceRecord:
        """
        Record the check-out on today's record.

        Raises:
            ValueError: if there is no check-in today or the worker already checked out
        """
        timestamp = timestamp or utc_now()
        today = self._local_day(timestamp)

        record = self.get_record_for_day(user_id, today)
        if not record or record.check_in is None:
            raise ValueError("No check-in recorded for today")
        if record.check_out is not None:
            raise ValueError("Already checked out for today")

        update = {"check_out": timestamp}
        if notes is not None:
            update["notes"] = notes
        return self.update_record(record.id, AttendanceUpdate(**update))

    def get_record(self, record_id: int) -> Optional[AttendanceRecord]:
        return self.db.query(AttendanceRecord).filter(AttendanceRecord.id == record_id).first()

    def get_record_for_day(self, user_id: int, day: date) -> Optional[AttendanceRecord]:
        return self.db.query(AttendanceRecord).filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date == day
        ).first()

    def get_user_records_range(self, user_id: int, start_date: date, end_date: date) -> List[AttendanceRecord]:
        """A worker's records in an inclusive date range, oldest first"""
        return self.db.query(AttendanceRecord).filter(
            AttendanceRecord.user_id == user_id,
            AttendanceRecord.date >= start_date,
            AttendanceRecord.date <= end_date
        ).order_by(AttendanceRecord.date).all()

    def list_records(
        self,
        user_id: int = None,
        status: str = None,
        start_date: date = None,
        end_date: date = None,
        auto_marked: bool = None,
        skip: int = 0,
        limit: int = 100
    ) -> Tuple[List[AttendanceRecord], int]:
        """Filtered records, newest first, with the unpaginated total"""
        query = self.db.query(AttendanceRecord)

        if user_id is not None:
            query = query.filter(AttendanceRecord.user_id == user_id)
        if status:
            query = query.filter(AttendanceRecord.status == status)
        if start_date:
            query = query.filter(AttendanceRecord.date >= start_date)
        if end_date:
            query = query.filter(AttendanceRecord.date <= end_date)
        if auto_marked is not None:
            query = query.filter(AttendanceRecord.auto_marked == auto_marked)

        total = query.count()
        records = query.order_by(AttendanceRecord.date.desc(), AttendanceRecord.id.desc()).offset(skip).limit(limit).all()
        return records, total

    def _local_day(self, timestamp: datetime) -> date:
        """Calendar day of a punch in the configured timezone"""
        if timestamp.tzinfo is None:
            return timestamp.date()
        return timestamp.astimezone(get_local_timezone(settings.TIMEZONE)).date()

    @staticmethod
    def _stored_punch(value: Optional[datetime]) -> Optional[datetime]:
        """Punches are stored as naive UTC; naive input is taken to be UTC already"""
        if value is None:
            return None
        return to_naive_utc(value)

    def _normalize_punches(self, data: dict) -> dict:
        for field in ("check_in", "check_out"):
            if field in data:
                data[field] = self._stored_punch(data[field])
        return data
