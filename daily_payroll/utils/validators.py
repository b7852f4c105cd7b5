from datetime import datetime
from typing import Optional

from daily_payroll.config import settings
from daily_payroll.utils.datetime_utils import MONTH_NAMES

ATTENDANCE_STATUSES = ("present", "absent", "late")
USER_ROLES = ("admin", "worker")


def validate_month_name(month: str) -> bool:
    """Month names are the literal English names, case sensitive"""
    return month in MONTH_NAMES


def validate_year(year: int, min_year: int = 2020, max_year: int = 2100) -> bool:
    return isinstance(year, int) and min_year <= year <= max_year


def validate_attendance_status(status: str) -> bool:
    return status in ATTENDANCE_STATUSES


def validate_user_role(role: str) -> bool:
    return role in USER_ROLES


def validate_day_rate(day_rate: Optional[float]) -> bool:
    """Day rate is optional but never negative"""
    return day_rate is None or day_rate >= 0


def validate_note_length(note: Optional[str], max_length: int = 500) -> bool:
    return note is None or len(note) <= max_length


def validate_punch_times(check_in: Optional[datetime], check_out: Optional[datetime]) -> bool:
    """Check-out, when given, must not precede check-in"""
    if check_in is None or check_out is None:
        return True
    return check_out >= check_in


class ValidationError(ValueError):
    """Raised when request data fails validation"""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class DataValidator:
    """Validation helpers shared by the services"""

    def validate_attendance_data(self, attendance_data: dict) -> tuple[bool, list]:
        errors = []

        if 'status' in attendance_data and attendance_data['status'] is not None:
            if not validate_attendance_status(attendance_data['status']):
                errors.append(f"Invalid attendance status: {attendance_data['status']}")

        if 'notes' in attendance_data:
            if not validate_note_length(attendance_data['notes']):
                errors.append("Notes exceed the maximum length")

        if not validate_punch_times(attendance_data.get('check_in'), attendance_data.get('check_out')):
            errors.append("Check-out cannot be earlier than check-in")

        return len(errors) == 0, errors

    def validate_user_data(self, user_data: dict) -> tuple[bool, list]:
        errors = []

        if 'role' in user_data and user_data['role']:
            if not validate_user_role(user_data['role']):
                errors.append(f"Invalid role: {user_data['role']}")

        if 'day_rate' in user_data:
            if not validate_day_rate(user_data['day_rate']):
                errors.append("Day rate cannot be negative")

        if 'name' in user_data and user_data['name'] is not None:
            if not user_data['name'].strip():
                errors.append("Name cannot be empty")

        return len(errors) == 0, errors

    def validate_salary_period(self, month: str, year: int) -> tuple[bool, list]:
        errors = []

        if not validate_month_name(month):
            errors.append(f"Invalid month: {month}")

        if not validate_year(year, settings.MIN_SALARY_YEAR, settings.MAX_SALARY_YEAR):
            errors.append(f"Year must be between {settings.MIN_SALARY_YEAR} and {settings.MAX_SALARY_YEAR}: {year}")

        return len(errors) == 0, errors

    def ensure_valid(self, result: tuple[bool, list]):
        """Raise ValidationError with every collected message"""
        is_valid, errors = result
        if not is_valid:
            raise ValidationError("; ".join(errors))
