import calendar
from datetime import datetime, date, timedelta
from typing import Optional, Tuple, Union
import pytz

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def get_local_timezone(timezone_str: str = "Africa/Casablanca") -> pytz.BaseTzInfo:
    """Resolve a timezone name, falling back to the default zone"""
    try:
        return pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError:
        return pytz.timezone("Africa/Casablanca")


def utc_now() -> datetime:
    """Current time in UTC"""
    return datetime.now(pytz.UTC)


def local_now(timezone_str: str = "Africa/Casablanca") -> datetime:
    """Current time in the given timezone"""
    return utc_now().astimezone(get_local_timezone(timezone_str))


def get_today(timezone_str: str = "Africa/Casablanca") -> date:
    """Today's calendar date in the given timezone"""
    return local_now(timezone_str).date()


def to_naive_utc(dt: datetime) -> datetime:
    """Drop tzinfo after converting to UTC; naive values are assumed to be UTC already."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(pytz.UTC).replace(tzinfo=None)


def to_calendar_date(value: Union[datetime, date]) -> date:
    """Reduce a datetime to its calendar day"""
    if isinstance(value, datetime):
        return value.date()
    return value


def get_month_number(month_name: str) -> int:
    """0-based month index for an English month name; unknown names map to 0 (January)."""
    try:
        return MONTH_NAMES.index(month_name)
    except ValueError:
        return 0


def get_month_name(month_index: int) -> str:
    """English month name for a 0-based month index"""
    return MONTH_NAMES[month_index % 12]


def month_name_for(day: Union[datetime, date]) -> Tuple[str, int]:
    """(month name, year) that a day belongs to"""
    day = to_calendar_date(day)
    return get_month_name(day.month - 1), day.year


def month_date_range(year: int, month_index: int) -> Tuple[date, date]:
    """First and last calendar day of a month (0-based month index)"""
    _, last_day = calendar.monthrange(year, month_index + 1)
    return date(year, month_index + 1, 1), date(year, month_index + 1, last_day)


def get_work_days_in_range(start_date: date, end_date: date) -> int:
    """Count Monday to Friday days in an inclusive date range"""
    total_days = (end_date - start_date).days + 1
    work_days = 0

    current_date = start_date
    for _ in range(total_days):
        if current_date.weekday() < 5:
            work_days += 1
        current_date += timedelta(days=1)

    return work_days


def working_days_in_month(year: int, month_index: int) -> int:
    """Number of weekdays in a month (0-based month index)"""
    first_day, last_day = month_date_range(year, month_index)
    return get_work_days_in_range(first_day, last_day)


def format_date(dt: Union[datetime, date]) -> str:
    """Format as YYYY-MM-DD"""
    if isinstance(dt, datetime):
        return dt.date().strftime("%Y-%m-%d")
    return dt.strftime("%Y-%m-%d")


def parse_date(date_str: str) -> Optional[date]:
    """Parse YYYY-MM-DD, returning None on malformed input"""
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        return None
