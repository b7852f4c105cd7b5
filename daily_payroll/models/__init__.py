from .user import User
from .attendance import AttendanceRecord
from .salary import MonthlySalary
from .receipt import Receipt

__all__ = ["User", "AttendanceRecord", "MonthlySalary", "Receipt"]
