from pydantic import BaseModel
from typing import List

from .attendance import AttendanceResponse

class DashboardStats(BaseModel):
    total_workers: int
    monthly_attendance: int
    pending_salaries: int
    recent_activity: List[AttendanceResponse]

class UserDashboardStats(BaseModel):
    user_id: int
    monthly_attendance: int
    total_hours: float
    total_overtime: float
    pending_salary: float
