from .user import UserRole, UserBase, UserCreate, UserUpdate, UserResponse
from .attendance import AttendanceStatus, AttendanceBase, AttendanceCreate, AttendanceUpdate, AttendanceResponse, PunchRequest, SweepResponse
from .receipt import ReceiptType, PaymentReceiptCreate, ReceiptResponse
from .salary import SalaryBreakdown, SalaryResponse, SalaryCreate, SalaryAdjust, CheckoutResponse, GenerationResponse
from .dashboard import DashboardStats, UserDashboardStats

__all__ = [
    "UserRole", "UserBase", "UserCreate", "UserUpdate", "UserResponse",
    "AttendanceStatus", "AttendanceBase", "AttendanceCreate", "AttendanceUpdate", "AttendanceResponse", "PunchRequest", "SweepResponse",
    "ReceiptType", "PaymentReceiptCreate", "ReceiptResponse",
    "SalaryBreakdown", "SalaryResponse", "SalaryCreate", "SalaryAdjust", "CheckoutResponse", "GenerationResponse",
    "DashboardStats", "UserDashboardStats",
]
