from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .attendance import AttendanceResponse
from .receipt import ReceiptResponse

class SalaryBreakdown(BaseModel):
    """Monthly figures derived from a worker's attendance records"""
    day_rate: float = 0
    present_days: int = 0
    absent_days: int = 0
    total_working_days: int = 0
    earned_amount: float = 0
    missed_amount: float = 0
    total_amount: float = 0
    total_hours_worked: float = 0
    total_overtime: float = 0
    attendance_records: List[AttendanceResponse] = []

    @classmethod
    def zero(cls) -> "SalaryBreakdown":
        return cls()

class SalaryBase(BaseModel):
    user_id: int
    month: str
    year: int
    day_rate: float = 0
    present_days: int = 0
    absent_days: int = 0
    total_working_days: int = 0
    earned_amount: float = 0
    missed_amount: float = 0
    bonuses: float = 0
    total_amount: float = 0
    is_paid: bool = False
    paid_at: Optional[datetime] = None
    notes: Optional[str] = None

class SalaryResponse(SalaryBase):
    id: int
    deductions: float = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SalaryCreate(BaseModel):
    user_id: int
    month: str
    year: int
    bonuses: float = Field(0, ge=0)
    notes: Optional[str] = None

class SalaryAdjust(BaseModel):
    bonuses: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None

class CheckoutResponse(BaseModel):
    salary: SalaryResponse
    receipt: ReceiptResponse
    message: str

class GenerationResponse(BaseModel):
    month: str
    year: int
    created: int
    salaries: List[SalaryResponse]
