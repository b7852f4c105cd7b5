from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime, date as DateType
from enum import Enum

class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"

class AttendanceBase(BaseModel):
    date: DateType
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT
    notes: Optional[str] = None

class AttendanceCreate(AttendanceBase):
    # filled from the caller for non-admin requests
    user_id: Optional[int] = None
    auto_marked: bool = False

class AttendanceUpdate(BaseModel):
    date: Optional[DateType] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None

class PunchRequest(BaseModel):
    timestamp: Optional[datetime] = None
    notes: Optional[str] = None

class AttendanceResponse(AttendanceBase):
    id: int
    user_id: int
    hours_worked: float = 0
    overtime: float = 0
    auto_marked: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class SweepResponse(BaseModel):
    date: DateType
    marked_absent: int
    records: List[AttendanceResponse]
