"""
Attendance API routes: CRUD on daily records, punches, manual absence sweep and monthly report.
"""

from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.schemas.attendance import (
    AttendanceCreate,
    AttendanceUpdate,
    AttendanceResponse,
    AttendanceStatus,
    PunchRequest,
    SweepResponse
)
from daily_payroll.schemas.salary import SalaryBreakdown
from daily_payroll.api.deps import get_current_active_user, require_admin, ensure_self_or_admin, ensure_valid_period
from daily_payroll.services.attendance_service import AttendanceService
from daily_payroll.services.accrual_service import AccrualService
from daily_payroll.services.salary_calculator import DailySalaryCalculator
from daily_payroll.utils.datetime_utils import get_today, parse_date
from daily_payroll.config import settings

router = APIRouter(prefix="/attendance", tags=["attendance"])

class AttendanceListResponse(BaseModel):
    records: List[AttendanceResponse]
    total: int
    skip: int
    limit: int

@router.get("/", response_model=AttendanceListResponse, summary="List attendance records")
async def get_attendance_records(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    user_id: Optional[int] = Query(None),
    record_status: Optional[AttendanceStatus] = Query(None, alias="status"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    auto_marked: Optional[bool] = Query(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    List attendance records, newest first.

    - Workers only see their own records
    - Admins see everyone's, optionally filtered by user
    """
    try:
        if current_user.role != "admin":
            ensure_self_or_admin(current_user, user_id if user_id is not None else current_user.id, "view")
            user_id = current_user.id

        records, total = AttendanceService(db).list_records(
            user_id=user_id,
            status=record_status.value if record_status else None,
            start_date=start_date,
            end_date=end_date,
            auto_marked=auto_marked,
            skip=skip,
            limit=limit
        )

        return AttendanceListResponse(
            records=[AttendanceResponse.model_validate(record) for record in records],
            total=total,
            skip=skip,
            limit=limit
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to get attendance records: {str(e)}"
        )

@router.post("/", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED, summary="Create attendance record")
async def create_attendance_record(
    record_data: AttendanceCreate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Create an attendance record; the worker's monthly salary is recomputed afterwards.

    - Workers record for themselves
    - Admins may record for any user
    """
    try:
        if current_user.role != "admin" or record_data.user_id is None:
            record_data.user_id = current_user.id

        target_user = db.query(User).filter(User.id == record_data.user_id).first()
        if not target_user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Target user not found"
            )

        new_record = AttendanceService(db).create_record(record_data)
        return AttendanceResponse.model_validate(new_record)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create attendance record: {str(e)}"
        )

@router.post("/check-in", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED, summary="Check in")
async def check_in(
    punch_data: PunchRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        record = AttendanceService(db).check_in(current_user.id, punch_data.timestamp, punch_data.notes)
        return AttendanceResponse.model_validate(record)

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to check in: {str(e)}"
        )

@router.post("/check-out", response_model=AttendanceResponse, summary="Check out")
async def check_out(
    punch_data: PunchRequest,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    try:
        record = AttendanceService(db).check_out(current_user.id, punch_data.timestamp, punch_data.notes)
        return AttendanceResponse.model_validate(record)

    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to check out: {str(e)}"
        )

@router.post("/mark-absent", response_model=SweepResponse, summary="Run the absence sweep now")
async def mark_absent(
    sweep_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Mark absent every active worker without a record for the day (default: today).
    """
    try:
        target_date = sweep_date or get_today(settings.TIMEZONE)
        created = AccrualService(db).sweep_absences(target_date)

        return SweepResponse(
            date=target_date,
            marked_absent=len(created),
            records=[AttendanceResponse.model_validate(record) for record in created]
        )

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to mark absent workers: {str(e)}"
        )

@router.get("/user/{user_id}", response_model=List[AttendanceResponse], summary="Worker records in a date range")
async def get_user_attendance_range(
    user_id: int,
    start_date: str = Query(..., description="YYYY-MM-DD"),
    end_date: str = Query(..., description="YYYY-MM-DD"),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    A worker's records between two days, inclusive, oldest first.

    - Workers only see their own records
    - Admins may view any user
    """
    ensure_self_or_admin(current_user, user_id, "view")

    start_dt = parse_date(start_date)
    end_dt = parse_date(end_date)
    if start_dt is None or end_dt is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Dates must use the YYYY-MM-DD format"
        )
    if end_dt < start_dt:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date cannot be earlier than start_date"
        )

    records = AttendanceService(db).get_user_records_range(user_id, start_dt, end_dt)
    return [AttendanceResponse.model_validate(record) for record in records]

@router.get("/monthly-report/{user_id}/{month}/{year}", response_model=SalaryBreakdown, summary="Monthly attendance report")
async def get_monthly_report(
    user_id: int,
    month: str,
    year: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Salary breakdown computed live from the month's attendance, without persisting it."""
    ensure_self_or_admin(current_user, user_id, "view")
    ensure_valid_period(month, year)

    return DailySalaryCalculator(db).calculate(user_id, month, year)

@router.get("/{record_id}", response_model=AttendanceResponse, summary="Get attendance record")
async def get_attendance_record(
    record_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    record = AttendanceService(db).get_record(record_id)

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Attendance record not found"
        )

    ensure_self_or_admin(current_user, record.user_id, "view")
    return AttendanceResponse.model_validate(record)

@router.put("/{record_id}", response_model=AttendanceResponse, summary="Update attendance record")
async def update_attendance_record(
    record_id: int,
    record_data: AttendanceUpdate,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Update an attendance record.

    - Workers may update their own records
    - Admins may update any record
    """
    try:
        attendance_service = AttendanceService(db)
        record = attendance_service.get_record(record_id)

        if not record:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attendance record not found"
            )

        ensure_self_or_admin(current_user, record.user_id, "update")

        updated_record = attendance_service.update_record(record_id, record_data)
        return AttendanceResponse.model_validate(updated_record)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update attendance record: {str(e)}"
        )

@router.delete("/{record_id}", response_model=dict, summary="Delete attendance record")
async def delete_attendance_record(
    record_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Delete an attendance record (admins only); the month is recomputed without it.
    """
    try:
        if not AttendanceService(db).delete_record(record_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Attendance record not found"
            )

        return {
            "success": True,
            "message": "Attendance record deleted successfully",
            "record_id": record_id
        }

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to delete attendance record: {str(e)}"
        )
