"""
Salary API routes: monthly aggregates, batch generation, checkout and payment.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.schemas.salary import SalaryResponse, SalaryCreate, SalaryAdjust, CheckoutResponse, GenerationResponse
from daily_payroll.schemas.receipt import ReceiptResponse
from daily_payroll.api.deps import get_current_active_user, require_admin, ensure_self_or_admin, ensure_valid_period
from daily_payroll.services.accrual_service import AccrualService
from daily_payroll.config import settings

router = APIRouter(prefix="/salary", tags=["salary"])

class SalaryListResponse(BaseModel):
    salaries: List[SalaryResponse]
    total: int
    skip: int
    limit: int

@router.get("/", response_model=SalaryListResponse, summary="List monthly salaries")
async def get_salaries(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    user_id: Optional[int] = Query(None),
    month: Optional[str] = Query(None),
    year: Optional[int] = Query(None),
    is_paid: Optional[bool] = Query(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Workers see their own salaries, admins everyone's."""
    if current_user.role != "admin":
        ensure_self_or_admin(current_user, user_id if user_id is not None else current_user.id, "view")
        user_id = current_user.id

    salaries, total = AccrualService(db).list_salaries(
        user_id=user_id, month=month, year=year, is_paid=is_paid, skip=skip, limit=limit
    )

    return SalaryListResponse(
        salaries=[SalaryResponse.model_validate(salary) for salary in salaries],
        total=total,
        skip=skip,
        limit=limit
    )

@router.post("/", response_model=SalaryResponse, status_code=status.HTTP_201_CREATED, summary="Create monthly salary")
async def create_salary(
    salary_data: SalaryCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Create one worker's salary record for a period (admins only).

    The figures are derived from the month's attendance; only bonuses and notes are taken from the request.
    """
    ensure_valid_period(salary_data.month, salary_data.year)

    try:
        salary = AccrualService(db).create_salary(
            salary_data.user_id, salary_data.month, salary_data.year, salary_data.bonuses, salary_data.notes
        )

        if salary is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        return SalaryResponse.model_validate(salary)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create salary record: {str(e)}"
        )

@router.post("/generate-monthly/{month}/{year}", response_model=GenerationResponse, summary="Generate missing monthly salaries")
async def generate_monthly_salaries(
    month: str,
    year: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Create salary records for active workers that have none for the month.

    Existing records are never overwritten.
    """
    ensure_valid_period(month, year)

    try:
        created = AccrualService(db).generate_monthly_batch(month, year)

        return GenerationResponse(
            month=month,
            year=year,
            created=len(created),
            salaries=[SalaryResponse.model_validate(salary) for salary in created]
        )

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate monthly salaries: {str(e)}"
        )

@router.post("/checkout/{user_id}/{month}/{year}", response_model=CheckoutResponse, summary="Salary checkout")
async def checkout_salary(
    user_id: int,
    month: str,
    year: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """
    Summarise a month's earnings into a consolidated salary receipt.

    Works for any number of recorded days; the salary record is created on the fly if missing.
    """
    ensure_self_or_admin(current_user, user_id, "checkout")
    ensure_valid_period(month, year)

    try:
        result = AccrualService(db).checkout(user_id, month, year)

        if result is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        salary, receipt = result
        return CheckoutResponse(
            salary=SalaryResponse.model_validate(salary),
            receipt=ReceiptResponse.model_validate(receipt),
            message=(
                f"Daily salary checkout completed: {salary.present_days} days x "
                f"{salary.day_rate:g} {settings.CURRENCY} = {salary.total_amount:g} {settings.CURRENCY}"
            )
        )

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to checkout salary: {str(e)}"
        )

@router.get("/{salary_id}", response_model=SalaryResponse, summary="Get monthly salary")
async def get_salary(
    salary_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    salary = AccrualService(db).get_salary_by_id(salary_id)

    if not salary:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salary record not found"
        )

    ensure_self_or_admin(current_user, salary.user_id, "view")
    return SalaryResponse.model_validate(salary)

@router.put("/{salary_id}", response_model=SalaryResponse, summary="Adjust bonuses and notes")
async def adjust_salary(
    salary_id: int,
    adjust_data: SalaryAdjust,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        salary = AccrualService(db).adjust_salary(salary_id, adjust_data.bonuses, adjust_data.notes)

        if not salary:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Salary record not found"
            )

        return SalaryResponse.model_validate(salary)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.put("/{salary_id}/pay", response_model=SalaryResponse, summary="Mark salary as paid")
async def mark_salary_paid(
    salary_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    salary = AccrualService(db).mark_paid(salary_id)

    if not salary:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salary record not found"
        )

    return SalaryResponse.model_validate(salary)

@router.delete("/{salary_id}", response_model=dict, summary="Delete monthly salary")
async def delete_salary(
    salary_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    if not AccrualService(db).delete_salary(salary_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Salary record not found"
        )

    return {
        "success": True,
        "message": "Salary record deleted successfully",
        "salary_id": salary_id
    }
