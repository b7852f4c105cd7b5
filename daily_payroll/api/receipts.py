"""
Receipt API routes: listing and lookup of receipts, plus admin-recorded payments.

Receipts are append-only; there is no update or delete.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.schemas.receipt import PaymentReceiptCreate, ReceiptResponse, ReceiptType
from daily_payroll.api.deps import get_current_active_user, require_admin, ensure_self_or_admin
from daily_payroll.services.receipt_service import ReceiptService
from daily_payroll.services.user_service import UserService

router = APIRouter(prefix="/receipts", tags=["receipts"])

@router.get("/", response_model=List[ReceiptResponse], summary="List receipts")
async def get_receipts(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    user_id: Optional[int] = Query(None),
    receipt_type: Optional[ReceiptType] = Query(None),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    """Workers see their own receipts; admins may filter by user or list all."""
    if current_user.role != "admin":
        ensure_self_or_admin(current_user, user_id if user_id is not None else current_user.id, "view")
        user_id = current_user.id

    receipts = ReceiptService(db).list_for_user(
        user_id=user_id,
        receipt_type=receipt_type.value if receipt_type else None,
        skip=skip,
        limit=limit
    )
    return [ReceiptResponse.model_validate(receipt) for receipt in receipts]

@router.post("/", response_model=ReceiptResponse, status_code=status.HTTP_201_CREATED, summary="Record a payment")
async def create_payment_receipt(
    receipt_data: PaymentReceiptCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Append a payment receipt for a worker (admins only)."""
    try:
        if not UserService(db).get_user_by_id(receipt_data.user_id):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Target user not found"
            )

        receipt = ReceiptService(db).create_payment_receipt(
            user_id=receipt_data.user_id,
            amount=receipt_data.amount,
            description=receipt_data.description,
            day=receipt_data.date,
            details=receipt_data.details
        )
        return ReceiptResponse.model_validate(receipt)

    except HTTPException:
        raise
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to record payment: {str(e)}"
        )

@router.get("/{receipt_id}", response_model=ReceiptResponse, summary="Get receipt")
async def get_receipt(
    receipt_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    receipt = ReceiptService(db).get_receipt(receipt_id)

    if not receipt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Receipt not found"
        )

    ensure_self_or_admin(current_user, receipt.user_id, "view")
    return ReceiptResponse.model_validate(receipt)
