"""
Append-only receipt emission: daily earning credits and consolidated salary receipts.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from daily_payroll.config import settings
from daily_payroll.models.user import User
from daily_payroll.models.salary import MonthlySalary
from daily_payroll.models.receipt import Receipt
from daily_payroll.utils.datetime_utils import format_date, get_today

logger = logging.getLogger(__name__)

DAILY_EARNING = "daily_earning"
SALARY = "salary"
PAYMENT = "payment"

class ReceiptService:
    """Receipt writer; receipts are never updated or deduplicated"""

    def __init__(self, db: Session):
        self.db = db

    def credit_day(self, user_id: int, day: date, day_rate: float) -> Receipt:
        """
        Append a daily earning receipt for a present day.

        Repeated calls for the same worker and day each add a new receipt.
        The receipt is flushed but not committed; the caller owns the transaction.
        """
        amount = max(0.0, day_rate or 0.0)
        receipt = Receipt(
            user_id=user_id,
            receipt_type=DAILY_EARNING,
            amount=amount,
            day_rate=amount,
            date=day,
            description=f"Daily earning for {format_date(day)}: {amount:g} {settings.CURRENCY}",
        )
        self.db.add(receipt)
        self.db.flush()

        logger.info(f"Credited user {user_id} with {amount:g} {settings.CURRENCY} for {format_date(day)}")
        return receipt

    def create_checkout_receipt(self, user: User, salary: MonthlySalary) -> Receipt:
        """Append the consolidated salary receipt for a month's checkout"""
        currency = settings.CURRENCY
        day_rate = user.effective_day_rate
        description = (
            f"Daily Salary Checkout - {salary.month} {salary.year}\n"
            f"Worker: {user.name}\n"
            f"Daily Rate: {day_rate:g} {currency} per day\n"
            f"Working Days: {salary.present_days or 0}/{salary.total_working_days or 0}\n"
            f"Absent Days: {salary.absent_days or 0}\n"
            f"Calculation: {salary.present_days or 0} days x {day_rate:g} {currency} = {salary.earned_amount or 0:g} {currency}\n"
            f"Missed Salary: {salary.missed_amount or 0:g} {currency}\n"
            f"Bonuses: {salary.bonuses or 0:g} {currency}\n"
            f"Total Paid: {salary.total_amount or 0:g} {currency}"
        )

        receipt = Receipt(
            user_id=user.id,
            receipt_type=SALARY,
            amount=max(0.0, salary.total_amount or 0.0),
            day_rate=day_rate,
            date=get_today(settings.TIMEZONE),
            description=description,
            details={
                "salary_id": salary.id,
                "month": salary.month,
                "year": salary.year,
                "worker_name": user.name,
                "present_days": salary.present_days or 0,
                "absent_days": salary.absent_days or 0,
                "total_working_days": salary.total_working_days or 0,
                "breakdown": {
                    "earned_amount": salary.earned_amount or 0,
                    "missed_amount": salary.missed_amount or 0,
                    "bonuses": salary.bonuses or 0,
                    "total_amount": salary.total_amount or 0,
                },
            },
        )
        self.db.add(receipt)
        self.db.flush()
        return receipt

    def create_payment_receipt(self, user_id: int, amount: float, description: str,
                               day: Optional[date] = None, details: Optional[dict] = None) -> Receipt:
        """
        Append a manual payment receipt, e.g. an advance paid outside checkout.

        Raises:
            ValueError: if the amount is negative or the description is blank
        """
        if amount is None or amount < 0:
            raise ValueError("Amount cannot be negative")
        if not description or not description.strip():
            raise ValueError("Description is required")

        receipt = Receipt(
            user_id=user_id,
            receipt_type=PAYMENT,
            amount=amount,
            day_rate=0,
            date=day or get_today(settings.TIMEZONE),
            description=description.strip(),
            details=details,
        )
        self.db.add(receipt)
        self.db.commit()
        self.db.refresh(receipt)

        logger.info(f"Recorded payment of {amount:g} {settings.CURRENCY} to user {user_id}")
        return receipt

    def get_receipt(self, receipt_id: int) -> Optional[Receipt]:
        return self.db.query(Receipt).filter(Receipt.id == receipt_id).first()

    def list_for_user(self, user_id: Optional[int] = None, receipt_type: Optional[str] = None,
                      skip: int = 0, limit: int = 100) -> List[Receipt]:
        """Receipts newest first, optionally filtered by worker and type"""
        query = self.db.query(Receipt)

        if user_id is not None:
            query = query.filter(Receipt.user_id == user_id)

        if receipt_type:
            query = query.filter(Receipt.receipt_type == receipt_type)

        return query.order_by(Receipt.date.desc(), Receipt.id.desc()).offset(skip).limit(limit).all()
