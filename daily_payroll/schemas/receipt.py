from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime, date as DateType
from enum import Enum

class ReceiptType(str, Enum):
    DAILY_EARNING = "daily_earning"
    SALARY = "salary"
    PAYMENT = "payment"

class PaymentReceiptCreate(BaseModel):
    user_id: int
    amount: float = Field(..., ge=0)
    description: str = Field(..., min_length=1)
    date: Optional[DateType] = None
    details: Optional[dict] = None

class ReceiptResponse(BaseModel):
    id: int
    user_id: int
    receipt_type: ReceiptType
    amount: float
    day_rate: float = 0
    date: DateType
    description: str
    details: Optional[dict] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
