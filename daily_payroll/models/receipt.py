from sqlalchemy import Column, Integer, String, Date, DateTime, Float, Text, JSON, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from daily_payroll.database import Base

class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    receipt_type = Column(String(20), nullable=False)  # 'daily_earning', 'salary', 'payment'
    amount = Column(Float, nullable=False, default=0)
    day_rate = Column(Float, default=0)
    date = Column(Date, nullable=False)
    description = Column(Text, nullable=False)
    details = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", backref="receipts")

    __table_args__ = (
        Index('ix_receipts_user_date', 'user_id', 'date'),
    )
