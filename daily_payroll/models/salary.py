from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from daily_payroll.database import Base

class MonthlySalary(Base):
    __tablename__ = "monthly_salaries"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    month = Column(String(20), nullable=False)  # 'January' .. 'December'
    year = Column(Integer, nullable=False)
    day_rate = Column(Float, default=0)
    present_days = Column(Integer, default=0)
    absent_days = Column(Integer, default=0)
    total_working_days = Column(Integer, default=0)
    earned_amount = Column(Float, default=0)
    missed_amount = Column(Float, default=0)
    bonuses = Column(Float, default=0)
    total_amount = Column(Float, default=0)
    is_paid = Column(Boolean, default=False)
    paid_at = Column(DateTime(timezone=True))
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="monthly_salaries")

    __table_args__ = (
        UniqueConstraint('user_id', 'month', 'year', name='uix_salary_user_month_year'),
    )

    @property
    def deductions(self) -> float:
        return self.missed_amount or 0.0
