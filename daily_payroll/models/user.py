from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, func
from daily_payroll.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    id_card_number = Column(String(50), unique=True, nullable=False, index=True)
    name = Column(String(100), nullable=False)
    role = Column(String(20), default="worker")  # 'admin', 'worker'
    phone = Column(String(30))
    position = Column(String(100))
    day_rate = Column(Float)  # amount paid per present day
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def effective_day_rate(self) -> float:
        """Day rate with missing or negative values treated as zero"""
        if not self.day_rate or self.day_rate < 0:
            return 0.0
        return float(self.day_rate)
