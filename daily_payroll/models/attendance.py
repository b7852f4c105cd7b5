from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Float, Text, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from daily_payroll.database import Base
from daily_payroll.utils.datetime_utils import to_naive_utc

STANDARD_WORK_HOURS = 8

class AttendanceRecord(Base):
    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    check_in = Column(DateTime(timezone=True))
    check_out = Column(DateTime(timezone=True))
    hours_worked = Column(Float, default=0)
    overtime = Column(Float, default=0)
    status = Column(String(20), nullable=False, default="present")  # 'present', 'absent', 'late'
    auto_marked = Column(Boolean, default=False)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    user = relationship("User", backref="attendance_records")

    __table_args__ = (
        UniqueConstraint('user_id', 'date', name='uix_attendance_user_date'),
    )

    def refresh_hours(self, standard_hours: int = STANDARD_WORK_HOURS):
        """Re-derive hours_worked and overtime when both punches are present."""
        if self.check_in is None or self.check_out is None:
            return
        total_hours = (to_naive_utc(self.check_out) - to_naive_utc(self.check_in)).total_seconds() / 3600
        self.hours_worked = round(max(0.0, total_hours), 2)
        self.overtime = round(max(0.0, self.hours_worked - standard_hours), 2)
