"""Attendance-driven daily-rate payroll accrual service."""

__version__ = "1.0.0"
