"""
Caller resolution and role capability checks for the API routes.

Identity is established upstream; requests carry the acting user's ID in the
X-User-Id header.
"""

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.utils.validators import DataValidator


async def get_current_user(
    x_user_id: int = Header(..., alias="X-User-Id"),
    db: Session = Depends(get_db)
) -> User:
    """Resolve the acting user from the request header"""
    user = db.query(User).filter(User.id == x_user_id).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown caller"
        )
    return user


async def get_current_active_user(
    current_user: User = Depends(get_current_user)
) -> User:
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user"
        )
    return current_user


async def require_admin(
    current_user: User = Depends(get_current_active_user)
) -> User:
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return current_user


def ensure_self_or_admin(current_user: User, user_id: int, action: str = "access"):
    """Workers may only act on their own data; admins on anyone's"""
    if current_user.role != "admin" and user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Permission denied to {action} other users' records"
        )


def ensure_valid_period(month: str, year: int):
    """400 for unknown month names or years outside the supported range"""
    is_valid, errors = DataValidator().validate_salary_period(month, year)
    if not is_valid:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="; ".join(errors)
        )
