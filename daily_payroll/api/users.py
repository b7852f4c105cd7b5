"""
User management API routes for worker profiles and day rates.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from pydantic import BaseModel

from daily_payroll.database import get_db
from daily_payroll.models.user import User
from daily_payroll.schemas.user import UserCreate, UserUpdate, UserResponse, UserRole
from daily_payroll.api.deps import get_current_active_user, require_admin, ensure_self_or_admin
from daily_payroll.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])

class UserListResponse(BaseModel):
    users: List[UserResponse]
    total: int
    skip: int
    limit: int

@router.get("/", response_model=UserListResponse, summary="List users")
async def get_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    search: Optional[str] = Query(None),
    role: Optional[UserRole] = Query(None),
    is_active: Optional[bool] = Query(None),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    users, total = UserService(db).get_users_list(
        skip=skip,
        limit=limit,
        search=search,
        role=role.value if role else None,
        is_active=is_active
    )

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        skip=skip,
        limit=limit
    )

@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED, summary="Create user")
async def create_user(
    user_data: UserCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    try:
        return UserResponse.model_validate(UserService(db).create_user(user_data))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/me", response_model=UserResponse, summary="Current user")
async def get_me(current_user: User = Depends(get_current_active_user)):
    return UserResponse.model_validate(current_user)

@router.get("/{user_id}", response_model=UserResponse, summary="Get user")
async def get_user(
    user_id: int,
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
):
    ensure_self_or_admin(current_user, user_id, "view")

    user = UserService(db).get_user_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user)

@router.put("/{user_id}", response_model=UserResponse, summary="Update user")
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user_service = UserService(db)

    if not user_service.get_user_by_id(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    try:
        return UserResponse.model_validate(user_service.update_user(user_id, update_data))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{user_id}", response_model=UserResponse, summary="Deactivate user")
async def deactivate_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    user_service = UserService(db)

    if not user_service.get_user_by_id(user_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )

    return UserResponse.model_validate(user_service.deactivate_user(user_id))
