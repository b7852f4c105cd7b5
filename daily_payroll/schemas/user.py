from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class UserRole(str, Enum):
    ADMIN = "admin"
    WORKER = "worker"

class UserBase(BaseModel):
    name: str
    id_card_number: str
    role: UserRole = UserRole.WORKER
    phone: Optional[str] = None
    position: Optional[str] = None
    day_rate: Optional[float] = Field(None, ge=0)
    is_active: bool = True

class UserCreate(UserBase):
    pass

class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[UserRole] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    day_rate: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None

class UserResponse(UserBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
