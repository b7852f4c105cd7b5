"""
Worker profile service: lookup and maintenance of users and their day rates.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from sqlalchemy import or_

from daily_payroll.models.user import User
from daily_payroll.schemas.user import UserCreate, UserUpdate
from daily_payroll.utils.validators import DataValidator

logger = logging.getLogger(__name__)

class UserService:
    """Worker profile service"""

    def __init__(self, db: Session):
        self.db = db
        self.validator = DataValidator()

    def create_user(self, user_data: UserCreate) -> User:
        """
        Create a user.

        Raises:
            ValueError: if the ID card number is taken or the data is invalid
        """
        try:
            self.validator.ensure_valid(self.validator.validate_user_data(user_data.model_dump()))

            existing_user = self.db.query(User).filter(
                User.id_card_number == user_data.id_card_number
            ).first()

            if existing_user:
                raise ValueError("User with this ID card number already exists")

            new_user = User(
                id_card_number=user_data.id_card_number,
                name=user_data.name,
                role=user_data.role.value,
                phone=user_data.phone,
                position=user_data.position,
                day_rate=user_data.day_rate,
                is_active=user_data.is_active
            )

            self.db.add(new_user)
            self.db.commit()
            self.db.refresh(new_user)

            logger.info(f"Created user {new_user.id} - {new_user.name}")
            return new_user

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create user: {str(e)}")
            raise ValueError(f"Failed to create user: {str(e)}")

    def update_user(self, user_id: int, update_data: UserUpdate) -> User:
        """
        Update a user's profile. A new day rate only affects later recomputes.

        Raises:
            ValueError: if the user does not exist or the data is invalid
        """
        try:
            user = self.db.query(User).filter(User.id == user_id).first()

            if not user:
                raise ValueError("User not found")

            update_dict = update_data.model_dump(exclude_unset=True, exclude_none=True)
            if "role" in update_dict:
                update_dict["role"] = update_dict["role"].value

            self.validator.ensure_valid(self.validator.validate_user_data(update_dict))

            for field, value in update_dict.items():
                if hasattr(user, field):
                    setattr(user, field, value)

            self.db.commit()
            self.db.refresh(user)

            logger.info(f"Updated user {user.id} - {user.name}")
            return user

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update user {user_id}: {str(e)}")
            raise ValueError(f"Failed to update user: {str(e)}")

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.db.query(User).filter(User.id == user_id).first()

    def get_active_workers(self) -> List[User]:
        """Active users with the worker role, the population for sweeps and batches"""
        return self.db.query(User).filter(
            User.is_active == True,
            User.role == "worker"
        ).order_by(User.id).all()

    def get_users_list(
        self,
        skip: int = 0,
        limit: int = 100,
        search: str = None,
        role: str = None,
        is_active: bool = None
    ) -> Tuple[List[User], int]:
        """
        List users with optional filters.

        Returns:
            (users, total) tuple
        """
        query = self.db.query(User)

        if search:
            search_filter = f"%{search}%"
            query = query.filter(
                or_(
                    User.name.ilike(search_filter),
                    User.id_card_number.ilike(search_filter),
                    User.position.ilike(search_filter)
                )
            )

        if role:
            query = query.filter(User.role == role)

        if is_active is not None:
            query = query.filter(User.is_active == is_active)

        total = query.count()
        users = query.order_by(User.id).offset(skip).limit(limit).all()

        return users, total

    def deactivate_user(self, user_id: int) -> User:
        """
        Soft-delete a user; inactive workers are skipped by sweeps and batches.

        Raises:
            ValueError: if the user does not exist
        """
        try:
            user = self.db.query(User).filter(User.id == user_id).first()

            if not user:
                raise ValueError("User not found")

            user.is_active = False

            self.db.commit()
            self.db.refresh(user)

            logger.info(f"Deactivated user {user.id} - {user.name}")
            return user

        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to deactivate user {user_id}: {str(e)}")
            raise ValueError(f"Failed to deactivate user: {str(e)}")
