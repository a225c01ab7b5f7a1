"""User service"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.exceptions import DatabaseException, NotFoundException, ValidationException
from app.core.logging import LoggerFactory
from app.core.security import SecurityUtils
from app.models import User, UserRole
from app.utils.validators import is_valid_object_id

logger = logging.getLogger(__name__)
audit_logger = LoggerFactory.get_audit_logger()


class UserService:
    @staticmethod
    def get_user(db: Session, user_id: str) -> Optional[User]:
        """Get user by ID"""
        if not is_valid_object_id(user_id):
            raise ValidationException("Invalid user ID format")
        return db.get(User, user_id)

    @staticmethod
    def update_role(db: Session, user_id: str, role: UserRole, current_user: User) -> User:
        """Set a user's role (administrative action)"""
        user = UserService.get_user(db, user_id)
        if user is None:
            raise NotFoundException("User")

        previous = user.role
        user.role = role
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to update role of user {user_id}: {e}")
            raise DatabaseException("Could not update user role")
        db.refresh(user)

        audit_logger.info(
            "User role changed",
            extra={
                "user_id": user.id,
                "admin_id": current_user.id,
                "from_role": previous.value,
                "to_role": role.value,
            },
        )
        return user

    @staticmethod
    def seed_admin(db: Session, email: str, password: str, username: str = "Admin") -> User:
        """
        Promote the account behind ``email`` to admin, creating it if needed

        An existing account keeps its password.
        """
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.role = UserRole.ADMIN
            logger.info(f"Admin updated: {email}")
        else:
            user = User(
                username=username,
                email=email,
                hashed_password=SecurityUtils.get_password_hash(password),
                role=UserRole.ADMIN,
            )
            db.add(user)
            logger.info(f"Admin created: {email}")

        db.commit()
        db.refresh(user)
        return user
