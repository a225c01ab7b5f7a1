"""
Authentication service for TechQuiz
"""

import logging
from typing import Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import AuthenticationException, DatabaseException, DuplicateException
from app.core.logging import LoggerFactory
from app.core.security import SecurityUtils, check_password, hash_password
from app.models.user import User, UserRole
from app.schemas.auth import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)
security_logger = LoggerFactory.get_security_logger()


class AuthService:
    """Authentication service"""

    @staticmethod
    def get_user_by_email(db: Session, email: str) -> User:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    @staticmethod
    async def register(db: Session, payload: SignupRequest) -> User:
        """
        Create a reader account

        Raises:
            DuplicateException: email already registered
        """
        if AuthService.get_user_by_email(db, payload.useremail):
            raise DuplicateException("Email")

        user = User(
            username=payload.username,
            email=payload.useremail,
            hashed_password=await hash_password(payload.password),
            role=UserRole.READER,
        )

        try:
            db.add(user)
            db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            db.rollback()
            raise DuplicateException("Email")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"User save error: {e}")
            raise DatabaseException("Registration failed. Please try again.")

        logger.info(f"User registered: {user.id}")
        return user

    @staticmethod
    async def authenticate(db: Session, payload: LoginRequest) -> Tuple[User, str]:
        """
        Check credentials and issue an access token

        Raises:
            AuthenticationException: unknown email or wrong password
        """
        user = AuthService.get_user_by_email(db, payload.useremail)
        if not user or not await check_password(payload.password, user.hashed_password):
            security_logger.info("Failed login attempt", extra={"email": payload.useremail})
            raise AuthenticationException("Invalid email or password")

        token = SecurityUtils.create_access_token({"sub": user.id})
        return user, token

    @staticmethod
    def token_lifetime_seconds() -> int:
        return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


auth_service = AuthService()
