"""
Security utilities for authentication and authorization
Handles JWT tokens, password hashing, and the request auth gate
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationException, AuthorizationException
from app.core.logging import LoggerFactory
from app.models.user import User
from app.utils.validators import is_valid_object_id

# Password hashing context
pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

# HTTP Bearer scheme; missing credentials are reported by the gate itself
security = HTTPBearer(auto_error=False)

security_logger = LoggerFactory.get_security_logger()


class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against hashed password"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except (ValueError, TypeError):
            # Unrecognized or corrupt hash
            return False

    @staticmethod
    def get_password_hash(password: str) -> str:
        """Hash a password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
        """
        Create JWT access token

        Args:
            data: Data to encode in token
            expires_delta: Token expiration time

        Returns:
            Encoded JWT token
        """
        to_encode = data.copy()

        if expires_delta:
            expire = datetime.now(timezone.utc) + expires_delta
        else:
            expire = datetime.now(timezone.utc) + timedelta(
                minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
            )

        to_encode.update({"exp": expire, "type": "access"})

        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_token(token: str) -> Dict[str, Any]:
        """
        Decode JWT token

        Args:
            token: JWT token to decode

        Returns:
            Decoded token data

        Raises:
            AuthenticationException: If token is invalid or expired
        """
        try:
            return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except ExpiredSignatureError:
            raise AuthenticationException("Token expired. Please login again.")
        except JWTError:
            raise AuthenticationException("Invalid token")


async def hash_password(password: str) -> str:
    """Hash a password without blocking the event loop"""
    return await run_in_threadpool(SecurityUtils.get_password_hash, password)


async def check_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password without blocking the event loop"""
    return await run_in_threadpool(SecurityUtils.verify_password, plain_password, hashed_password)


def resolve_user_from_token(db: Session, token: Optional[str]) -> User:
    """
    Resolve the caller behind a bearer token

    Raises:
        AuthenticationException: missing, malformed, expired or orphaned token
    """
    if not token or token in ("null", "undefined"):
        raise AuthenticationException("Access denied. No token provided.")

    try:
        payload = SecurityUtils.decode_token(token)
    except AuthenticationException as e:
        security_logger.info(f"Rejected bearer token: {e.message}")
        raise

    if payload.get("type") != "access":
        raise AuthenticationException("Invalid token")

    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not is_valid_object_id(user_id):
        raise AuthenticationException("Invalid token payload")

    user = db.get(User, user_id)
    if user is None:
        security_logger.info(f"Token references unknown user {user_id}")
        raise AuthenticationException("User not found. Token may be invalid.")

    return user


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db),
) -> User:
    """
    Get current user from the Authorization header

    Returns:
        User row for the token subject

    Raises:
        AuthenticationException: If the credential is missing or invalid
    """
    token = credentials.credentials if credentials else None
    return resolve_user_from_token(db, token)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Dependency to require admin role"""
    if not current_user.is_admin:
        security_logger.info(f"User {current_user.id} refused admin access")
        raise AuthorizationException("Access denied. Admin privileges required.")
    return current_user
