"""Authentication schemas"""

from pydantic import field_validator

from app.core.config import settings
from app.models.user import User, UserRole
from app.schemas.common import CamelModel, Envelope
from app.utils.validators import validate_email


def _normalize_email(value: str) -> str:
    value = value.strip().lower()
    if not validate_email(value):
        raise ValueError("Please enter a valid email address")
    return value


class SignupRequest(CamelModel):
    username: str
    useremail: str
    password: str

    @field_validator("username")
    @classmethod
    def check_username(cls, value: str) -> str:
        value = value.strip()
        if len(value) < settings.USERNAME_MIN_LENGTH:
            raise ValueError(
                f"Username must be at least {settings.USERNAME_MIN_LENGTH} characters long"
            )
        return value

    @field_validator("useremail")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if len(value) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
            )
        return value


class LoginRequest(CamelModel):
    useremail: str
    password: str

    @field_validator("useremail")
    @classmethod
    def check_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("password")
    @classmethod
    def check_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Email and password are required")
        return value


class UserPublic(CamelModel):
    """User as shown to clients; never carries the password hash"""

    id: str
    username: str
    useremail: str
    role: UserRole

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls(id=user.id, username=user.username, useremail=user.email, role=user.role)


class UserResponse(Envelope):
    user: UserPublic


class LoginResponse(Envelope):
    user: UserPublic
    token: str
    token_type: str = "bearer"
    expires_in: int


class RoleUpdate(CamelModel):
    role: UserRole
