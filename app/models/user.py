"""
User model for TechQuiz
"""

import enum

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.orm import validates

from app.core.database import Base, generate_id, utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    READER = "reader"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=generate_id)
    username = Column(String(50), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles], name="user_role"),
        nullable=False,
        default=UserRole.READER,
    )

    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    @validates("email")
    def normalize_email(self, key, email):
        return email.strip().lower()

    @validates("username")
    def normalize_username(self, key, username):
        return username.strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
