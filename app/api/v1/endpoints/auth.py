"""
Authentication endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.auth import LoginRequest, LoginResponse, SignupRequest, UserPublic, UserResponse
from app.schemas.common import Envelope
from app.services.auth import auth_service

router = APIRouter()


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    """Register new reader account"""
    user = await auth_service.register(db, payload)
    return UserResponse(message="User registered successfully", user=UserPublic.from_user(user))


@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""
    user, token = await auth_service.authenticate(db, payload)
    return LoginResponse(
        message="Login successful",
        user=UserPublic.from_user(user),
        token=token,
        expires_in=auth_service.token_lifetime_seconds(),
    )


@router.post("/logout", response_model=Envelope)
async def logout(current_user: User = Depends(get_current_user)):
    """Stateless acknowledgement; the client discards its token"""
    return Envelope(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current user"""
    return UserResponse(user=UserPublic.from_user(current_user))
