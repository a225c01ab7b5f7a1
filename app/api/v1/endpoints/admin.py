"""
Admin endpoints
Quiz management and role changes, admin role only
"""

from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import require_admin
from app.models import User
from app.schemas.auth import RoleUpdate, UserPublic, UserResponse
from app.schemas.common import Envelope
from app.schemas.quiz import (
    AdminQuizListResponse,
    AdminQuizResponse,
    QuizAdminDetail,
    QuizCreate,
    QuizUpdate,
)
from app.services.admin import AdminService
from app.services.users import UserService

router = APIRouter()


@router.get("/quizzes", response_model=AdminQuizListResponse)
async def list_quizzes(
    tech: Optional[str] = None,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """All quizzes, drafts included"""
    quizzes = [QuizAdminDetail.model_validate(q) for q in AdminService.list_quizzes(db, tech)]
    return AdminQuizListResponse(quizzes=quizzes, count=len(quizzes))


@router.post("/quizzes", response_model=AdminQuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    payload: QuizCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Create quiz"""
    quiz = await AdminService.create_quiz(db, payload, current_user)
    return AdminQuizResponse(message="Quiz created", quiz=QuizAdminDetail.model_validate(quiz))


@router.get("/quizzes/{quiz_id}", response_model=AdminQuizResponse)
async def get_quiz(
    quiz_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Quiz detail with answer keys, any publish state"""
    quiz = AdminService.get_quiz(db, quiz_id)
    return AdminQuizResponse(quiz=QuizAdminDetail.model_validate(quiz))


@router.put("/quizzes/{quiz_id}", response_model=AdminQuizResponse)
async def update_quiz(
    quiz_id: str,
    payload: QuizUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Update quiz"""
    quiz = await AdminService.update_quiz(db, quiz_id, payload, current_user)
    return AdminQuizResponse(message="Quiz updated", quiz=QuizAdminDetail.model_validate(quiz))


@router.delete("/quizzes/{quiz_id}", response_model=Envelope)
async def delete_quiz(
    quiz_id: str,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Hard delete quiz"""
    await AdminService.delete_quiz(db, quiz_id, current_user)
    return Envelope(message="Quiz deleted")


@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """Change a user's role"""
    user = UserService.update_role(db, user_id, payload.role, current_user)
    return UserResponse(message="Role updated", user=UserPublic.from_user(user))
