"""
Endpoints scoped to the calling user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.attempt import AttemptHistoryItem, AttemptHistoryResponse, AttemptQuizRef
from app.services.attempts import AttemptService

router = APIRouter()


@router.get("/attempts", response_model=AttemptHistoryResponse)
async def my_attempts(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Caller's attempt history, newest first"""
    rows = AttemptService.list_user_attempts(db, current_user.id)
    attempts = [
        AttemptHistoryItem(
            id=attempt.id,
            quiz_id=attempt.quiz_id,
            quiz=AttemptQuizRef.model_validate(quiz) if quiz is not None else None,
            answers=attempt.answers,
            score=attempt.score,
            correct_count=attempt.correct_count,
            total=attempt.total,
            created_at=attempt.created_at,
        )
        for attempt, quiz in rows
    ]
    return AttemptHistoryResponse(attempts=attempts, count=len(attempts))
