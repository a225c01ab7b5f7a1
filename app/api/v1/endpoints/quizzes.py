"""
Quiz endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.attempt import AttemptResult, AttemptSubmission
from app.schemas.quiz import (
    QuizDetailResponse,
    QuizListResponse,
    QuizSummary,
    TechnologiesResponse,
)
from app.services.attempts import AttemptService
from app.services.quizzes import DEFAULT_SORT, QuizService

router = APIRouter()


@router.get("", response_model=QuizListResponse)
async def list_quizzes(
    tech: Optional[str] = None,
    page: int = Query(1),
    limit: int = Query(settings.CATALOG_DEFAULT_PAGE_SIZE),
    sort: str = Query(DEFAULT_SORT),
    db: Session = Depends(get_db),
):
    """Published quizzes with pagination, technology filter and sorting"""
    quizzes, pagination = QuizService.list_published(db, tech=tech, page=page, limit=limit, sort=sort)
    return QuizListResponse(
        quizzes=[QuizSummary.model_validate(q) for q in quizzes],
        pagination=pagination,
    )


@router.get("/technologies", response_model=TechnologiesResponse)
async def list_technologies(db: Session = Depends(get_db)):
    """Distinct technology tags of published quizzes"""
    return TechnologiesResponse(technologies=await QuizService.list_technologies(db))


@router.get("/{quiz_id}", response_model=QuizDetailResponse)
async def get_quiz(quiz_id: str, db: Session = Depends(get_db)):
    """Published quiz detail without answer keys"""
    detail = await QuizService.get_published_detail(db, quiz_id)
    return QuizDetailResponse(quiz=detail, question_count=len(detail["questions"]))


@router.post(
    "/{quiz_id}/attempt",
    response_model=AttemptResult,
    status_code=status.HTTP_201_CREATED,
)
async def submit_attempt(
    quiz_id: str,
    submission: AttemptSubmission,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score an answer sheet and record the attempt"""
    outcome = AttemptService.submit_attempt(db, quiz_id, current_user, submission.answers)
    return AttemptResult(
        score=outcome.score,
        correct=outcome.correct,
        total=outcome.total,
        attempt_id=outcome.attempt_id,
        performance_message=outcome.performance_message,
        percentage=outcome.score,
    )
