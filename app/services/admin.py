"""Admin quiz management service"""

import logging
from typing import List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.cache import cache_manager
from app.core.exceptions import DatabaseException, NotFoundException, ValidationException
from app.core.logging import LoggerFactory
from app.models import Question, Quiz, User
from app.schemas.quiz import QuestionIn, QuizCreate, QuizUpdate
from app.services.quizzes import technology_filter
from app.utils.validators import is_valid_object_id

logger = logging.getLogger(__name__)
audit_logger = LoggerFactory.get_audit_logger()

MIN_OPTIONS = 2


def _require_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationException(f"{field} is required")
    return value


def validate_questions(questions: Sequence[QuestionIn]) -> None:
    """
    Reject a question list that breaks the answer-key invariant

    Every question needs text, at least two options, and a correctIndex that
    points at one of them. Nothing is clamped or repaired.
    """
    for number, question in enumerate(questions, start=1):
        if not question.text.strip():
            raise ValidationException(f"Question {number}: text is required")
        if len(question.options) < MIN_OPTIONS:
            raise ValidationException(
                f"Question {number}: at least {MIN_OPTIONS} options are required"
            )
        if not 0 <= question.correct_index < len(question.options):
            raise ValidationException(
                f"Question {number}: correctIndex {question.correct_index} is out of range "
                f"for {len(question.options)} options",
                details={"question": number - 1, "correctIndex": question.correct_index},
            )


def _build_questions(questions: Sequence[QuestionIn]) -> List[Question]:
    return [
        Question(
            position=position,
            text=q.text.strip(),
            options=list(q.options),
            correct_index=q.correct_index,
        )
        for position, q in enumerate(questions)
    ]


class AdminService:
    @staticmethod
    def _get_quiz(db: Session, quiz_id: str) -> Quiz:
        if not is_valid_object_id(quiz_id):
            raise ValidationException("Invalid quiz ID format")
        quiz = db.get(Quiz, quiz_id)
        if quiz is None:
            raise NotFoundException("Quiz")
        return quiz

    @staticmethod
    def _commit(db: Session, action: str) -> None:
        try:
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to {action}: {e}")
            raise DatabaseException(f"Could not {action}")

    @staticmethod
    def list_quizzes(db: Session, tech: Optional[str] = None) -> List[Quiz]:
        """Every quiz, drafts included, newest first"""
        query = technology_filter(db.query(Quiz), tech)
        return query.order_by(Quiz.created_at.desc(), Quiz.id).all()

    @staticmethod
    def get_quiz(db: Session, quiz_id: str) -> Quiz:
        """Single quiz regardless of publish state, answer keys included"""
        return AdminService._get_quiz(db, quiz_id)

    @staticmethod
    async def create_quiz(db: Session, payload: QuizCreate, admin: User) -> Quiz:
        title = _require_text(payload.title, "Title")
        technology = _require_text(payload.technology, "Technology")
        validate_questions(payload.questions)

        quiz = Quiz(
            title=title,
            technology=technology,
            is_published=payload.is_published,
            created_by=admin.id,
            questions=_build_questions(payload.questions),
        )
        db.add(quiz)
        AdminService._commit(db, "create quiz")

        await cache_manager.invalidate_quiz(quiz.id)
        audit_logger.info(
            "Quiz created",
            extra={"quiz_id": quiz.id, "admin_id": admin.id, "published": quiz.is_published},
        )
        return quiz

    @staticmethod
    async def update_quiz(db: Session, quiz_id: str, payload: QuizUpdate, admin: User) -> Quiz:
        quiz = AdminService._get_quiz(db, quiz_id)

        # Validate everything before touching the row
        title = _require_text(payload.title, "Title") if payload.title is not None else None
        technology = (
            _require_text(payload.technology, "Technology")
            if payload.technology is not None
            else None
        )
        if payload.questions is not None:
            validate_questions(payload.questions)

        if title is not None:
            quiz.title = title
        if technology is not None:
            quiz.technology = technology
        if payload.is_published is not None:
            quiz.is_published = payload.is_published
        if payload.questions is not None:
            quiz.questions = _build_questions(payload.questions)

        AdminService._commit(db, "update quiz")
        db.refresh(quiz)

        await cache_manager.invalidate_quiz(quiz.id)
        audit_logger.info(
            "Quiz updated",
            extra={
                "quiz_id": quiz.id,
                "admin_id": admin.id,
                "fields": sorted(payload.model_dump(exclude_unset=True)),
            },
        )
        return quiz

    @staticmethod
    async def delete_quiz(db: Session, quiz_id: str, admin: User) -> None:
        """Hard delete; attempts that reference the quiz are left in place"""
        quiz = AdminService._get_quiz(db, quiz_id)
        db.delete(quiz)
        AdminService._commit(db, "delete quiz")

        await cache_manager.invalidate_quiz(quiz_id)
        audit_logger.info("Quiz deleted", extra={"quiz_id": quiz_id, "admin_id": admin.id})
