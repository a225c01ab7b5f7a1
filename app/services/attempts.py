"""
Attempt service

Turns a raw answer submission into a scored, stored attempt.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, List, Optional, Tuple

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import utcnow
from app.core.exceptions import (
    AuthorizationException,
    DatabaseException,
    NotFoundException,
    QuizException,
    RateLimitException,
    ValidationException,
)
from app.core.logging import LoggerFactory
from app.models import Attempt, AttemptThrottle, Quiz, User
from app.services import scoring
from app.utils.validators import is_valid_object_id

logger = logging.getLogger(__name__)
audit_logger = LoggerFactory.get_audit_logger()


@dataclass(frozen=True)
class AttemptOutcome:
    attempt_id: str
    score: int
    correct: int
    total: int
    performance_message: str


class AttemptService:
    @staticmethod
    def submit_attempt(
        db: Session,
        quiz_id: str,
        user: User,
        raw_answers: Any,
        now: Optional[datetime] = None,
    ) -> AttemptOutcome:
        """
        Validate, score and store one attempt

        Checks run in a fixed order and each one rejects the whole
        submission: id shape, quiz exists, quiz published, quiz has
        questions, answers usable, throttle window clear.

        Raises:
            ValidationException: bad id shape, non-array answers, or no valid answers
            NotFoundException: no such quiz
            AuthorizationException: quiz is not published
            QuizException: quiz has no questions
            RateLimitException: same user attempted this quiz inside the throttle window
            DatabaseException: the store failed; nothing was written
        """
        now = now or utcnow()

        if not is_valid_object_id(quiz_id):
            raise ValidationException("Invalid quiz ID format")

        quiz = db.get(Quiz, quiz_id)
        if quiz is None:
            raise NotFoundException("Quiz")

        if not quiz.is_published:
            raise AuthorizationException("This quiz is not available for attempts")

        questions = list(quiz.questions)
        if not questions:
            raise QuizException("This quiz has no questions", error_code="QUIZ_HAS_NO_QUESTIONS")

        if not isinstance(raw_answers, (list, tuple)):
            raise ValidationException("Answers must be provided as an array")

        answers = scoring.filter_valid_answers(raw_answers, [len(q.options) for q in questions])
        if not answers:
            raise ValidationException(
                "No valid answers provided",
                details={"submitted": len(raw_answers), "valid": 0},
            )

        result = scoring.compute_score([q.correct_index for q in questions], answers)

        AttemptService._claim_throttle(db, user.id, quiz.id, now)

        attempt = Attempt(
            user_id=user.id,
            quiz_id=quiz.id,
            answers=[a.to_dict() for a in answers],
            score=result.score,
            correct_count=result.correct,
            total=result.total,
            created_at=now,
        )
        try:
            db.add(attempt)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to store attempt for quiz {quiz.id}: {e}")
            raise DatabaseException("Unable to submit quiz attempt. Please try again later.")

        audit_logger.info(
            "Attempt stored",
            extra={
                "attempt_id": attempt.id,
                "user_id": user.id,
                "quiz_id": quiz.id,
                "score": result.score,
                "valid_answers": len(answers),
            },
        )

        return AttemptOutcome(
            attempt_id=attempt.id,
            score=result.score,
            correct=result.correct,
            total=result.total,
            performance_message=scoring.performance_message(result.score),
        )

    @staticmethod
    def _claim_throttle(db: Session, user_id: str, quiz_id: str, now: datetime) -> None:
        """
        Take the (user, quiz) throttle slot inside the current transaction

        The conditional UPDATE only matches a slot whose window has expired;
        a brand-new pair is INSERTed and the primary key rejects a concurrent
        twin. Either way, at most one submission per window gets through, and
        the claim commits or rolls back together with the attempt row.
        """
        cutoff = now - timedelta(seconds=settings.ATTEMPT_THROTTLE_SECONDS)
        try:
            claimed = db.execute(
                update(AttemptThrottle)
                .where(
                    AttemptThrottle.user_id == user_id,
                    AttemptThrottle.quiz_id == quiz_id,
                    AttemptThrottle.last_attempt_at <= cutoff,
                )
                .values(last_attempt_at=now)
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 1:
                return

            db.add(AttemptThrottle(user_id=user_id, quiz_id=quiz_id, last_attempt_at=now))
            db.flush()
        except IntegrityError:
            db.rollback()
            logger.info(f"Throttled attempt by {user_id} on quiz {quiz_id}")
            raise RateLimitException("Please wait before attempting this quiz again")
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Throttle check failed for quiz {quiz_id}: {e}")
            raise DatabaseException("Unable to submit quiz attempt. Please try again later.")

    @staticmethod
    def list_user_attempts(db: Session, user_id: str) -> List[Tuple[Attempt, Optional[Quiz]]]:
        """Caller's attempts, newest first, each with its quiz if it still exists"""
        return (
            db.query(Attempt, Quiz)
            .outerjoin(Quiz, Quiz.id == Attempt.quiz_id)
            .filter(Attempt.user_id == user_id)
            .order_by(Attempt.created_at.desc(), Attempt.id.desc())
            .all()
        )
