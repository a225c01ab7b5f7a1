"""
Attempt models for TechQuiz

Attempts are an append-only log: quiz and user are referenced by id only,
so deleting a quiz leaves its attempts in place.
"""

from sqlalchemy import Column, DateTime, Index, Integer, JSON, String, event

from app.core.database import Base, generate_id, utcnow


class Attempt(Base):
    """One scored submission of answers against a quiz"""
    __tablename__ = "attempts"

    id = Column(String(32), primary_key=True, default=generate_id)
    user_id = Column(String(32), nullable=False)
    quiz_id = Column(String(32), nullable=False)

    answers = Column(JSON, nullable=False, default=list)  # [{"questionIndex": i, "selectedIndex": j}]
    score = Column(Integer, nullable=False)
    correct_count = Column(Integer, nullable=False)
    total = Column(Integer, nullable=False)

    created_at = Column(DateTime, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_attempts_user_created", "user_id", "created_at"),
        Index("ix_attempts_user_quiz", "user_id", "quiz_id"),
    )


class AttemptThrottle(Base):
    """
    Last accepted attempt time per (user, quiz)

    The composite primary key makes the store serialize competing claims
    for the same pair.
    """
    __tablename__ = "attempt_throttles"

    user_id = Column(String(32), primary_key=True)
    quiz_id = Column(String(32), primary_key=True)
    last_attempt_at = Column(DateTime, nullable=False)


class ImmutableAttemptError(RuntimeError):
    """Raised when code tries to modify or remove a stored attempt"""


@event.listens_for(Attempt, "before_update")
def _reject_attempt_update(mapper, connection, target):
    raise ImmutableAttemptError(f"Attempt {target.id} is immutable")


@event.listens_for(Attempt, "before_delete")
def _reject_attempt_delete(mapper, connection, target):
    raise ImmutableAttemptError(f"Attempt {target.id} cannot be deleted")
