"""
Quiz models for TechQuiz
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, JSON, String, Text
from sqlalchemy.orm import relationship

from app.core.database import Base, generate_id, utcnow


class Quiz(Base):
    """Quiz model"""
    __tablename__ = "quizzes"

    id = Column(String(32), primary_key=True, default=generate_id)
    title = Column(String(200), nullable=False, index=True)
    technology = Column(String(100), nullable=False, index=True)

    is_published = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(32), nullable=True)  # user id, by reference only

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=True, onupdate=utcnow)

    # Relationships
    questions = relationship(
        "Question",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Question.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_quizzes_published_created", "is_published", "created_at"),
    )

    @property
    def question_count(self) -> int:
        return len(self.questions)


class Question(Base):
    """Multiple-choice question; ``position`` keeps the quiz's question order"""
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    quiz_id = Column(String(32), ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False, default=list)
    correct_index = Column(Integer, nullable=False)

    # Relationships
    quiz = relationship("Quiz", back_populates="questions")
