"""Attempt schemas"""

from datetime import datetime
from typing import Any, List, Optional

from app.schemas.common import CamelModel, Envelope


class AttemptSubmission(CamelModel):
    """
    Raw answer sheet

    ``answers`` stays untyped: malformed elements are dropped one by one by
    the scoring engine instead of failing the whole request.
    """
    answers: Any = None


class AttemptResult(Envelope):
    score: int
    correct: int
    total: int
    attempt_id: str
    performance_message: str
    percentage: int


class AnswerOut(CamelModel):
    question_index: int
    selected_index: int


class AttemptQuizRef(CamelModel):
    id: str
    title: str
    technology: str


class AttemptHistoryItem(CamelModel):
    id: str
    quiz_id: str
    quiz: Optional[AttemptQuizRef] = None
    answers: List[AnswerOut]
    score: int
    correct_count: int
    total: int
    created_at: datetime


class AttemptHistoryResponse(Envelope):
    attempts: List[AttemptHistoryItem]
    count: int
