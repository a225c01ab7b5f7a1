"""
Quiz schemas for TechQuiz
"""

from datetime import datetime
from typing import List, Optional

from app.schemas.common import CamelModel, Envelope, Pagination


class QuestionIn(CamelModel):
    """Question as authored by an admin"""
    text: str
    options: List[str]
    correct_index: int


class QuizCreate(CamelModel):
    """Quiz creation schema"""
    title: str
    technology: str
    questions: List[QuestionIn] = []
    is_published: bool = False


class QuizUpdate(CamelModel):
    """Partial quiz update; a supplied question list replaces the old one"""
    title: Optional[str] = None
    technology: Optional[str] = None
    questions: Optional[List[QuestionIn]] = None
    is_published: Optional[bool] = None


class QuestionPublic(CamelModel):
    """Question without its answer key"""
    text: str
    options: List[str]


class QuestionAdmin(QuestionPublic):
    correct_index: int


class QuizSummary(CamelModel):
    """Catalog row; carries no questions"""
    id: str
    title: str
    technology: str
    is_published: bool
    question_count: int
    created_at: datetime


class QuizPublicDetail(CamelModel):
    id: str
    title: str
    technology: str
    is_published: bool
    created_at: datetime
    questions: List[QuestionPublic]


class QuizAdminDetail(CamelModel):
    id: str
    title: str
    technology: str
    is_published: bool
    created_by: Optional[str] = None
    question_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None
    questions: List[QuestionAdmin]


class QuizListResponse(Envelope):
    quizzes: List[QuizSummary]
    pagination: Pagination


class QuizDetailResponse(Envelope):
    quiz: QuizPublicDetail
    question_count: int


class TechnologiesResponse(Envelope):
    technologies: List[str]


class AdminQuizResponse(Envelope):
    quiz: QuizAdminDetail


class AdminQuizListResponse(Envelope):
    quizzes: List[QuizAdminDetail]
    count: int
