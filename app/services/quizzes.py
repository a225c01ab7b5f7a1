"""Quiz catalog service: what readers can browse"""

import logging
import math
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.cache import CATALOG_SCOPE, cache_manager, quiz_detail_key, technologies_key
from app.core.config import settings
from app.core.exceptions import NotFoundException, QuizException, ValidationException
from app.models import Quiz
from app.schemas.common import Pagination
from app.schemas.quiz import QuizPublicDetail
from app.utils.validators import escape_like, is_valid_object_id

logger = logging.getLogger(__name__)

DEFAULT_SORT = "createdAt"
SORT_ORDERS = {
    "createdAt": (Quiz.created_at.desc(),),
    "title": (Quiz.title.asc(), Quiz.created_at.desc()),
    "technology": (Quiz.technology.desc(), Quiz.created_at.desc()),
}


def technology_filter(query, tech: Optional[str]):
    """Case-insensitive literal substring match on the technology tag"""
    if tech and tech.strip():
        pattern = f"%{escape_like(tech.strip())}%"
        query = query.filter(Quiz.technology.ilike(pattern, escape="\\"))
    return query


def build_pagination(page: int, limit: int, total_count: int) -> Pagination:
    total_pages = math.ceil(total_count / limit) if total_count else 0
    return Pagination(
        current_page=page,
        total_pages=total_pages,
        total_count=total_count,
        has_next_page=page < total_pages,
        has_prev_page=page > 1,
        limit=limit,
    )


class QuizService:
    @staticmethod
    def list_published(
        db: Session,
        tech: Optional[str] = None,
        page: int = 1,
        limit: int = settings.CATALOG_DEFAULT_PAGE_SIZE,
        sort: str = DEFAULT_SORT,
    ) -> Tuple[List[Quiz], Pagination]:
        """
        Page through published quizzes

        ``limit`` is clamped to [1, CATALOG_MAX_PAGE_SIZE]; an unknown ``sort``
        falls back to newest first.

        Raises:
            ValidationException: page < 1
        """
        if page < 1:
            raise ValidationException("Invalid pagination parameters. Page must be >= 1")
        limit = max(1, min(limit, settings.CATALOG_MAX_PAGE_SIZE))
        order_by = SORT_ORDERS.get(sort, SORT_ORDERS[DEFAULT_SORT])

        query = technology_filter(db.query(Quiz).filter(Quiz.is_published.is_(True)), tech)
        total_count = query.count()
        offset = (page - 1) * limit
        if offset >= total_count:
            # Past the last page; the offset may not even fit a database integer
            return [], build_pagination(page, limit, total_count)

        quizzes = query.order_by(*order_by, Quiz.id).offset(offset).limit(limit).all()
        return quizzes, build_pagination(page, limit, total_count)

    @staticmethod
    async def get_published_detail(db: Session, quiz_id: str) -> dict:
        """
        Published quiz with its questions, answer keys removed

        Returns a JSON-ready dict (camelCase), which is also what gets cached.

        Raises:
            ValidationException: malformed id
            NotFoundException: absent or unpublished
            QuizException: published but has no questions
        """
        if not is_valid_object_id(quiz_id):
            raise ValidationException("Invalid quiz ID format")

        version = await cache_manager.get_version(quiz_id)
        if version is not None:
            cached = await cache_manager.get(quiz_detail_key(quiz_id, version))
            if cached is not None:
                return cached

        quiz = db.get(Quiz, quiz_id)
        if quiz is None or not quiz.is_published:
            raise NotFoundException("Quiz")

        if not quiz.questions:
            raise QuizException(
                "This quiz has no questions available", error_code="QUIZ_HAS_NO_QUESTIONS"
            )

        detail = QuizPublicDetail.model_validate(quiz).model_dump(mode="json", by_alias=True)
        if version is not None:
            await cache_manager.set(quiz_detail_key(quiz_id, version), detail)
        return detail

    @staticmethod
    async def list_technologies(db: Session) -> List[str]:
        """Distinct technology tags among published quizzes"""
        version = await cache_manager.get_version(CATALOG_SCOPE)
        if version is not None:
            cached = await cache_manager.get(technologies_key(version))
            if cached is not None:
                return cached

        rows = (
            db.query(Quiz.technology)
            .filter(Quiz.is_published.is_(True))
            .distinct()
            .order_by(Quiz.technology)
            .all()
        )
        technologies = [row[0] for row in rows]
        if version is not None:
            await cache_manager.set(technologies_key(version), technologies)
        return technologies
