# =============================================================================
# CONFTEST - shared fixtures
# =============================================================================
# Every test gets its own file-backed SQLite database; the app's get_db
# dependency is pointed at it. Settings are fixed before the app is imported.
# =============================================================================

import os

os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REDIS_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import timedelta
from itertools import count
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from app.core.database import build_engine, get_db, init_db, utcnow
from app.core.security import SecurityUtils
from app.main import app
from app.models import Question, Quiz, User, UserRole

API = "/api/v1"
PASSWORD = "secret123"

_sequence = count(1)


# =============================================================================
# DATABASE
# =============================================================================


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite file per test."""
    engine = build_engine(f"sqlite:///{tmp_path / 'techquiz-test.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    """FastAPI TestClient bound to the per-test database."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# =============================================================================
# USERS
# =============================================================================


@pytest.fixture
def make_user(db_session) -> Callable[..., User]:
    """Factory: store a user directly, bypassing signup."""

    def _make(role: UserRole = UserRole.READER, email: Optional[str] = None, username: str = "tester") -> User:
        user = User(
            username=username,
            email=email or f"user{next(_sequence)}@example.com",
            hashed_password=SecurityUtils.get_password_hash(PASSWORD),
            role=role,
        )
        db_session.add(user)
        db_session.commit()
        return user

    return _make


def auth_headers(user: User) -> Dict[str, str]:
    token = SecurityUtils.create_access_token({"sub": user.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def reader(make_user) -> User:
    return make_user(UserRole.READER, username="reader")


@pytest.fixture
def admin(make_user) -> User:
    return make_user(UserRole.ADMIN, username="admin")


@pytest.fixture
def reader_headers(reader) -> Dict[str, str]:
    return auth_headers(reader)


@pytest.fixture
def admin_headers(admin) -> Dict[str, str]:
    return auth_headers(admin)


@pytest.fixture
def new_reader_headers(make_user) -> Callable[[], Dict[str, str]]:
    """Factory: headers for a brand-new reader, so throttle state never leaks between submissions."""
    return lambda: auth_headers(make_user(UserRole.READER))


# =============================================================================
# QUIZZES
# =============================================================================

QuestionRow = Tuple[str, Sequence[str], int]


@pytest.fixture
def make_quiz(db_session) -> Callable[..., Quiz]:
    """Factory: store a quiz with ``(text, options, correct_index)`` questions."""

    def _make(
        title: str = "Quiz",
        technology: str = "Python",
        questions: Optional[List[QuestionRow]] = None,
        published: bool = True,
        age_minutes: int = 0,
    ) -> Quiz:
        if questions is None:
            questions = [("What is 1 + 1?", ["1", "2", "3"], 1)]
        quiz = Quiz(
            title=title,
            technology=technology,
            is_published=published,
            created_at=utcnow() - timedelta(minutes=age_minutes),
            questions=[
                Question(position=i, text=text, options=list(options), correct_index=correct)
                for i, (text, options, correct) in enumerate(questions)
            ],
        )
        db_session.add(quiz)
        db_session.commit()
        return quiz

    return _make


@pytest.fixture
def js_basics(make_quiz) -> Quiz:
    """Two questions, answer key [1, 0]."""
    return make_quiz(
        title="JS Basics",
        technology="JavaScript",
        questions=[
            ("Which keyword declares a block-scoped variable?", ["var", "let", "function"], 1),
            ("typeof null is?", ["object", "null", "undefined"], 0),
        ],
    )
