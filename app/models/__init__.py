"""
TechQuiz Models Package
"""

from app.models.attempt import Attempt, AttemptThrottle
from app.models.quiz import Question, Quiz
from app.models.user import User, UserRole

__all__ = [
    "User", "UserRole",
    "Quiz", "Question",
    "Attempt", "AttemptThrottle",
]
