"""
Python client for the TechQuiz API

The session is an explicit object handed to the client; nothing reads
credentials from ambient global state.
"""

from app.client.api import ApiError, QuizApiClient, answers_from_selection
from app.client.session import ClientSession

__all__ = ["ApiError", "ClientSession", "QuizApiClient", "answers_from_selection"]
