"""Configuration package for the interview access service."""
from .questions import INTERVIEW_QUESTIONS, last_question_index
from .settings import Settings, settings

__all__ = [
    "INTERVIEW_QUESTIONS",
    "last_question_index",
    "Settings",
    "settings",
]
