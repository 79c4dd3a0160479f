"""Interview question list shared by the access and conversation layers."""
from __future__ import annotations

from typing import Tuple

INTERVIEW_QUESTIONS: Tuple[str, ...] = (
    "Tell me about yourself.",
    "Why do you want this job?",
    "What are your greatest strengths?",
    "Describe a challenge you overcame.",
    "Where do you see yourself in 5 years?",
    "Why should we hire you?",
    "Tell me about a time you worked in a team.",
    "How do you handle stress and pressure?",
)


def last_question_index(questions: Tuple[str, ...] = INTERVIEW_QUESTIONS) -> int:
    """Highest valid cursor position for ``questions``."""

    return len(questions) - 1


__all__ = ["INTERVIEW_QUESTIONS", "last_question_index"]
