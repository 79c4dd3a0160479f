from __future__ import annotations  # Interview record package exports

from .models import Interview, as_utc
from .seed import demo_interviews, seed_demo_data
from .store import InterviewNotFound, InterviewStore, generate_interview_id, generate_password

__all__ = [
    "Interview",
    "InterviewNotFound",
    "InterviewStore",
    "as_utc",
    "demo_interviews",
    "generate_interview_id",
    "generate_password",
    "seed_demo_data",
]
