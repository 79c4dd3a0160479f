from __future__ import annotations  # Demo interview records for local runs

from datetime import datetime, timedelta, timezone
from typing import List, Optional

from config.questions import last_question_index

from .models import Interview
from .store import InterviewStore


def demo_interviews(now: Optional[datetime] = None) -> List[Interview]:  # One record per access state
    current = now or datetime.now(timezone.utc)
    yesterday = current - timedelta(days=1)
    tomorrow = current + timedelta(days=1)
    return [
        Interview(
            id="INT-DEMO-ACTIVE",
            password="DEMO1234",
            candidate_name="John Smith",
            candidate_email="john@example.com",
            role="Senior Software Engineer",
            start_time=current,
            end_time=current + timedelta(hours=2),
            duration_minutes=60,
        ),
        Interview(
            id="INT-DEMO-FUTURE",
            password="FUTURE99",
            candidate_name="Sarah Johnson",
            candidate_email="sarah@example.com",
            role="Product Manager",
            start_time=tomorrow,
            end_time=tomorrow + timedelta(hours=1),
            duration_minutes=60,
        ),
        Interview(
            id="INT-DEMO-EXPIRED",
            password="EXPIRED1",
            candidate_name="Mike Wilson",
            candidate_email="mike@example.com",
            role="UX Designer",
            start_time=yesterday - timedelta(hours=1),
            end_time=yesterday,
            duration_minutes=60,
        ),
        Interview(
            id="INT-DEMO-DONE",
            password="DONE5678",
            candidate_name="Emily Chen",
            candidate_email="emily@example.com",
            role="Data Analyst",
            start_time=yesterday - timedelta(hours=2),
            end_time=yesterday - timedelta(hours=1),
            duration_minutes=60,
            is_used=True,
            is_started=True,
            session_started_at=yesterday - timedelta(hours=2),
            session_deadline=yesterday - timedelta(hours=1),
            current_question_index=last_question_index(),
        ),
    ]


def seed_demo_data(store: InterviewStore, now: Optional[datetime] = None) -> List[str]:
    """Insert the demo interviews that are not stored yet and return their ids."""

    inserted: List[str] = []
    for interview in demo_interviews(now):
        if store.get(interview.id) is not None:
            continue
        store.insert(interview)
        inserted.append(interview.id)
    return inserted


__all__ = ["demo_interviews", "seed_demo_data"]
