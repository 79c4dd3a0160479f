from __future__ import annotations  # Durable transcript record

from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from conversation.models import TranscriptMessage


class TranscriptRecord(BaseModel):  # Snapshot of one voice session as written to disk
    interview_id: str
    session_id: str
    candidate_name: str
    role: str
    started_at: datetime
    completed_at: datetime
    messages: List[TranscriptMessage] = Field(default_factory=list)
    total_questions: int
    questions_answered: int


__all__ = ["TranscriptRecord"]
