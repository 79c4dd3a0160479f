from __future__ import annotations  # Voice conversation domain models

from datetime import datetime
from typing import List, Literal, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

Speaker = Literal["ai", "candidate"]


class TranscriptMessage(BaseModel):  # One utterance; never modified after it is appended
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Speaker
    text: str
    timestamp: datetime
    duration: Optional[float] = Field(default=None, ge=0)


class VoiceInterviewSession(BaseModel):  # Live conversation state for one voice run
    interview_id: str
    session_id: str
    candidate_name: str
    role: str
    started_at: datetime
    messages: List[TranscriptMessage] = Field(default_factory=list)
    current_question_index: int = Field(default=0, ge=0)
    is_active: bool = True


class TurnResult(BaseModel):  # Outcome of one processed candidate turn
    ai_response: str
    next_question: str
    session_ended: bool


__all__ = ["Speaker", "TranscriptMessage", "TurnResult", "VoiceInterviewSession"]
