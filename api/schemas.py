"""Pydantic schemas for the interview access and voice interview API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from conversation.models import TranscriptMessage
from interviews.models import as_utc

PASSWORD_MASK = "********"


class LoginReq(BaseModel):
    interview_id: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginRejection(BaseModel):
    message: str
    type: Literal["not_found", "bad_credentials", "not_started", "expired"]
    scheduled_time: Optional[datetime] = None


class CreateInterviewReq(BaseModel):
    candidate_name: str = Field(min_length=1)
    candidate_email: Optional[str] = None
    role: str = Field(min_length=1)
    start_time: datetime
    end_time: datetime
    duration_minutes: Optional[int] = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _window_is_ordered(self) -> "CreateInterviewReq":
        if as_utc(self.end_time) <= as_utc(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class UpdateInterviewReq(BaseModel):
    is_used: Optional[Literal[True]] = None
    current_question_index: Optional[Union[int, str]] = None


class InterviewView(BaseModel):
    id: str
    candidate_name: str
    candidate_email: Optional[str] = None
    role: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int
    is_used: bool
    is_started: bool
    session_started_at: Optional[datetime] = None
    session_deadline: Optional[datetime] = None
    current_question_index: int


class InterviewListItem(InterviewView):
    password: str = PASSWORD_MASK


class InterviewPublic(BaseModel):
    id: str
    candidate_name: str
    role: str
    start_time: datetime
    end_time: datetime
    is_used: bool


class InterviewCredentials(BaseModel):
    id: str
    password: str


class StartVoiceReq(BaseModel):
    interview_id: str = Field(min_length=1)
    candidate_name: str = Field(min_length=1)
    role: str = Field(min_length=1)


class StartVoiceResp(BaseModel):
    session_id: str
    greeting: str
    questions: List[str]
    current_question: str


class TurnReq(BaseModel):
    session_id: str
    candidate_text: str
    duration: Optional[float] = Field(default=None, ge=0)
    expected_question_index: Optional[int] = Field(default=None, ge=0)


class TurnResp(BaseModel):
    ai_response: str
    next_question: str
    session_ended: bool
    messages: List[TranscriptMessage] = Field(default_factory=list)


class ConversationState(BaseModel):
    question: str
    messages: List[TranscriptMessage] = Field(default_factory=list)
    question_index: int
    total_questions: int
    is_active: bool


class Ack(BaseModel):
    status: Literal["ok"] = "ok"
