from __future__ import annotations  # Interview record domain models

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime) -> datetime:  # Normalise naive and offset timestamps to UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Interview(BaseModel):  # Scheduled, password-gated access grant
    id: str
    password: str
    candidate_name: str
    candidate_email: Optional[str] = None
    role: str
    start_time: datetime
    end_time: datetime
    duration_minutes: int = Field(default=60, ge=1)
    is_used: bool = False
    is_started: bool = False
    session_started_at: Optional[datetime] = None
    session_deadline: Optional[datetime] = None
    current_question_index: int = Field(default=0, ge=0)

    @field_validator("start_time", "end_time", "session_started_at", "session_deadline")
    @classmethod
    def _normalise_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is None:
            return None
        return as_utc(value)

    def public_view(self) -> dict:  # Fields safe to show before login
        return {
            "id": self.id,
            "candidate_name": self.candidate_name,
            "role": self.role,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "is_used": self.is_used,
        }

    def without_password(self, mask: Optional[str] = None) -> dict:  # Record dump with the secret removed or masked
        data = self.model_dump()
        if mask is None:
            data.pop("password", None)
        else:
            data["password"] = mask
        return data


__all__ = ["Interview", "as_utc"]
