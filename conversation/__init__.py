from __future__ import annotations  # Voice conversation package exports

from .engine import SessionClosed, SessionNotFound, TranscriptSink, TurnConflict, VoiceInterviewEngine
from .models import TranscriptMessage, TurnResult, VoiceInterviewSession
from .session_store import InMemorySessionStore, SessionStore
from .templates import AI_RESPONSES, greeting_for

__all__ = [
    "AI_RESPONSES",
    "InMemorySessionStore",
    "SessionClosed",
    "SessionNotFound",
    "SessionStore",
    "TranscriptMessage",
    "TranscriptSink",
    "TurnConflict",
    "TurnResult",
    "VoiceInterviewEngine",
    "VoiceInterviewSession",
    "greeting_for",
]
