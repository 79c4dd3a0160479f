"""Request-scoped accessors for the services wired in ``api_server.create_app``."""
from __future__ import annotations

from fastapi import Request

from conversation import VoiceInterviewEngine
from interviews import InterviewStore
from services.access import AccessService
from transcripts import TranscriptStore


def get_interview_store(request: Request) -> InterviewStore:
    return request.app.state.interview_store


def get_access_service(request: Request) -> AccessService:
    return request.app.state.access_service


def get_voice_engine(request: Request) -> VoiceInterviewEngine:
    return request.app.state.voice_engine


def get_transcript_store(request: Request) -> TranscriptStore:
    return request.app.state.transcript_store
