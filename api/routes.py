"""FastAPI routes for voice interview session control."""
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from conversation import (
    SessionClosed,
    SessionNotFound,
    TranscriptMessage,
    TurnConflict,
    VoiceInterviewEngine,
)
from transcripts import TranscriptRecord, TranscriptStore, generate_transcript_pdf

from .deps import get_transcript_store, get_voice_engine
from .schemas import Ack, ConversationState, StartVoiceReq, StartVoiceResp, TurnReq, TurnResp

router = APIRouter(prefix="/api/voice-interview")


@router.post("/start", response_model=StartVoiceResp)
def start(req: StartVoiceReq, engine: VoiceInterviewEngine = Depends(get_voice_engine)) -> StartVoiceResp:
    session = engine.start_session(req.interview_id, req.candidate_name, req.role)
    return StartVoiceResp(
        session_id=session.session_id,
        greeting=session.messages[0].text,
        questions=engine.get_questions(),
        current_question=engine.get_current_question(session.session_id),
    )


@router.post("/turn", response_model=TurnResp)
def turn(req: TurnReq, engine: VoiceInterviewEngine = Depends(get_voice_engine)) -> TurnResp:
    try:
        result = engine.process_turn(
            req.session_id,
            req.candidate_text,
            duration=req.duration,
            expected_question_index=req.expected_question_index,
        )
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="session not found") from exc
    except SessionClosed as exc:
        raise HTTPException(status_code=409, detail="session already ended") from exc
    except TurnConflict as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return TurnResp(
        ai_response=result.ai_response,
        next_question=result.next_question,
        session_ended=result.session_ended,
        messages=engine.get_messages(req.session_id),
    )


@router.get("/{session_id}/state", response_model=ConversationState)
def state(session_id: str, engine: VoiceInterviewEngine = Depends(get_voice_engine)) -> ConversationState:
    session = engine.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="session not found")
    return ConversationState(
        question=engine.get_current_question(session_id),
        messages=engine.get_messages(session_id),
        question_index=session.current_question_index,
        total_questions=len(engine.get_questions()),
        is_active=session.is_active,
    )


@router.get("/{session_id}/messages", response_model=List[TranscriptMessage])
def messages(session_id: str, engine: VoiceInterviewEngine = Depends(get_voice_engine)) -> List[TranscriptMessage]:
    return engine.get_messages(session_id)


@router.post("/{session_id}/end", response_model=Ack)
def end(session_id: str, engine: VoiceInterviewEngine = Depends(get_voice_engine)) -> Ack:
    engine.end_session(session_id)
    return Ack()


def _load_transcript(store: TranscriptStore, interview_id: str, session_id: str) -> TranscriptRecord:
    record = store.load(interview_id, session_id)
    if record is None:
        raise HTTPException(status_code=404, detail="transcript not found")
    return record


@router.get("/transcript/{interview_id}/{session_id}", response_model=TranscriptRecord)
def transcript(
    interview_id: str,
    session_id: str,
    store: TranscriptStore = Depends(get_transcript_store),
) -> TranscriptRecord:
    return _load_transcript(store, interview_id, session_id)


@router.get("/transcript/{interview_id}/{session_id}/pdf")
def transcript_pdf(
    interview_id: str,
    session_id: str,
    store: TranscriptStore = Depends(get_transcript_store),
) -> Response:
    record = _load_transcript(store, interview_id, session_id)
    payload = generate_transcript_pdf(record)
    filename = f"{record.interview_id}-{record.session_id}-transcript.pdf"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=payload, media_type="application/pdf", headers=headers)
