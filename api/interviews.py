"""FastAPI routes for interview scheduling, login and progress sync."""
from __future__ import annotations

import logging
from typing import Dict, List

from fastapi import APIRouter, Depends, HTTPException, Response

from config.questions import INTERVIEW_QUESTIONS
from config.settings import settings
from interviews import Interview, InterviewNotFound, InterviewStore
from services.access import AccessDenied, AccessService, InterviewSession

from .deps import get_access_service, get_interview_store
from .schemas import (
    PASSWORD_MASK,
    CreateInterviewReq,
    InterviewCredentials,
    InterviewListItem,
    InterviewPublic,
    InterviewView,
    LoginRejection,
    LoginReq,
    UpdateInterviewReq,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

REJECTION_STATUS: Dict[str, int] = {
    "not_found": 404,
    "bad_credentials": 401,
    "not_started": 403,
    "expired": 403,
}


def _rejection(exc: AccessDenied) -> HTTPException:
    detail = LoginRejection(message=exc.message, type=exc.kind, scheduled_time=exc.scheduled_time)
    return HTTPException(
        status_code=REJECTION_STATUS[exc.kind],
        detail=detail.model_dump(mode="json", exclude_none=True),
    )


def _view(interview: Interview) -> InterviewView:
    return InterviewView(**interview.without_password())


@router.post("/auth/login", response_model=InterviewSession)
def login(req: LoginReq, access: AccessService = Depends(get_access_service)) -> InterviewSession:
    try:
        return access.login(req.interview_id, req.password)
    except AccessDenied as exc:
        raise _rejection(exc) from exc


@router.get("/interviews", response_model=List[InterviewListItem])
def list_interviews(store: InterviewStore = Depends(get_interview_store)) -> List[InterviewListItem]:
    return [InterviewListItem(**item.without_password(mask=PASSWORD_MASK)) for item in store.list_interviews()]


@router.post("/interviews", response_model=Interview, status_code=201)
def create_interview(
    payload: CreateInterviewReq,
    store: InterviewStore = Depends(get_interview_store),
) -> Interview:
    try:
        return store.create_interview(
            candidate_name=payload.candidate_name,
            candidate_email=payload.candidate_email,
            role=payload.role,
            start_time=payload.start_time,
            end_time=payload.end_time,
            duration_minutes=payload.duration_minutes or settings.DEFAULT_DURATION_MINUTES,
        )
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unable to create interview")
        raise HTTPException(status_code=500, detail="Failed to create interview") from exc


@router.get("/interviews/{interview_id}", response_model=InterviewPublic)
def get_interview(interview_id: str, store: InterviewStore = Depends(get_interview_store)) -> InterviewPublic:
    interview = store.get(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return InterviewPublic(**interview.public_view())


@router.get("/interviews/{interview_id}/credentials", response_model=InterviewCredentials)
def get_credentials(
    interview_id: str,
    store: InterviewStore = Depends(get_interview_store),
) -> InterviewCredentials:
    interview = store.get(interview_id)
    if interview is None:
        raise HTTPException(status_code=404, detail="Interview not found")
    return InterviewCredentials(id=interview.id, password=interview.password)


@router.patch("/interviews/{interview_id}", response_model=InterviewView)
def update_interview(
    interview_id: str,
    payload: UpdateInterviewReq,
    access: AccessService = Depends(get_access_service),
) -> InterviewView:
    try:
        updated = access.update_progress(
            interview_id,
            is_used=payload.is_used,
            current_question_index=payload.current_question_index,
        )
    except InterviewNotFound as exc:
        raise HTTPException(status_code=404, detail="Interview not found") from exc
    return _view(updated)


@router.delete("/interviews/{interview_id}", status_code=204)
def delete_interview(interview_id: str, store: InterviewStore = Depends(get_interview_store)) -> Response:
    if not store.delete(interview_id):
        raise HTTPException(status_code=404, detail="Interview not found")
    return Response(status_code=204)


@router.get("/questions", response_model=List[str])
def list_questions() -> List[str]:
    return list(INTERVIEW_QUESTIONS)
