"""Login gating and progress sync for scheduled interviews.

An interview record moves through a small set of access states that are
derived from its stored fields rather than stored themselves:

* ``scheduled`` - the window has not opened yet.
* ``active_unstarted`` - inside the window, nobody has logged in.
* ``active_started`` - logged in before and the session deadline is ahead.
* ``lapsed_window`` - the window closed without a login.
* ``session_expired`` - logged in before and the session deadline passed.
* ``used`` - terminal; the interview can never be entered again.

The session deadline is fixed by the first successful login as
``min(now + duration, end_time)`` and only ever read afterwards.
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Literal, Optional, Sequence, Union

from pydantic import BaseModel

from config.questions import INTERVIEW_QUESTIONS
from interviews.models import Interview, as_utc
from interviews.store import InterviewNotFound, InterviewStore
from observability import log_event

from .credentials import CredentialVerifier, PlainTextVerifier

RejectionKind = Literal["not_found", "bad_credentials", "not_started", "expired"]


class AccessState(str, Enum):
    SCHEDULED = "scheduled"
    ACTIVE_UNSTARTED = "active_unstarted"
    ACTIVE_STARTED = "active_started"
    LAPSED_WINDOW = "lapsed_window"
    SESSION_EXPIRED = "session_expired"
    USED = "used"


class AccessDenied(Exception):
    """Login rejected; ``kind`` tells the caller which screen to show."""

    def __init__(self, kind: RejectionKind, message: str, *, scheduled_time: Optional[datetime] = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.scheduled_time = scheduled_time


class InterviewSession(BaseModel):
    """Session handed to the candidate after a successful login."""

    id: str
    candidate_name: str
    role: str
    start_time: datetime
    end_time: datetime  # the session deadline, not the scheduled window end
    remaining_seconds: int
    current_question_index: int


def derive_state(interview: Interview, now: datetime) -> AccessState:
    """Classify ``interview`` at ``now`` using the login precedence order."""

    if interview.is_used:
        return AccessState.USED
    if interview.is_started and interview.session_deadline is not None:
        if now > interview.session_deadline:
            return AccessState.SESSION_EXPIRED
        return AccessState.ACTIVE_STARTED
    if now < interview.start_time:
        return AccessState.SCHEDULED
    if now > interview.end_time:
        return AccessState.LAPSED_WINDOW
    return AccessState.ACTIVE_UNSTARTED


def compute_deadline(interview: Interview, started_at: datetime) -> datetime:
    return min(started_at + timedelta(minutes=interview.duration_minutes), interview.end_time)


def remaining_seconds(deadline: datetime, now: datetime) -> int:
    return max(0, math.floor((deadline - now).total_seconds()))


def parse_question_index(value: Union[int, str, None]) -> Optional[int]:
    """Coerce an index given as a number or numeric string; ``None`` if unusable."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class AccessService:
    """Gate access to interview records and sync candidate progress."""

    def __init__(
        self,
        store: InterviewStore,
        *,
        verifier: Optional[CredentialVerifier] = None,
        questions: Sequence[str] = INTERVIEW_QUESTIONS,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._verifier = verifier or PlainTextVerifier()
        self._questions = questions
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _now(self, now: Optional[datetime]) -> datetime:
        return as_utc(now) if now else as_utc(self._clock())

    def _session(self, interview: Interview, deadline: datetime, now: datetime) -> InterviewSession:
        return InterviewSession(
            id=interview.id,
            candidate_name=interview.candidate_name,
            role=interview.role,
            start_time=interview.start_time,
            end_time=deadline,
            remaining_seconds=remaining_seconds(deadline, now),
            current_question_index=interview.current_question_index,
        )

    def _reject(self, interview_id: str, kind: RejectionKind, message: str, **extra) -> AccessDenied:
        log_event("login_rejected", interview_id, interview_id=interview_id, outcome=kind, reason=message)
        return AccessDenied(kind, message, **extra)

    def _expire(self, interview: Interview, message: str) -> AccessDenied:
        self._store.mark_used(interview.id)
        log_event("interview_marked_used", interview.id, interview_id=interview.id, reason=message)
        return self._reject(interview.id, "expired", message)

    def login(self, interview_id: str, password: str, now: Optional[datetime] = None) -> InterviewSession:
        """Authenticate a candidate and open or resume the interview session.

        Raises:
            AccessDenied: with ``kind`` set to ``not_found``, ``bad_credentials``,
                ``not_started`` or ``expired``.
        """

        current = self._now(now)
        interview = self._store.get(interview_id)
        if interview is None:
            raise self._reject(interview_id, "not_found", "Interview not found")
        if not self._verifier.verify(interview, password):
            raise self._reject(interview_id, "bad_credentials", "Invalid password")

        # A lost race on the first-login update re-reads the record once and
        # takes the re-login path with the winner's deadline.
        for _ in range(2):
            state = derive_state(interview, current)
            if state is AccessState.USED:
                raise self._reject(interview.id, "expired", "This interview has already been completed")
            if state is AccessState.SESSION_EXPIRED:
                raise self._expire(interview, "Interview session has expired")
            if state is AccessState.ACTIVE_STARTED:
                session = self._session(interview, interview.session_deadline, current)
                log_event(
                    "login_granted",
                    interview.id,
                    interview_id=interview.id,
                    outcome="resumed",
                    remaining_seconds=session.remaining_seconds,
                )
                return session
            if state is AccessState.SCHEDULED:
                raise self._reject(
                    interview.id,
                    "not_started",
                    "Interview has not started yet",
                    scheduled_time=interview.start_time,
                )
            if state is AccessState.LAPSED_WINDOW:
                raise self._expire(interview, "Interview link has expired")

            deadline = compute_deadline(interview, current)
            if self._store.mark_started(interview.id, current, deadline):
                session = self._session(interview, deadline, current)
                log_event(
                    "login_granted",
                    interview.id,
                    interview_id=interview.id,
                    outcome="started",
                    remaining_seconds=session.remaining_seconds,
                )
                return session

            refreshed = self._store.get(interview.id)
            if refreshed is None:
                raise self._reject(interview_id, "not_found", "Interview not found")
            interview = refreshed

        raise RuntimeError(f"Interview {interview_id} changed state during login")

    def update_progress(
        self,
        interview_id: str,
        *,
        is_used: Optional[bool] = None,
        current_question_index: Union[int, str, None] = None,
    ) -> Interview:
        """Apply a progress sync from the candidate client.

        ``is_used`` only ever moves to ``True``. ``current_question_index`` is
        stored when it parses to a position inside the question list and is
        dropped otherwise; accepted values overwrite whatever was stored.

        Raises:
            InterviewNotFound: if ``interview_id`` is unknown.
        """

        if self._store.get(interview_id) is None:
            raise InterviewNotFound(interview_id)

        if is_used is True:
            self._store.mark_used(interview_id)
            log_event("interview_marked_used", interview_id, interview_id=interview_id, reason="client_sync")

        if current_question_index is not None:
            index = parse_question_index(current_question_index)
            if index is not None and 0 <= index <= len(self._questions) - 1:
                self._store.set_question_index(interview_id, index)
                log_event("progress_updated", interview_id, interview_id=interview_id, question_index=index)
            else:
                log_event(
                    "progress_dropped",
                    interview_id,
                    interview_id=interview_id,
                    reason=f"invalid question index {current_question_index!r}",
                )

        return self._store.require(interview_id)


__all__ = [
    "AccessDenied",
    "AccessService",
    "AccessState",
    "InterviewSession",
    "RejectionKind",
    "compute_deadline",
    "derive_state",
    "parse_question_index",
    "remaining_seconds",
]
