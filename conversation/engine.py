"""Scripted question/answer loop for voice interviews.

Every non-blank candidate utterance advances the question cursor by one,
whatever it says. The responder only picks between fixed template lines, so a
real speech or language backend can replace it without touching the cursor
rules here.
"""
from __future__ import annotations

import logging
from concurrent.futures import Executor
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol, Sequence
from uuid import uuid4

from config.questions import INTERVIEW_QUESTIONS
from observability import log_event

from .models import TranscriptMessage, TurnResult, VoiceInterviewSession
from .session_store import InMemorySessionStore, SessionStore
from .templates import AI_RESPONSES, greeting_for

logger = logging.getLogger(__name__)


class SessionNotFound(KeyError):  # Unknown voice session id
    pass


class SessionClosed(RuntimeError):  # Turn submitted after the session ended
    pass


class TurnConflict(RuntimeError):  # Turn was answered for a question that is no longer current
    pass


class TranscriptSink(Protocol):
    def save(self, session: VoiceInterviewSession) -> None: ...


class VoiceInterviewEngine:
    """Owns live voice sessions and drives their turn-taking."""

    def __init__(
        self,
        transcripts: TranscriptSink,
        *,
        sessions: Optional[SessionStore] = None,
        questions: Sequence[str] = INTERVIEW_QUESTIONS,
        executor: Optional[Executor] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        if not questions:
            raise ValueError("at least one interview question is required")
        self._transcripts = transcripts
        self._sessions = sessions if sessions is not None else InMemorySessionStore()
        self._questions = list(questions)
        self._executor = executor
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def last_index(self) -> int:
        return len(self._questions) - 1

    def get_questions(self) -> List[str]:
        return list(self._questions)

    def _require(self, session_id: str) -> VoiceInterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    def _question_at(self, index: int) -> str:
        if 0 <= index < len(self._questions):
            return self._questions[index]
        return ""

    def _persist(self, session: VoiceInterviewSession) -> None:
        # Snapshot under the caller's lock so a queued write sees a consistent session.
        snapshot = session.model_copy(deep=True)
        try:
            if self._executor is None:
                self._transcripts.save(snapshot)
            else:
                self._executor.submit(self._transcripts.save, snapshot)
        except Exception:  # noqa: BLE001
            logger.exception(
                "Transcript persistence failed for interview %s session %s",
                session.interview_id,
                session.session_id,
            )

    def start_session(self, interview_id: str, candidate_name: str, role: str) -> VoiceInterviewSession:
        now = self._clock()
        session = VoiceInterviewSession(
            interview_id=interview_id,
            session_id=str(uuid4()),
            candidate_name=candidate_name,
            role=role,
            started_at=now,
        )
        session.messages.append(TranscriptMessage(role="ai", text=greeting_for(candidate_name), timestamp=now))
        self._sessions.put(session)
        log_event("voice_session_started", session.session_id, interview_id=interview_id, question_index=0)
        return session

    def get_session(self, session_id: str) -> Optional[VoiceInterviewSession]:
        return self._sessions.get(session_id)

    def process_turn(
        self,
        session_id: str,
        candidate_text: str,
        *,
        duration: Optional[float] = None,
        expected_question_index: Optional[int] = None,
    ) -> TurnResult:
        """Record the candidate's answer and produce the interviewer's reply.

        Raises:
            SessionNotFound: ``session_id`` is unknown; nothing is created.
            SessionClosed: the session already ended.
            TurnConflict: ``expected_question_index`` no longer matches the
                cursor, which means this answer was already processed.
        """

        self._require(session_id)
        with self._sessions.lock(session_id):
            session = self._require(session_id)
            if not session.is_active:
                raise SessionClosed(session_id)
            if expected_question_index is not None and expected_question_index != session.current_question_index:
                raise TurnConflict(
                    f"turn targets question {expected_question_index}, "
                    f"session is at {session.current_question_index}"
                )

            now = self._clock()
            text = (candidate_text or "").strip()
            if not text:
                reply = AI_RESPONSES["reprompt"]
                session.messages.append(TranscriptMessage(role="ai", text=reply, timestamp=now))
                self._persist(session)
                log_event(
                    "voice_turn",
                    session_id,
                    interview_id=session.interview_id,
                    outcome="reprompt",
                    question_index=session.current_question_index,
                )
                return TurnResult(
                    ai_response=reply,
                    next_question=self._question_at(session.current_question_index),
                    session_ended=False,
                )

            session.messages.append(
                TranscriptMessage(role="candidate", text=text, timestamp=now, duration=duration)
            )

            if session.current_question_index < self.last_index:
                session.current_question_index += 1
                reply = AI_RESPONSES["acknowledgment"]
                next_question = self._question_at(session.current_question_index)
                ended = False
            else:
                session.is_active = False
                reply = AI_RESPONSES["closing"]
                next_question = ""
                ended = True

            session.messages.append(TranscriptMessage(role="ai", text=reply, timestamp=now))
            self._persist(session)

        log_event(
            "voice_turn",
            session_id,
            interview_id=session.interview_id,
            outcome="closed" if ended else "advanced",
            question_index=session.current_question_index,
            session_ended=ended,
        )
        return TurnResult(ai_response=reply, next_question=next_question, session_ended=ended)

    def get_current_question(self, session_id: str) -> str:
        session = self._require(session_id)
        return self._question_at(session.current_question_index)

    def end_session(self, session_id: str) -> None:
        """Deactivate and persist the session; unknown ids are ignored."""

        if self._sessions.get(session_id) is None:
            return
        with self._sessions.lock(session_id):
            session = self._sessions.get(session_id)
            if session is None:
                return
            session.is_active = False
            self._persist(session)
        log_event("voice_session_ended", session_id, interview_id=session.interview_id)

    def get_messages(self, session_id: str) -> List[TranscriptMessage]:
        session = self._sessions.get(session_id)
        if session is None:
            return []
        return list(session.messages)


__all__ = [
    "SessionClosed",
    "SessionNotFound",
    "TranscriptSink",
    "TurnConflict",
    "VoiceInterviewEngine",
]
