"""File-backed transcript persistence keyed by interview and session."""
from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from config.questions import INTERVIEW_QUESTIONS
from conversation.models import VoiceInterviewSession

from .models import TranscriptRecord

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")


class TranscriptStore:
    """One JSON document per ``(interview_id, session_id)``; last write wins."""

    def __init__(
        self,
        base_dir: Path,
        *,
        total_questions: int = len(INTERVIEW_QUESTIONS),
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._base_dir = Path(base_dir)
        self._total_questions = total_questions
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def _path(self, interview_id: str, session_id: str) -> Path:
        for part in (interview_id, session_id):
            if not _SAFE_KEY.fullmatch(part) or ".." in part:
                raise ValueError(f"Unsafe transcript key component: {part!r}")
        return self._base_dir / interview_id / f"{session_id}.json"

    def build_record(self, session: VoiceInterviewSession) -> TranscriptRecord:
        return TranscriptRecord(
            interview_id=session.interview_id,
            session_id=session.session_id,
            candidate_name=session.candidate_name,
            role=session.role,
            started_at=session.started_at,
            completed_at=self._clock(),
            messages=list(session.messages),
            total_questions=self._total_questions,
            questions_answered=session.current_question_index + 1,
        )

    def save(self, session: VoiceInterviewSession) -> Optional[Path]:
        """Write the session snapshot atomically; failures are logged, never raised."""

        try:
            path = self._path(session.interview_id, session.session_id)
            record = self.build_record(session)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_name(path.name + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as handle:
                handle.write(record.model_dump_json(indent=2))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
            return path
        except Exception:  # noqa: BLE001
            logger.exception(
                "Failed to save transcript for interview %s session %s",
                session.interview_id,
                session.session_id,
            )
            return None

    def load(self, interview_id: str, session_id: str) -> Optional[TranscriptRecord]:
        """Return the last saved snapshot, or ``None`` when nothing was saved."""

        try:
            path = self._path(interview_id, session_id)
        except ValueError:
            return None
        if not path.exists():
            return None
        try:
            record = TranscriptRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, ValidationError):
            logger.exception("Unreadable transcript at %s", path)
            return None
        if record.interview_id != interview_id or record.session_id != session_id:
            logger.warning("Transcript at %s belongs to %s/%s", path, record.interview_id, record.session_id)
            return None
        return record


__all__ = ["TranscriptStore"]
