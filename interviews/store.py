from __future__ import annotations  # Interview record storage helpers

import secrets
import sqlite3
import time
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .models import Interview, as_utc

PASSWORD_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"  # No 0/O or 1/I look-alikes
PASSWORD_LENGTH = 8
_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

_COLUMNS = (
    "id, password, candidate_name, candidate_email, role, start_time, end_time, duration_minutes, "
    "is_used, is_started, session_started_at, session_deadline, current_question_index"
)


class InterviewNotFound(KeyError):  # Interview id could not be resolved
    pass


def generate_password() -> str:  # Random shared secret handed to the candidate
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(PASSWORD_LENGTH))


def _base36(number: int) -> str:
    if number == 0:
        return "0"
    digits: List[str] = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_interview_id() -> str:  # INT-<base36 millis>-<4 random chars>
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(4))
    return f"INT-{stamp}-{suffix}"


def _to_db(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return as_utc(value).isoformat(timespec="microseconds")


def _from_db(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return as_utc(datetime.fromisoformat(value))


class InterviewStore:  # SQLite-backed interview record storage
    def __init__(self, path: Path) -> None:  # Initialize store and schema
        self._path = Path(path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:  # Create SQLite connection
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_schema(self) -> None:  # Ensure interview table exists
        conn = self._connect()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS interviews (
                    id TEXT PRIMARY KEY,
                    password TEXT NOT NULL,
                    candidate_name TEXT NOT NULL,
                    candidate_email TEXT,
                    role TEXT NOT NULL,
                    start_time TEXT NOT NULL,
                    end_time TEXT NOT NULL,
                    duration_minutes INTEGER NOT NULL DEFAULT 60,
                    is_used INTEGER NOT NULL DEFAULT 0,
                    is_started INTEGER NOT NULL DEFAULT 0,
                    session_started_at TEXT,
                    session_deadline TEXT,
                    current_question_index INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            conn.commit()
        finally:
            conn.close()

    def _row_to_interview(self, row: sqlite3.Row) -> Interview:
        return Interview(
            id=row["id"],
            password=row["password"],
            candidate_name=row["candidate_name"],
            candidate_email=row["candidate_email"],
            role=row["role"],
            start_time=_from_db(row["start_time"]),
            end_time=_from_db(row["end_time"]),
            duration_minutes=row["duration_minutes"],
            is_used=bool(row["is_used"]),
            is_started=bool(row["is_started"]),
            session_started_at=_from_db(row["session_started_at"]),
            session_deadline=_from_db(row["session_deadline"]),
            current_question_index=row["current_question_index"],
        )

    def insert(self, interview: Interview) -> Interview:  # Persist a fully specified record
        conn = self._connect()
        try:
            conn.execute(
                f"INSERT INTO interviews ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    interview.id,
                    interview.password,
                    interview.candidate_name,
                    interview.candidate_email,
                    interview.role,
                    _to_db(interview.start_time),
                    _to_db(interview.end_time),
                    interview.duration_minutes,
                    int(interview.is_used),
                    int(interview.is_started),
                    _to_db(interview.session_started_at),
                    _to_db(interview.session_deadline),
                    interview.current_question_index,
                ),
            )
            conn.commit()
            return interview
        finally:
            conn.close()

    def create_interview(
        self,
        *,
        candidate_name: str,
        role: str,
        start_time: datetime,
        end_time: datetime,
        duration_minutes: int = 60,
        candidate_email: Optional[str] = None,
    ) -> Interview:  # Schedule a new interview with generated credentials
        interview = Interview(
            id=generate_interview_id(),
            password=generate_password(),
            candidate_name=candidate_name,
            candidate_email=candidate_email,
            role=role,
            start_time=start_time,
            end_time=end_time,
            duration_minutes=duration_minutes,
        )
        return self.insert(interview)

    def get(self, interview_id: str) -> Optional[Interview]:  # Fetch one record by id
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
        finally:
            conn.close()
        if row is None:
            return None
        return self._row_to_interview(row)

    def require(self, interview_id: str) -> Interview:  # Fetch one record or raise
        interview = self.get(interview_id)
        if interview is None:
            raise InterviewNotFound(interview_id)
        return interview

    def list_interviews(self) -> List[Interview]:  # List interviews, latest window first
        conn = self._connect()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews ORDER BY start_time DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        return [self._row_to_interview(row) for row in rows]

    def delete(self, interview_id: str) -> bool:  # Remove a record, reporting whether it existed
        conn = self._connect()
        try:
            cursor = conn.execute("DELETE FROM interviews WHERE id = ?", (interview_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def mark_started(self, interview_id: str, started_at: datetime, deadline: datetime) -> bool:
        """Record the first login; only succeeds while the interview is unstarted and unused."""

        conn = self._connect()
        try:
            cursor = conn.execute(
                """
                UPDATE interviews
                SET is_started = 1,
                    session_started_at = ?,
                    session_deadline = ?
                WHERE id = ? AND is_started = 0 AND is_used = 0
                """,
                (_to_db(started_at), _to_db(deadline), interview_id),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def mark_used(self, interview_id: str) -> bool:  # Set the terminal used flag; there is no way back
        conn = self._connect()
        try:
            cursor = conn.execute("UPDATE interviews SET is_used = 1 WHERE id = ?", (interview_id,))
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def set_question_index(self, interview_id: str, index: int) -> bool:  # Overwrite acknowledged progress
        if index < 0:
            raise ValueError("question index must be non-negative")
        conn = self._connect()
        try:
            cursor = conn.execute(
                "UPDATE interviews SET current_question_index = ? WHERE id = ?",
                (index, interview_id),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()


__all__ = [
    "InterviewNotFound",
    "InterviewStore",
    "PASSWORD_ALPHABET",
    "generate_interview_id",
    "generate_password",
]
