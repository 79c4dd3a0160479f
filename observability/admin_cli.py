"""Lightweight CLI helpers for inspecting interview records and transcripts."""
from __future__ import annotations

import argparse
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Sequence

from config.settings import settings
from interviews import InterviewStore
from transcripts import TranscriptStore


def list_interviews(store: InterviewStore) -> None:
    for item in store.list_interviews():
        status = "used" if item.is_used else ("started" if item.is_started else "open")
        print(
            f"{item.id} {item.candidate_name} ({item.role}) "
            f"{item.start_time.isoformat()} -> {item.end_time.isoformat()} "
            f"status={status} question={item.current_question_index}"
        )


def create_interview(store: InterviewStore, candidate_name: str, role: str, hours: float) -> None:
    now = datetime.now(timezone.utc)
    interview = store.create_interview(
        candidate_name=candidate_name,
        role=role,
        start_time=now,
        end_time=now + timedelta(hours=hours),
        duration_minutes=settings.DEFAULT_DURATION_MINUTES,
    )
    print(f"id={interview.id} password={interview.password} window_ends={interview.end_time.isoformat()}")


def show_transcript(store: TranscriptStore, interview_id: str, session_id: str) -> bool:
    record = store.load(interview_id, session_id)
    if record is None:
        print(f"No transcript for {interview_id}/{session_id}")
        return False
    print(
        f"{record.candidate_name} ({record.role}) answered "
        f"{record.questions_answered}/{record.total_questions}"
    )
    for message in record.messages:
        print(f"[{message.timestamp.isoformat()}] {message.role}: {message.text}")
    return True


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--list-interviews", action="store_true", help="List scheduled interviews")
    parser.add_argument("--create", nargs=2, metavar=("NAME", "ROLE"), help="Schedule an interview starting now")
    parser.add_argument("--hours", type=float, default=2.0, help="Window length for --create")
    parser.add_argument(
        "--show-transcript",
        nargs=2,
        metavar=("INTERVIEW_ID", "SESSION_ID"),
        help="Print a saved voice transcript",
    )
    args = parser.parse_args(argv)

    exit_code = 0
    if args.create:
        create_interview(InterviewStore(Path(settings.DB_PATH)), args.create[0], args.create[1], args.hours)
    if args.list_interviews:
        list_interviews(InterviewStore(Path(settings.DB_PATH)))
    if args.show_transcript:
        found = show_transcript(TranscriptStore(Path(settings.TRANSCRIPT_DIR)), *args.show_transcript)
        exit_code = 0 if found else 1
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
