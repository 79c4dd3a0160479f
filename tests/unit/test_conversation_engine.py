from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from config.questions import INTERVIEW_QUESTIONS
from conftest import T0
from conversation import (
    AI_RESPONSES,
    InMemorySessionStore,
    SessionClosed,
    SessionNotFound,
    TurnConflict,
    VoiceInterviewEngine,
    VoiceInterviewSession,
)


class RecordingSink:
    def __init__(self):
        self.saved = []

    def save(self, session):
        self.saved.append(session)


class BrokenSink:
    def save(self, session):
        raise OSError("disk full")


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def engine(transcript_store, sessions):
    return VoiceInterviewEngine(transcript_store, sessions=sessions, clock=lambda: T0)


def test_start_session_greets_candidate(engine):
    session = engine.start_session("INT-1", "Ada", "Backend Engineer")

    assert session.is_active is True
    assert session.current_question_index == 0
    assert len(session.messages) == 1
    greeting = session.messages[0]
    assert greeting.role == "ai"
    assert "Hello Ada" in greeting.text
    assert greeting.timestamp == T0
    assert engine.get_current_question(session.session_id) == INTERVIEW_QUESTIONS[0]


def test_session_ids_are_unique(engine):
    first = engine.start_session("INT-1", "Ada", "Engineer")
    second = engine.start_session("INT-1", "Ada", "Engineer")

    assert first.session_id != second.session_id


def test_full_interview_ends_on_last_answer(engine, transcript_store):
    session = engine.start_session("INT-1", "Ada", "Engineer")
    results = [engine.process_turn(session.session_id, f"Answer {n}") for n in range(8)]

    assert [r.session_ended for r in results] == [False] * 7 + [True]
    assert [r.next_question for r in results[:7]] == list(INTERVIEW_QUESTIONS[1:])
    assert results[-1].next_question == ""
    assert results[-1].ai_response == AI_RESPONSES["closing"]
    assert all(r.ai_response == AI_RESPONSES["acknowledgment"] for r in results[:7])

    messages = engine.get_messages(session.session_id)
    assert len(messages) == 17
    assert [m.role for m in messages[1:]] == ["candidate", "ai"] * 8
    assert messages[1].text == "Answer 0"
    live = engine.get_session(session.session_id)
    assert live.current_question_index == 7
    assert live.is_active is False

    record = transcript_store.load("INT-1", session.session_id)
    assert record is not None
    assert len(record.messages) == 17
    assert record.questions_answered == 8
    assert record.total_questions == 8


def test_transcript_is_saved_after_every_turn(engine, transcript_store):
    session = engine.start_session("INT-1", "Ada", "Engineer")
    assert transcript_store.load("INT-1", session.session_id) is None

    engine.process_turn(session.session_id, "First answer")

    record = transcript_store.load("INT-1", session.session_id)
    assert len(record.messages) == 3
    assert record.questions_answered == 2


def test_unknown_session_turn_creates_nothing(engine, sessions):
    with pytest.raises(SessionNotFound):
        engine.process_turn("missing", "hello")

    assert len(sessions) == 0
    assert engine.get_session("missing") is None


def test_unknown_session_reads(engine):
    with pytest.raises(SessionNotFound):
        engine.get_current_question("missing")
    assert engine.get_messages("missing") == []
    engine.end_session("missing")


def test_current_question_out_of_range_is_empty(engine, sessions):
    sessions.put(
        VoiceInterviewSession(
            interview_id="INT-1",
            session_id="s-far",
            candidate_name="Ada",
            role="Engineer",
            started_at=T0,
            current_question_index=42,
        )
    )

    assert engine.get_current_question("s-far") == ""


def test_blank_answer_reprompts_without_advancing(engine):
    session = engine.start_session("INT-1", "Ada", "Engineer")

    result = engine.process_turn(session.session_id, "   ")

    assert result.ai_response == AI_RESPONSES["reprompt"]
    assert result.next_question == INTERVIEW_QUESTIONS[0]
    assert result.session_ended is False
    messages = engine.get_messages(session.session_id)
    assert [m.role for m in messages] == ["ai", "ai"]
    assert engine.get_session(session.session_id).current_question_index == 0


def test_candidate_duration_is_recorded(engine):
    session = engine.start_session("INT-1", "Ada", "Engineer")

    engine.process_turn(session.session_id, "Spoken answer", duration=12.5)

    candidate = engine.get_messages(session.session_id)[1]
    assert candidate.role == "candidate"
    assert candidate.duration == 12.5


def test_end_session_is_idempotent_and_persists(engine, transcript_store):
    session = engine.start_session("INT-1", "Ada", "Engineer")

    engine.end_session(session.session_id)
    engine.end_session(session.session_id)

    assert engine.get_session(session.session_id).is_active is False
    record = transcript_store.load("INT-1", session.session_id)
    assert record is not None
    assert record.questions_answered == 1
    with pytest.raises(SessionClosed):
        engine.process_turn(session.session_id, "late answer")


def test_turn_after_completion_is_rejected(engine):
    session = engine.start_session("INT-1", "Ada", "Engineer")
    for n in range(8):
        engine.process_turn(session.session_id, f"Answer {n}")

    with pytest.raises(SessionClosed):
        engine.process_turn(session.session_id, "one more")
    assert len(engine.get_messages(session.session_id)) == 17


def test_stale_turn_is_rejected(engine):
    session = engine.start_session("INT-1", "Ada", "Engineer")
    engine.process_turn(session.session_id, "Answer", expected_question_index=0)

    with pytest.raises(TurnConflict):
        engine.process_turn(session.session_id, "Answer", expected_question_index=0)

    assert engine.get_session(session.session_id).current_question_index == 1
    assert len(engine.get_messages(session.session_id)) == 3


def test_duplicate_submits_race_to_one_winner(engine):
    session = engine.start_session("INT-1", "Ada", "Engineer")
    barrier = threading.Barrier(4)
    outcomes = []

    def submit():
        barrier.wait()
        try:
            engine.process_turn(session.session_id, "Same answer", expected_question_index=0)
            outcomes.append("ok")
        except TurnConflict:
            outcomes.append("conflict")

    threads = [threading.Thread(target=submit) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(outcomes) == ["conflict", "conflict", "conflict", "ok"]
    assert len(engine.get_messages(session.session_id)) == 3


def test_persistence_failure_does_not_break_turn(sessions, caplog):
    engine = VoiceInterviewEngine(BrokenSink(), sessions=sessions, clock=lambda: T0)
    session = engine.start_session("INT-1", "Ada", "Engineer")

    result = engine.process_turn(session.session_id, "Answer")

    assert result.next_question == INTERVIEW_QUESTIONS[1]
    assert "Transcript persistence failed" in caplog.text


def test_persisted_snapshot_is_detached_from_live_session(sessions):
    sink = RecordingSink()
    engine = VoiceInterviewEngine(sink, sessions=sessions, clock=lambda: T0)
    session = engine.start_session("INT-1", "Ada", "Engineer")

    engine.process_turn(session.session_id, "First")
    engine.process_turn(session.session_id, "Second")

    assert [len(s.messages) for s in sink.saved] == [3, 5]
    assert sink.saved[0].current_question_index == 1


def test_background_writes_reach_the_store(transcript_store, sessions):
    executor = ThreadPoolExecutor(max_workers=1)
    engine = VoiceInterviewEngine(transcript_store, sessions=sessions, executor=executor, clock=lambda: T0)
    session = engine.start_session("INT-1", "Ada", "Engineer")

    for n in range(3):
        engine.process_turn(session.session_id, f"Answer {n}")
    executor.shutdown(wait=True)

    record = transcript_store.load("INT-1", session.session_id)
    assert len(record.messages) == 7


def test_custom_question_list(transcript_store, sessions):
    engine = VoiceInterviewEngine(
        transcript_store,
        sessions=sessions,
        questions=["Only question?"],
        clock=lambda: T0 + timedelta(minutes=1),
    )
    session = engine.start_session("INT-1", "Ada", "Engineer")

    result = engine.process_turn(session.session_id, "My only answer")

    assert result.session_ended is True
    assert engine.get_questions() == ["Only question?"]


def test_empty_question_list_is_rejected(transcript_store):
    with pytest.raises(ValueError):
        VoiceInterviewEngine(transcript_store, questions=[])


def test_blank_answer_is_persisted(sessions):
    sink = RecordingSink()
    engine = VoiceInterviewEngine(sink, sessions=sessions, clock=lambda: T0)
    session = engine.start_session("INT-1", "Ada", "Engineer")

    engine.process_turn(session.session_id, "")

    assert len(sink.saved) == 1
    assert [m.text for m in sink.saved[0].messages][-1] == AI_RESPONSES["reprompt"]
    assert sink.saved[0].current_question_index == 0
