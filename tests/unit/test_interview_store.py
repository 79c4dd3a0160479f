"""Tests for the SQLite interview store and demo seeding."""
from __future__ import annotations

import re
import sqlite3
from datetime import datetime, timedelta, timezone

from conftest import T0
from interviews import InterviewStore, demo_interviews, generate_interview_id, generate_password, seed_demo_data
from interviews.store import PASSWORD_ALPHABET
from services.access import AccessState, derive_state


def test_create_generates_credentials(interview_store):
    created = interview_store.create_interview(
        candidate_name="Grace Hopper",
        role="Compiler Engineer",
        start_time=T0,
        end_time=T0 + timedelta(hours=1),
        duration_minutes=45,
        candidate_email="grace@example.com",
    )

    assert re.fullmatch(r"INT-[0-9A-Z]+-[0-9A-Z]{4}", created.id)
    assert len(created.password) == 8
    assert set(created.password) <= set(PASSWORD_ALPHABET)
    fetched = interview_store.get(created.id)
    assert fetched == created
    assert fetched.is_used is False
    assert fetched.is_started is False
    assert fetched.current_question_index == 0


def test_generated_values_vary():
    assert len({generate_password() for _ in range(20)}) > 1
    assert len({generate_interview_id() for _ in range(20)}) > 1


def test_naive_times_are_treated_as_utc(interview_store):
    created = interview_store.create_interview(
        candidate_name="Grace",
        role="Engineer",
        start_time=datetime(2026, 1, 5, 9, 0),
        end_time=datetime(2026, 1, 5, 11, 0),
    )

    assert interview_store.get(created.id).start_time == T0


def test_list_orders_latest_window_first(interview_store, scheduled):
    scheduled("INT-EARLY")
    scheduled("INT-LATE", start_time=T0 + timedelta(days=1), end_time=T0 + timedelta(days=1, hours=1))

    assert [item.id for item in interview_store.list_interviews()] == ["INT-LATE", "INT-EARLY"]


def test_delete(interview_store, scheduled):
    scheduled()

    assert interview_store.delete("INT-TEST") is True
    assert interview_store.delete("INT-TEST") is False
    assert interview_store.get("INT-TEST") is None


def test_mark_started_is_compare_and_swap(interview_store, scheduled):
    scheduled()
    first_deadline = T0 + timedelta(minutes=60)

    assert interview_store.mark_started("INT-TEST", T0, first_deadline) is True
    assert interview_store.mark_started("INT-TEST", T0 + timedelta(minutes=5), T0 + timedelta(minutes=65)) is False
    assert interview_store.get("INT-TEST").session_deadline == first_deadline


def test_mark_started_refuses_used_interview(interview_store, scheduled):
    scheduled(is_used=True)

    assert interview_store.mark_started("INT-TEST", T0, T0 + timedelta(minutes=60)) is False


def test_mark_used_and_question_index(interview_store, scheduled):
    scheduled()

    assert interview_store.mark_used("INT-TEST") is True
    assert interview_store.set_question_index("INT-TEST", 5) is True
    stored = interview_store.get("INT-TEST")
    assert stored.is_used is True
    assert stored.current_question_index == 5
    assert interview_store.mark_used("INT-NOPE") is False


def test_schema_persists_across_instances(tmp_path, scheduled):
    scheduled()

    reopened = InterviewStore(tmp_path / "interviews.db")

    assert reopened.get("INT-TEST").candidate_name == "Ada Lovelace"
    with sqlite3.connect(tmp_path / "interviews.db") as conn:
        row = conn.execute("SELECT start_time, is_used FROM interviews WHERE id = ?", ("INT-TEST",)).fetchone()
    assert row == ("2026-01-05T09:00:00.000000+00:00", 0)


def test_seed_demo_data_is_idempotent(interview_store):
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    assert len(seed_demo_data(interview_store, now=now)) == 4
    assert seed_demo_data(interview_store, now=now) == []


def test_demo_interviews_cover_access_states():
    now = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
    states = {item.id: derive_state(item, now + timedelta(seconds=1)) for item in demo_interviews(now)}

    assert states == {
        "INT-DEMO-ACTIVE": AccessState.ACTIVE_UNSTARTED,
        "INT-DEMO-FUTURE": AccessState.SCHEDULED,
        "INT-DEMO-EXPIRED": AccessState.LAPSED_WINDOW,
        "INT-DEMO-DONE": AccessState.USED,
    }
