import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.settings import settings
from interviews import Interview, InterviewStore
from transcripts import TranscriptStore

T0 = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def tmp_data(monkeypatch, tmp_path):
    monkeypatch.setattr(settings, "DB_PATH", str(tmp_path / "interviews.db"), raising=False)
    monkeypatch.setattr(settings, "TRANSCRIPT_DIR", str(tmp_path / "transcripts"), raising=False)
    yield tmp_path


@pytest.fixture
def interview_store(tmp_path) -> InterviewStore:
    return InterviewStore(tmp_path / "interviews.db")


@pytest.fixture
def transcript_store(tmp_path) -> TranscriptStore:
    return TranscriptStore(tmp_path / "transcripts")


@pytest.fixture
def scheduled(interview_store):
    """Insert an interview open from T0 to T0+2h with a 60 minute session."""

    def _make(interview_id: str = "INT-TEST", **overrides) -> Interview:
        fields = {
            "id": interview_id,
            "password": "SECRET42",
            "candidate_name": "Ada Lovelace",
            "role": "Backend Engineer",
            "start_time": T0,
            "end_time": T0 + timedelta(hours=2),
            "duration_minutes": 60,
        }
        fields.update(overrides)
        return interview_store.insert(Interview(**fields))

    return _make
