from config import INTERVIEW_QUESTIONS, last_question_index
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.DEFAULT_DURATION_MINUTES == 60
    assert settings.SEED_DEMO_DATA is True
    assert settings.VOICE_SESSION_MAX == 1000


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("VOICE_SESSION_MAX", "5")
    monkeypatch.setenv("SEED_DEMO_DATA", "false")
    settings = Settings(_env_file=None)
    assert settings.VOICE_SESSION_MAX == 5
    assert settings.SEED_DEMO_DATA is False


def test_single_question_list():
    assert len(INTERVIEW_QUESTIONS) == 8
    assert last_question_index() == 7
