import pytest
from pydantic import ValidationError

from ecoswap.app.core.config import PLACEHOLDER_API_KEY, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "OPENAI_MAX_REQUESTS_PER_HOUR",
        "OPENAI_MAX_DAILY_COST",
        "SCRAPING_TIMEOUT",
        "FETCH_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.llm_max_requests_per_hour == 50
    assert settings.llm_max_daily_cost == 2.0
    assert settings.render_timeout_ms == 30000
    assert settings.llm_max_content_chars == 8000
    assert settings.has_llm_credential is False


def test_credential_detection(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", PLACEHOLDER_API_KEY)
    assert Settings(_env_file=None).has_llm_credential is False

    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    assert Settings(_env_file=None).has_llm_credential is True


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("OPENAI_MAX_REQUESTS_PER_HOUR", "7")
    monkeypatch.setenv("OPENAI_MAX_DAILY_COST", "0.5")
    monkeypatch.setenv("SCRAPING_TIMEOUT", "45000")

    settings = Settings(_env_file=None)

    assert settings.llm_max_requests_per_hour == 7
    assert settings.llm_max_daily_cost == 0.5
    assert settings.render_timeout_ms == 45000


def test_fetch_timeout_must_be_shorter_than_render(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "30")
    monkeypatch.setenv("SCRAPING_TIMEOUT", "10000")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
