from __future__ import annotations

import pytest
from pydantic import ValidationError

from royale_dashboard.core.config import Settings
from royale_dashboard.logs import log_event


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROYALE_API_BASE_URL", "https://proxy.royaleapi.dev/v1/")
    monkeypatch.setenv("ROYALE_COUNTER_MIN_ENCOUNTERS", "5")
    s = Settings()
    assert s.api_token == "test-token"
    assert s.api_base_url == "https://proxy.royaleapi.dev/v1"
    assert s.counter_min_encounters == 5


def test_blank_token_is_none(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ROYALE_API_TOKEN", "   ")
    assert Settings().api_token is None


def test_invalid_base_url_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(api_base_url="ftp://nope")


def test_negative_limits_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(counter_cards_limit=-1)


def test_log_event_json_lines(capsys: pytest.CaptureFixture[str]) -> None:
    log_event("quiet", settings=Settings(log_json=False))
    assert capsys.readouterr().err == ""

    log_event("loud", level="warning", settings=Settings(log_json=True), tag="#P")
    err = capsys.readouterr().err.strip()
    assert '"event":"loud"' in err
    assert '"level":"warning"' in err
    assert '"tag":"#P"' in err
