import pytest
from pydantic import ValidationError

from chronoplan.core.config import Settings


def test_cors_origins_accept_comma_separated_and_json():
    assert Settings(cors_origins="http://a.test, http://b.test").cors_origins == ["http://a.test", "http://b.test"]
    assert Settings(cors_origins='["http://c.test"]').cors_origins == ["http://c.test"]


def test_log_level_is_normalized():
    assert Settings(log_level=" debug ").log_level == "DEBUG"

    with pytest.raises(ValidationError):
        Settings(log_level="chatty")


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("SCHEDULER_RANDOM_SEED", "1234")
    monkeypatch.setenv("API_PREFIX", "/v1")

    settings = Settings()

    assert settings.scheduler_random_seed == 1234
    assert settings.api_prefix == "/v1"
