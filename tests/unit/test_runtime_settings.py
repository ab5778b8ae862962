import pytest

from app.settings import RuntimeSettings, runtime_settings_from_env


@pytest.mark.unit
def test_defaults_without_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "APP_HOST",
        "APP_PORT",
        "DATABASE_URL",
        "LOG_LEVEL",
        "MAX_TEAMS_PER_SESSION",
        "MAX_PINNED_ANNOUNCEMENTS",
    ):
        monkeypatch.delenv(name, raising=False)

    assert runtime_settings_from_env() == RuntimeSettings()


@pytest.mark.unit
def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_PORT", "9000")
    monkeypatch.setenv("DATABASE_URL", "postgres://app:app@db:5432/app")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("MAX_TEAMS_PER_SESSION", "30")

    settings = runtime_settings_from_env()

    assert settings.port == 9000
    assert settings.database_url == "postgres://app:app@db:5432/app"
    assert settings.log_level == "DEBUG"
    assert settings.max_teams_per_session == 30


@pytest.mark.unit
def test_invalid_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("APP_PORT", "not-a-port")
    monkeypatch.setenv("MAX_PINNED_ANNOUNCEMENTS", "-1")
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    monkeypatch.setenv("DATABASE_URL", "")

    settings = runtime_settings_from_env()

    assert settings.port == 8000
    assert settings.max_pinned_announcements == 4
    assert settings.log_level == "INFO"
    assert settings.database_url is None
