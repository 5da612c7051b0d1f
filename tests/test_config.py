"""Tests for configuration helpers."""

from taskboard.config import Settings, get_settings, parse_comma_list


def test_parse_comma_list_defaults() -> None:
    assert parse_comma_list(None, ["a"]) == ["a"]


def test_parse_comma_list_accepts_list() -> None:
    assert parse_comma_list(["x", "y"], ["a"]) == ["x", "y"]


def test_parse_comma_list_splits_string() -> None:
    assert parse_comma_list("x, y, ,z", ["a"]) == ["x", "y", "z"]


def test_defaults_give_five_hour_tokens() -> None:
    settings = Settings(_env_file=None)
    assert settings.access_token_expire_minutes == 300
    assert settings.jwt_algorithm == "HS256"


def test_cors_origins_default_to_wildcard(monkeypatch) -> None:
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["*"]


def test_cors_origins_parsed_from_env(monkeypatch) -> None:
    monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000, https://app.example.com")
    settings = Settings(_env_file=None)
    assert settings.cors_origins == ["http://localhost:3000", "https://app.example.com"]


def test_jwt_secret_env_sets_secret_key(monkeypatch) -> None:
    monkeypatch.delenv("SECRET_KEY", raising=False)
    monkeypatch.setenv("JWT_SECRET", "from-jwt-secret")
    settings = Settings(_env_file=None)
    assert settings.secret_key == "from-jwt-secret"


def test_port_and_database_url_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DATABASE_URL", "sqlite+aiosqlite:///./local.db")
    settings = Settings(_env_file=None)
    assert settings.port == 8080
    assert settings.database_url == "sqlite+aiosqlite:///./local.db"
    assert settings.is_sqlite is True


def test_environment_alias_reads_deployment_environment(monkeypatch) -> None:
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.setenv("ENV", "staging")
    settings = Settings(_env_file=None)
    assert settings.environment == "staging"


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
