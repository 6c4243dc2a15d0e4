"""Functional tests for configuration loading and precedence."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from survey_app import config as config_module
from survey_app.config import AdminConfig, SurveyConfig, load_config

_ENV_KEYS = (
    "TEST_DATABASE_URL",
    "DATABASE_URL",
    "AUTO_APPLY_MIGRATIONS",
    "ADMIN_EMAIL",
    "ADMIN_PASSWORD",
    "SESSION_TTL_SECONDS",
    "ADMIN_ALT_PATH",
    "SURVEY_TITLE",
    "THANK_YOU_INSTAGRAM",
    "SCALE_MIN",
    "SCALE_MAX",
    "SURVEY_SESSION_IDLE_TTL_SECONDS",
    "SURVEY_COMPLETED_SESSION_TTL_SECONDS",
    "CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point config lookups at an empty temp directory with a clean env."""
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config_module, "CONFIG_DIR", tmp_path / "config")
    monkeypatch.setattr(config_module, "ROOT_SURVEY_CONFIG", tmp_path / "survey_config.json")
    return tmp_path


def test_defaults_without_any_source(isolated_config):
    cfg = load_config()

    assert cfg.database.dsn.startswith("sqlite")
    assert cfg.database.auto_apply_migrations is False
    assert cfg.admin.alt_path == "/saugda7gdaeuidhaeuidhed"
    assert cfg.survey.scale_min == 1 and cfg.survey.scale_max == 10
    assert cfg.survey.instagram_handle == "@thelukeview"
    assert cfg.cors_origins == ["*"]
    assert cfg.survey.session_idle_ttl_seconds == 3600
    assert cfg.survey.completed_session_ttl_seconds == 300


def test_precedence_env_over_files_over_json(isolated_config, monkeypatch):
    (isolated_config / "survey_config.json").write_text(
        json.dumps({"survey": {"title": "From JSON", "scale_max": 5}, "admin": {"alt_path": "/json-admin"}}),
        encoding="utf-8",
    )
    (isolated_config / "config").mkdir()
    (isolated_config / "config" / "survey.title").write_text("From file\n", encoding="utf-8")
    monkeypatch.setenv("ADMIN_ALT_PATH", "/env-admin/")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

    cfg = load_config()

    assert cfg.survey.title == "From file"
    assert cfg.survey.scale_max == 5
    assert cfg.admin.alt_path == "/env-admin"
    assert cfg.cors_origins == ["https://a.example", "https://b.example"]


def test_dotenv_is_loaded_without_overriding_env(isolated_config, monkeypatch):
    (isolated_config / ".env").write_text("SURVEY_TITLE=Dotenv title\nADMIN_EMAIL=dot@example.com\n", encoding="utf-8")
    monkeypatch.setenv("ADMIN_EMAIL", "env@example.com")

    cfg = load_config()

    assert cfg.survey.title == "Dotenv title"
    assert cfg.auth.admin_email == "env@example.com"


@pytest.mark.parametrize("path", ["admin", "/admin", "/", ""])
def test_alt_path_must_be_distinct_rooted_path(path):
    with pytest.raises(ValidationError):
        AdminConfig(alt_path=path)


def test_scale_bounds_must_be_ordered():
    with pytest.raises(ValidationError):
        SurveyConfig(scale_min=5, scale_max=2)


def test_invalid_env_value_fails_loading(isolated_config, monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "   ")

    with pytest.raises(ValidationError):
        load_config()


def test_log_level_is_normalised_and_validated(isolated_config, monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert load_config().log_level == "DEBUG"

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(ValidationError):
        load_config()


def test_session_ttls_come_from_env(isolated_config, monkeypatch):
    monkeypatch.setenv("SURVEY_SESSION_IDLE_TTL_SECONDS", "120")
    monkeypatch.setenv("SURVEY_COMPLETED_SESSION_TTL_SECONDS", "15")

    cfg = load_config()

    assert cfg.survey.session_idle_ttl_seconds == 120
    assert cfg.survey.completed_session_ttl_seconds == 15


def test_session_ttl_must_be_positive():
    with pytest.raises(ValidationError):
        SurveyConfig(completed_session_ttl_seconds=0)
