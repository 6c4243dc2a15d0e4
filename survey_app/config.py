"""Configuration for the Survey Feedback Service.

Every setting is resolved from the first source that has it:

1. environment variables (a `.env` found from the working directory is
   loaded first without overriding what is already set)
2. one-line text files under `config/`, named after the setting
   (e.g. `config/survey.title`)
3. `survey_config.json` at the project root, keyed by the same dotted path
4. development defaults

Pydantic models validate the merged result.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_SURVEY_CONFIG = Path("survey_config.json")
DEFAULT_ADMIN_ALT_PATH = "/saugda7gdaeuidhaeuidhed"
logger = logging.getLogger(__name__)


def _truthy(value: object) -> bool:
    return str(value).strip().lower() in {"1", "true", "yes", "on"}


class DatabaseConfig(BaseModel):
    dsn: str
    auto_apply_migrations: bool = Field(default=False)

    @field_validator("dsn")
    @classmethod
    def dsn_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("database.dsn must be a non-empty string")
        return v


class AuthConfig(BaseModel):
    admin_email: str
    admin_password: str
    session_ttl_seconds: int = Field(default=8 * 3600, gt=0)

    @field_validator("admin_email", "admin_password")
    @classmethod
    def credential_must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("auth credentials must be non-empty strings")
        return v


class AdminConfig(BaseModel):
    alt_path: str = Field(default=DEFAULT_ADMIN_ALT_PATH)

    @field_validator("alt_path")
    @classmethod
    def alt_path_must_be_rooted(cls, v: str) -> str:
        v = (v or "").strip().rstrip("/")
        if not v.startswith("/") or v in {"", "/admin"}:
            raise ValueError("admin.alt_path must start with '/' and differ from /admin")
        return v


class SurveyConfig(BaseModel):
    title: str = Field(default="Very important survey!")
    instagram_handle: str = Field(default="@thelukeview")
    scale_min: int = Field(default=1)
    scale_max: int = Field(default=10)
    session_idle_ttl_seconds: int = Field(default=3600, gt=0)
    completed_session_ttl_seconds: int = Field(default=300, gt=0)

    @field_validator("scale_max")
    @classmethod
    def scale_bounds_ordered(cls, v: int, info) -> int:  # type: ignore[no-untyped-def]
        low = info.data.get("scale_min", 1)
        if v < low:
            raise ValueError("survey.scale_max must be >= survey.scale_min")
        return v


class AppConfig(BaseModel):
    database: DatabaseConfig
    auth: AuthConfig
    admin: AdminConfig
    survey: SurveyConfig
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError("log_level must be a standard logging level name")
        return v


class _Sources:
    """Looks a dotted setting up across env, `config/` files and JSON."""

    def __init__(self, json_base: Mapping[str, Any]) -> None:
        self.json_base = json_base

    def _from_file(self, dotted: str) -> Optional[str]:
        path = CONFIG_DIR / dotted
        if not path.is_file():
            return None
        try:
            return path.read_text(encoding="utf-8").strip() or None
        except (OSError, UnicodeDecodeError):
            logger.warning("config_override_unreadable path=%s", path, exc_info=True)
            return None

    def _from_json(self, dotted: str) -> Optional[str]:
        node: Any = self.json_base
        for part in dotted.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        if node is None:
            return None
        return ",".join(map(str, node)) if isinstance(node, list) else str(node)

    def get(self, dotted: str, *env_keys: str, default: str) -> str:
        for key in env_keys:
            if os.environ.get(key):
                return os.environ[key]
        return self._from_file(dotted) or self._from_json(dotted) or default


def _load_json_base(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        logger.error("config_json_unreadable path=%s", path, exc_info=True)
        return {}
    return data if isinstance(data, Mapping) else {}


def load_config() -> AppConfig:
    """Resolve and validate every setting; invalid values raise ValidationError."""
    load_dotenv(find_dotenv(usecwd=True), override=False)
    src = _Sources(_load_json_base(ROOT_SURVEY_CONFIG))

    origins = [o.strip() for o in src.get("cors_origins", "CORS_ORIGINS", default="*").split(",") if o.strip()]
    try:
        return AppConfig(
            database=DatabaseConfig(
                dsn=src.get("database.dsn", "TEST_DATABASE_URL", "DATABASE_URL", default="sqlite+pysqlite:///:memory:"),
                auto_apply_migrations=_truthy(
                    src.get("database.auto_apply_migrations", "AUTO_APPLY_MIGRATIONS", default="false")
                ),
            ),
            auth=AuthConfig(
                admin_email=src.get("auth.admin_email", "ADMIN_EMAIL", default="admin@example.com"),
                admin_password=src.get("auth.admin_password", "ADMIN_PASSWORD", default="admin"),
                session_ttl_seconds=src.get("auth.session_ttl_seconds", "SESSION_TTL_SECONDS", default="28800"),
            ),
            admin=AdminConfig(alt_path=src.get("admin.alt_path", "ADMIN_ALT_PATH", default=DEFAULT_ADMIN_ALT_PATH)),
            survey=SurveyConfig(
                title=src.get("survey.title", "SURVEY_TITLE", default="Very important survey!"),
                instagram_handle=src.get("survey.instagram_handle", "THANK_YOU_INSTAGRAM", default="@thelukeview"),
                scale_min=src.get("survey.scale_min", "SCALE_MIN", default="1"),
                scale_max=src.get("survey.scale_max", "SCALE_MAX", default="10"),
                session_idle_ttl_seconds=src.get(
                    "survey.session_idle_ttl_seconds", "SURVEY_SESSION_IDLE_TTL_SECONDS", default="3600"
                ),
                completed_session_ttl_seconds=src.get(
                    "survey.completed_session_ttl_seconds", "SURVEY_COMPLETED_SESSION_TTL_SECONDS", default="300"
                ),
            ),
            cors_origins=origins or ["*"],
            log_level=src.get("logging.level", "LOG_LEVEL", default="INFO"),
        )
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "AuthConfig",
    "AdminConfig",
    "SurveyConfig",
    "load_config",
]
