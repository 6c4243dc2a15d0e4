"""Functional test bootstrap for the survey service.

Functional tests run against a file-backed SQLite database created under a
pytest temp directory, migrated once per session.
Each test starts from empty tables and an empty event buffer.
"""

from __future__ import annotations

import os
import pathlib

import pytest
from fastapi.testclient import TestClient

_ROOT = pathlib.Path(__file__).resolve().parents[2]

# Keep load_config() away from any developer DATABASE_URL
os.environ["AUTO_APPLY_MIGRATIONS"] = "0"

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "s3cret-pass"
ALT_PATH = "/saugda7gdaeuidhaeuidhed"


@pytest.fixture(scope="session")
def database_url(tmp_path_factory) -> str:
    base = tmp_path_factory.mktemp("survey_db")

    from survey_app.db.base import get_engine
    from survey_app.db.migrations_runner import apply_migrations

    url = f"sqlite:///{base / 'functional_tests.db'}"
    apply_migrations(get_engine(url), migrations_dir=_ROOT / "sqlite_migrations")
    return url


@pytest.fixture(scope="session")
def storage(database_url):
    from survey_app.db.base import get_engine
    from survey_app.db.storage import StorageClient

    return StorageClient(get_engine(database_url))


@pytest.fixture(autouse=True)
def clean_state(storage):
    """Empty both tables and the event buffer before each test."""
    from survey_app.logic.events import EVENT_BUFFER

    with storage.engine.begin() as conn:
        conn.exec_driver_sql("DELETE FROM responses")
        conn.exec_driver_sql("DELETE FROM questions")
    EVENT_BUFFER.clear()
    yield


@pytest.fixture
def app_config(database_url):
    from survey_app.config import AdminConfig, AppConfig, AuthConfig, DatabaseConfig, SurveyConfig

    return AppConfig(
        database=DatabaseConfig(dsn=database_url),
        auth=AuthConfig(admin_email=ADMIN_EMAIL, admin_password=ADMIN_PASSWORD),
        admin=AdminConfig(alt_path=ALT_PATH),
        survey=SurveyConfig(),
    )


@pytest.fixture
def catalog(storage):
    from survey_app.logic.repository_questions import QuestionCatalog

    return QuestionCatalog(storage)


@pytest.fixture
def client(app_config, storage):
    from survey_app.main import create_app

    app = create_app(app_config, storage=storage)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client) -> dict:
    resp = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 200, resp.text
    # Drop the cookie so tests exercise the bearer path explicitly
    client.cookies.clear()
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
