from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from survey_app.config import AppConfig, load_config
from survey_app.db.base import get_engine
from survey_app.db.migrations_runner import apply_migrations
from survey_app.db.storage import StorageClient
from survey_app.dependencies import Services
from survey_app.http.problem import (
    handle_http_exception,
    handle_request_validation_error,
    handle_survey_error,
    handle_unexpected_error,
)
from survey_app.http.request_id import RequestIdMiddleware
from survey_app.logging_setup import configure_logging
from survey_app.logic.auth_provider import AuthProvider, ConfiguredAuthProvider
from survey_app.logic.errors import SurveyError
from survey_app.logic.repository_questions import QuestionCatalog
from survey_app.logic.response_aggregator import ResponseAggregator
from survey_app.logic.session_registry import SessionRegistry
from survey_app.logic.submission_assembler import SubmissionAssembler
from survey_app.middleware.cors import apply_cors
from survey_app.routes import register_routes

logger = logging.getLogger(__name__)


def build_services(
    config: AppConfig,
    storage: Optional[StorageClient] = None,
    auth: Optional[AuthProvider] = None,
) -> Services:
    """Construct the collaborators handed to every route via app.state."""
    storage = storage or StorageClient(get_engine(config.database.dsn))
    auth = auth or ConfiguredAuthProvider(
        config.auth.admin_email,
        config.auth.admin_password,
        ttl_seconds=config.auth.session_ttl_seconds,
    )
    return Services(
        config=config,
        storage=storage,
        catalog=QuestionCatalog(storage),
        assembler=SubmissionAssembler(storage),
        aggregator=ResponseAggregator(storage),
        sessions=SessionRegistry(
            idle_ttl_seconds=config.survey.session_idle_ttl_seconds,
            completed_ttl_seconds=config.survey.completed_session_ttl_seconds,
        ),
        auth=auth,
    )


def create_app(
    config: Optional[AppConfig] = None,
    *,
    storage: Optional[StorageClient] = None,
    auth: Optional[AuthProvider] = None,
) -> FastAPI:
    config = config or load_config()
    configure_logging(config.log_level)
    services = build_services(config, storage=storage, auth=auth)

    app = FastAPI(title="Survey Feedback Service")
    app.state.services = services

    app.add_exception_handler(SurveyError, handle_survey_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
    apply_cors(app, origins=config.cors_origins)
    app.add_middleware(RequestIdMiddleware)

    # Apply migrations on startup (guarded) to avoid import-time side effects
    @app.on_event("startup")
    def _apply_migrations() -> None:
        if not config.database.auto_apply_migrations:
            logger.info("AUTO_APPLY_MIGRATIONS disabled; skipping migrations at startup")
            return
        try:
            applied = apply_migrations(services.storage.engine)
        except Exception:
            logger.error("Failed to apply migrations at startup", exc_info=True)
            raise
        logger.info("startup_migrations_applied files=%s", applied)

    register_routes(app, config.admin.alt_path)

    @app.get("/health")
    def health() -> dict:
        ok = services.storage.ping()
        return {"status": "ok" if ok else "degraded", "db": ok}

    return app


# Intentionally do not instantiate the app at import time to prevent side effects.
