"""FastAPI dependencies resolving the services built by the app factory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from survey_app.config import AppConfig
from survey_app.db.storage import StorageClient
from survey_app.logic.auth_provider import AuthProvider, AuthSession
from survey_app.logic.errors import AuthError
from survey_app.logic.repository_questions import QuestionCatalog
from survey_app.logic.response_aggregator import ResponseAggregator
from survey_app.logic.session_registry import SessionRegistry
from survey_app.logic.submission_assembler import SubmissionAssembler

logger = logging.getLogger(__name__)

SESSION_COOKIE = "survey_session"

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass
class Services:
    config: AppConfig
    storage: StorageClient
    catalog: QuestionCatalog
    assembler: SubmissionAssembler
    aggregator: ResponseAggregator
    sessions: SessionRegistry
    auth: AuthProvider


def get_services(request: Request) -> Services:
    return request.app.state.services


def session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE)


def require_admin(
    token: Optional[str] = Depends(session_token),
    services: Services = Depends(get_services),
) -> AuthSession:
    session = services.auth.get_session(token)
    if session is None:
        raise AuthError("admin session required")
    return session


__all__ = [
    "Services",
    "SESSION_COOKIE",
    "get_services",
    "session_token",
    "require_admin",
]
