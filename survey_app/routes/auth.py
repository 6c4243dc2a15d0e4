"""Admin sign-in routes.

The login form lives at `/login`; the admin bindings expose the same handler
at `{prefix}/login`.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse

from survey_app.dependencies import SESSION_COOKIE, Services, get_services, require_admin, session_token
from survey_app.logic.auth_provider import AuthSession
from survey_app.models.auth import LoginRequest, SessionInfo

router = APIRouter()
logger = logging.getLogger(__name__)

ADMIN_LANDING = "/admin/questions"


def _session_info(session: AuthSession) -> SessionInfo:
    return SessionInfo(
        email=session.email,
        access_token=session.token,
        expires_at=session.expires_at,
        redirect=ADMIN_LANDING,
    )


def sign_in(payload: LoginRequest, services: Services = Depends(get_services)) -> JSONResponse:
    """Exchange admin credentials for a session token (also set as a cookie)."""
    session = services.auth.sign_in(payload.email, payload.password)
    info = _session_info(session)
    resp = JSONResponse(info.model_dump(mode="json"))
    max_age = max(0, int(services.config.auth.session_ttl_seconds))
    resp.set_cookie(SESSION_COOKIE, session.token, max_age=max_age, httponly=True, samesite="lax")
    return resp


router.add_api_route("/login", sign_in, methods=["POST"], summary="Admin login", response_model=SessionInfo)


@router.get("/login/session", response_model=SessionInfo, summary="Current admin session")
def current_session(session: AuthSession = Depends(require_admin)) -> SessionInfo:
    return _session_info(session)


@router.post("/logout", status_code=204, summary="Admin logout")
def sign_out(
    token: Optional[str] = Depends(session_token),
    services: Services = Depends(get_services),
) -> Response:
    services.auth.sign_out(token)
    resp = Response(status_code=204)
    resp.delete_cookie(SESSION_COOKIE)
    return resp


__all__ = ["router", "sign_in"]
