"""Problem+JSON utilities and global exception handlers.

Defines the RFC7807 media type and handler callables that render domain
errors, HTTP errors and validation failures as application/problem+json.
Storage and submission failures carry a generic message only.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from survey_app.logic.errors import SurveyError

PROBLEM_MEDIA_TYPE = "application/problem+json"

logger = logging.getLogger(__name__)


def problem(status: int, title: str, detail: str = "", code: str | None = None, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"type": "about:blank", "title": title, "status": int(status), "detail": detail or title}
    if code:
        body["code"] = code
    body.update(extra)
    return body


async def handle_survey_error(request: Request, exc: SurveyError) -> JSONResponse:
    if exc.status >= 500:
        logger.error("survey_error code=%s path=%s detail=%s", exc.code, request.url.path, exc.detail)
        # Storage failures are not distinguished for clients
        body = problem(exc.status, exc.title, exc.title, exc.code)
    else:
        logger.info("survey_error code=%s path=%s detail=%s", exc.code, request.url.path, exc.detail)
        body = problem(exc.status, exc.title, exc.detail, exc.code)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status == 401 else None
    return JSONResponse(body, status_code=exc.status, media_type=PROBLEM_MEDIA_TYPE, headers=headers)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    status_code = int(getattr(exc, "status_code", 500) or 500)
    if isinstance(exc.detail, dict):
        body = exc.detail
    else:
        body = problem(status_code, "Error", str(exc.detail or ""))
    headers = {str(k): str(v) for k, v in (exc.headers or {}).items()}
    return JSONResponse(body, status_code=status_code, media_type=PROBLEM_MEDIA_TYPE, headers=headers or None)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    body = problem(
        422,
        "Invalid Request",
        "Request validation failed",
        "REQUEST_INVALID",
        errors=[{k: v for k, v in err.items() if k in {"loc", "msg", "type"}} for err in exc.errors()],
    )
    return JSONResponse(body, status_code=422, media_type=PROBLEM_MEDIA_TYPE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error path=%s", request.url.path, exc_info=exc)
    return JSONResponse(
        problem(500, "Internal Server Error"),
        status_code=500,
        media_type=PROBLEM_MEDIA_TYPE,
    )


__all__ = [
    "PROBLEM_MEDIA_TYPE",
    "problem",
    "handle_survey_error",
    "handle_http_exception",
    "handle_request_validation_error",
    "handle_unexpected_error",
]
