"""CORS for browser clients of the questionnaire and admin console."""

from __future__ import annotations

from typing import Iterable
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


# Browsers may read the correlation id of any response
EXPOSE_HEADERS: list[str] = ["X-Request-Id"]


def apply_cors(app: FastAPI, *, origins: Iterable[str] | None = None) -> None:
    allowed = [o.rstrip("/") for o in (origins or ["*"])]
    wildcard = "*" in allowed
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else allowed,
        # The admin cookie only travels to explicitly listed origins
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-Id"],
        expose_headers=EXPOSE_HEADERS,
    )


__all__ = ["apply_cors", "EXPOSE_HEADERS"]
