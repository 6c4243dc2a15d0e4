"""APIRouter registration for the survey service."""

from __future__ import annotations

from fastapi import APIRouter, FastAPI

from survey_app.routes.admin import build_admin_router
from survey_app.routes.auth import router as auth_router
from survey_app.routes.pages import api_router as catalog_router
from survey_app.routes.pages import router as pages_router
from survey_app.routes.sessions import router as sessions_router

ADMIN_PATH = "/admin"

api_router = APIRouter()
api_router.include_router(catalog_router)
api_router.include_router(sessions_router)


def register_routes(app: FastAPI, admin_alt_path: str) -> None:
    app.include_router(pages_router)
    app.include_router(auth_router, tags=["Auth"])
    app.include_router(api_router, prefix="/api/v1")
    # One editor implementation behind both admin bindings
    for prefix in (ADMIN_PATH, admin_alt_path):
        app.include_router(build_admin_router(prefix))


__all__ = ["api_router", "register_routes", "ADMIN_PATH"]
