"""Public catalog snapshot and the respondent-facing landing/thank-you views."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from survey_app.dependencies import Services, get_services
from survey_app.models.question import CatalogView

router = APIRouter()
api_router = APIRouter(tags=["Catalog"])


@api_router.get("/questions", response_model=CatalogView, summary="Questions in display order")
def public_questions(services: Services = Depends(get_services)) -> dict:
    return {"questions": services.catalog.list()}


@router.get("/", summary="Survey landing view")
def landing(services: Services = Depends(get_services)) -> dict:
    return {
        "title": services.config.survey.title,
        "start": "/api/v1/sessions",
    }


@router.get("/thank-you", summary="Submission acknowledgment")
def thank_you(services: Services = Depends(get_services)) -> dict:
    handle = services.config.survey.instagram_handle
    return {
        "title": "Thank you!",
        "message": "Thank you for answering all the questions :) Maybe we'll see each other again!",
        "instagram": handle,
        "instagram_url": f"https://instagram.com/{handle.lstrip('@')}",
    }


__all__ = ["router", "api_router"]
