"""Admin catalog editor and response review routes.

`build_admin_router(prefix)` returns one router; the application mounts it at
`/admin` and at the configured alternate path so both bindings share a single
implementation. Everything except the login form needs an admin session.
"""

from __future__ import annotations

import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from survey_app.dependencies import Services, get_services, require_admin
from survey_app.models.answer import ResponsesView
from survey_app.models.question import (
    CatalogView,
    DeleteResult,
    MoveRequest,
    Question,
    QuestionCreate,
    ReorderRequest,
)
from survey_app.models.auth import SessionInfo
from survey_app.routes.auth import sign_in

logger = logging.getLogger(__name__)


def build_admin_router(prefix: str) -> APIRouter:
    prefix = prefix.rstrip("/")
    router = APIRouter(prefix=prefix, tags=["Admin"])
    guarded = APIRouter(dependencies=[Depends(require_admin)])

    router.add_api_route(
        "/login",
        sign_in,
        methods=["POST"],
        summary="Admin login form",
        response_model=SessionInfo,
        name=f"admin_login{prefix.replace('/', '_')}",
    )

    @guarded.get("/questions", response_model=CatalogView, summary="List questions")
    def list_questions(services: Services = Depends(get_services)) -> dict:
        return {"questions": services.catalog.list()}

    @guarded.post("/questions", response_model=Question, status_code=201, summary="Add question")
    def create_question(payload: QuestionCreate, services: Services = Depends(get_services)) -> dict:
        created = services.catalog.create(payload.text, payload.type, payload.options)
        logger.info("admin_question_created prefix=%s question_id=%s", prefix, created["id"])
        return created

    @guarded.put("/questions/order", response_model=CatalogView, summary="Reorder questions by id")
    def reorder_questions(payload: ReorderRequest, services: Services = Depends(get_services)) -> dict:
        return {"questions": services.catalog.reorder(payload.question_ids)}

    @guarded.post("/questions/move", response_model=CatalogView, summary="Drag-drop move")
    def move_question(payload: MoveRequest, services: Services = Depends(get_services)) -> dict:
        return {"questions": services.catalog.move(payload.from_index, payload.to_index)}

    @guarded.delete("/questions/{question_id}", response_model=DeleteResult, summary="Delete question and its answers")
    def delete_question(question_id: int, services: Services = Depends(get_services)) -> dict:
        answers_deleted = services.catalog.delete(question_id)
        logger.info(
            "admin_question_deleted prefix=%s question_id=%s answers_deleted=%s",
            prefix,
            question_id,
            answers_deleted,
        )
        return {"deleted": question_id, "answers_deleted": answers_deleted}

    @guarded.get("/responses", response_model=ResponsesView, summary="Review responses")
    def list_responses(
        question_id: Optional[int] = Query(default=None),
        sort: Literal["asc", "desc"] = Query(default="desc"),
        services: Services = Depends(get_services),
    ) -> dict:
        return services.aggregator.view(services.catalog.list(), question_id=question_id, sort=sort)

    router.include_router(guarded)
    return router


__all__ = ["build_admin_router"]
