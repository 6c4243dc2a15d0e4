"""Respondent questionnaire flow.

A client starts a session (snapshotting the catalog), answers the current
question until the contact step, then submits. A failed submit leaves the
session on the contact step so the same batch can be retried.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from survey_app.dependencies import Services, get_services
from survey_app.logic.questionnaire_session import QuestionnaireSession
from survey_app.models.answer import AnswerPayload, ContactInfo

router = APIRouter(prefix="/sessions", tags=["Questionnaire"])
logger = logging.getLogger(__name__)


def _envelope(session_id: str, session: QuestionnaireSession) -> dict:
    return {"session_id": session_id, **session.view()}


@router.post("", status_code=201, summary="Start a questionnaire session")
def start_session(services: Services = Depends(get_services)) -> dict:
    survey = services.config.survey
    session = QuestionnaireSession.start(
        services.catalog.list(),
        scale_choices=range(survey.scale_min, survey.scale_max + 1),
    )
    session_id = services.sessions.add(session)
    logger.info("session_registered session_id=%s", session_id)
    return _envelope(session_id, session)


@router.get("/{session_id}", summary="Current session view")
def get_session(session_id: str, services: Services = Depends(get_services)) -> dict:
    return _envelope(session_id, services.sessions.get(session_id))


@router.post("/{session_id}/answers", summary="Answer the current question")
def answer_question(session_id: str, payload: AnswerPayload, services: Services = Depends(get_services)) -> dict:
    session = services.sessions.get(session_id)
    session.answer(payload.response)
    return _envelope(session_id, session)


@router.post("/{session_id}/contact", summary="Submit contact info and answers")
def submit_contact(session_id: str, payload: ContactInfo, services: Services = Depends(get_services)) -> dict:
    session = services.sessions.get(session_id)
    session.submit_contact(payload.model_dump(), services.assembler)
    logger.info("session_completed session_id=%s submission_id=%s", session_id, session.submission_id)
    return _envelope(session_id, session)


__all__ = ["router"]
