"""Pydantic models for answer payloads and admin response views."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel


class Answer(BaseModel):
    id: int | None = None
    submission_id: str
    question_id: int | None = None
    question_text: str | None = None
    response: str
    instagram: str | None = None
    phone_number: str | None = None
    created_at: datetime | None = None


class AnswerPayload(BaseModel):
    # Scale clicks may arrive as numbers; they are stored as decimal strings
    response: str | int | None = None


class ContactInfo(BaseModel):
    instagram: str | None = None
    phone_number: str | None = None


class SubmissionGroup(BaseModel):
    submission_id: str
    created_at: datetime | None = None
    instagram: str | None = None
    phone_number: str | None = None
    responses: List[Answer]


class ResponsesView(BaseModel):
    question_id: int | None = None
    sort: str | None = None
    answers: List[Answer] | None = None
    submissions: List[SubmissionGroup] | None = None


__all__ = ["Answer", "AnswerPayload", "ContactInfo", "SubmissionGroup", "ResponsesView"]
