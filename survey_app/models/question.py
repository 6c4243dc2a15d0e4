"""Pydantic models for catalog payloads and views."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal

from pydantic import BaseModel, Field


QuestionType = Literal["scale", "text", "multiple_choice"]


class Question(BaseModel):
    id: int
    text: str
    type: QuestionType
    options: List[str] = Field(default_factory=list)
    order: int
    created_at: datetime | None = None


class QuestionCreate(BaseModel):
    text: str = ""
    type: QuestionType = "scale"
    options: List[str] = Field(default_factory=list)


class ReorderRequest(BaseModel):
    question_ids: List[int]


class MoveRequest(BaseModel):
    """Drag-drop result: source and destination list indices."""

    from_index: int = Field(ge=0)
    to_index: int = Field(ge=0)


class CatalogView(BaseModel):
    questions: List[Question]


class DeleteResult(BaseModel):
    deleted: int
    answers_deleted: int


__all__ = [
    "Question",
    "QuestionType",
    "QuestionCreate",
    "ReorderRequest",
    "MoveRequest",
    "CatalogView",
    "DeleteResult",
]
