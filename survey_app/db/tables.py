"""Core table definitions for the two persisted entities.

`responses.question_id` references `questions.id` without an ON DELETE rule;
removing answers before their question is the application's job.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    func,
)

metadata = MetaData()

questions = Table(
    "questions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("text", Text, nullable=False),
    Column("type", String(32), nullable=False),
    Column("options", JSON, nullable=True),
    Column("order", Integer, nullable=False),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)

responses = Table(
    "responses",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("submission_id", String(36), nullable=False, index=True),
    Column("question_id", Integer, ForeignKey("questions.id"), nullable=True),
    Column("response", Text, nullable=False),
    Column("instagram", Text, nullable=True),
    Column("phone_number", Text, nullable=True),
    Column("created_at", DateTime, server_default=func.current_timestamp()),
)

TABLES = {t.name: t for t in (questions, responses)}

__all__ = ["metadata", "questions", "responses", "TABLES"]
