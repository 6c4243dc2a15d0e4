"""Question catalog repository.

Encapsulates reads and writes of the `questions` table (and the dependent
`responses` rows on delete), keeping HTTP handlers free of storage calls.
Order values are 0-based display positions; ties fall back to insertion
order (`id`).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence

from survey_app.db.storage import Row, StorageClient
from survey_app.logic.errors import CatalogValidationError, QuestionNotFound
from survey_app.logic.events import (
    QUESTION_CREATED,
    QUESTION_DELETED,
    QUESTIONS_REORDERED,
    publish,
)
from survey_app.models.question_kind import QuestionKind

logger = logging.getLogger(__name__)

_ORDERING = (("order", "asc"), ("id", "asc"))


def _normalise(row: Row) -> Dict[str, Any]:
    q = dict(row)
    q["options"] = list(q.get("options") or [])
    return q


def move_item(ids: Sequence[int], from_index: int, to_index: int) -> List[int]:
    """Return `ids` with the item at `from_index` re-inserted at `to_index`.

    `to_index` is clamped into the list bounds.
    """
    items = list(ids)
    if not 0 <= from_index < len(items):
        raise CatalogValidationError(f"from_index {from_index} out of range")
    moved = items.pop(from_index)
    insert_at = max(0, min(int(to_index), len(items)))
    items.insert(insert_at, moved)
    return items


class QuestionCatalog:
    """Ordered collection of questions backed by a StorageClient."""

    def __init__(self, storage: StorageClient) -> None:
        self.storage = storage

    def list(self) -> List[Dict[str, Any]]:
        rows = self.storage.select("questions", order_by=_ORDERING)
        return [_normalise(r) for r in rows]

    def get(self, question_id: int) -> Dict[str, Any]:
        rows = self.storage.select("questions", filters={"id": int(question_id)})
        if not rows:
            raise QuestionNotFound(question_id)
        return _normalise(rows[0])

    def create(self, text: str, type: str, options: Iterable[str] | None = None) -> Dict[str, Any]:
        """Append a question at the end of the catalog."""
        text = (text or "").strip()
        if not text:
            raise CatalogValidationError("question text must be non-empty")
        if type not in QuestionKind.ALL:
            raise CatalogValidationError(f"type must be one of {list(QuestionKind.ALL)}")
        cleaned: List[str] = []
        if type == QuestionKind.MULTIPLE_CHOICE:
            cleaned = [str(o).strip() for o in (options or []) if str(o).strip()]
            if not cleaned:
                raise CatalogValidationError("multiple_choice questions need at least one option")

        with self.storage.transaction() as writer:
            # Count inside the write transaction so the appended slot is current
            order_value = writer.count("questions")
            created = writer.insert(
                "questions",
                [{"text": text, "type": type, "options": cleaned, "order": order_value}],
            )[0]
        question = _normalise(created)
        publish(QUESTION_CREATED, {"question_id": question["id"], "order": question["order"]})
        return question

    def reorder(self, question_ids: Sequence[int]) -> List[Dict[str, Any]]:
        """Persist `order` = position for every id, in one transaction."""
        ids = [int(q) for q in question_ids]
        if len(set(ids)) != len(ids):
            raise CatalogValidationError("question_ids must not contain duplicates")
        current = [q["id"] for q in self.list()]
        unknown = [q for q in ids if q not in current]
        if unknown:
            raise QuestionNotFound(unknown[0])
        if len(ids) != len(current):
            raise CatalogValidationError("question_ids must list every question in the catalog")

        with self.storage.transaction() as writer:
            for position, qid in enumerate(ids):
                writer.update("questions", {"order": position}, filters={"id": qid})
        logger.info("catalog_reordered before=%s after=%s", current, ids)
        publish(QUESTIONS_REORDERED, {"question_ids": ids})
        return self.list()

    def move(self, from_index: int, to_index: int) -> List[Dict[str, Any]]:
        """Drag-drop reorder: move one position and persist the whole sequence."""
        current = [q["id"] for q in self.list()]
        return self.reorder(move_item(current, from_index, to_index))

    def delete(self, question_id: int) -> int:
        """Delete a question and every answer referencing it.

        Both deletes run in one transaction. Returns the number of answers
        removed.
        """
        qid = int(question_id)
        self.get(qid)
        with self.storage.transaction() as writer:
            answers_deleted = writer.delete("responses", filters={"question_id": qid})
            writer.delete("questions", filters={"id": qid})
        publish(QUESTION_DELETED, {"question_id": qid, "answers_deleted": answers_deleted})
        return answers_deleted


__all__ = ["QuestionCatalog", "move_item"]
