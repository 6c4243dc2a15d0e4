"""Admin-side regrouping of raw answer rows.

Answers come back newest first. Without a question filter they are grouped
into synthetic submissions keyed by `submission_id`; with a filter they are
narrowed to one question and, for scale questions, ordered by the numeric
value of the stored response string.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from survey_app.db.storage import StorageClient
from survey_app.logic.errors import QuestionNotFound
from survey_app.models.question_kind import QuestionKind

logger = logging.getLogger(__name__)

SORT_DIRECTIONS = ("asc", "desc")


def parse_numeric(value: Any) -> Optional[float]:
    """Return the numeric value of a response string, or None if unparseable."""
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def filter_by_question(answers: Iterable[Mapping[str, Any]], question_id: int) -> List[Dict[str, Any]]:
    return [dict(a) for a in answers if a.get("question_id") == int(question_id)]


def sort_by_numeric(answers: Sequence[Mapping[str, Any]], direction: str = "desc") -> List[Dict[str, Any]]:
    """Order answers by numeric response value.

    Unparseable responses form their own bucket after every numeric answer,
    whatever the direction, in their incoming order.
    """
    numeric: List[tuple[float, Dict[str, Any]]] = []
    unparseable: List[Dict[str, Any]] = []
    for a in answers:
        value = parse_numeric(a.get("response"))
        if value is None:
            unparseable.append(dict(a))
        else:
            numeric.append((value, dict(a)))
    numeric.sort(key=lambda pair: pair[0], reverse=(direction == "desc"))
    return [a for _, a in numeric] + unparseable


def group_by_submission(answers: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Group answers by submission id, newest submission first.

    Group metadata comes from the first member seen; it is duplicated on
    every row of a submission.
    """
    groups: Dict[str, Dict[str, Any]] = {}
    for a in answers:
        key = str(a.get("submission_id"))
        group = groups.get(key)
        if group is None:
            group = {
                "submission_id": key,
                "created_at": a.get("created_at"),
                "instagram": a.get("instagram"),
                "phone_number": a.get("phone_number"),
                "responses": [],
            }
            groups[key] = group
        group["responses"].append(dict(a))

    ordered = list(groups.values())
    # Stable sort keeps fetch order for equal timestamps
    ordered.sort(key=lambda g: (g["created_at"] is not None, g["created_at"] or 0), reverse=True)
    return ordered


class ResponseAggregator:
    def __init__(self, storage: StorageClient) -> None:
        self.storage = storage

    def fetch_all(self) -> List[Dict[str, Any]]:
        return self.storage.select("responses", order_by=(("created_at", "desc"), ("id", "desc")))

    def view(
        self,
        catalog: Sequence[Mapping[str, Any]],
        question_id: Optional[int] = None,
        sort: str = "desc",
    ) -> Dict[str, Any]:
        """Build the admin responses view.

        Each answer is annotated with its question's text when the question
        still exists in `catalog`.
        """
        if sort not in SORT_DIRECTIONS:
            sort = "desc"
        by_id = {int(q["id"]): q for q in catalog}
        answers = self.fetch_all()
        for a in answers:
            question = by_id.get(a.get("question_id")) if a.get("question_id") is not None else None
            a["question_text"] = question["text"] if question else None

        if question_id is None:
            return {"question_id": None, "sort": None, "submissions": group_by_submission(answers)}

        question = by_id.get(int(question_id))
        if question is None:
            raise QuestionNotFound(question_id)
        filtered = filter_by_question(answers, question_id)
        if question.get("type") == QuestionKind.SCALE:
            filtered = sort_by_numeric(filtered, sort)
            return {"question_id": int(question_id), "sort": sort, "answers": filtered}
        return {"question_id": int(question_id), "sort": None, "answers": filtered}


__all__ = [
    "ResponseAggregator",
    "parse_numeric",
    "filter_by_question",
    "sort_by_numeric",
    "group_by_submission",
]
