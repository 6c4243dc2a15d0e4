"""Packages a completed questionnaire session into one batch of answer rows.

Every row of a batch shares one generated `submission_id` and the same
contact fields; the batch is written with a single storage request.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional

from survey_app.db.storage import StorageClient
from survey_app.logic.errors import StorageError, SubmissionFailed
from survey_app.logic.events import SUBMISSION_CREATED, publish

logger = logging.getLogger(__name__)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def new_submission_id() -> str:
    return str(uuid.uuid4())


class SubmissionAssembler:
    def __init__(self, storage: StorageClient, id_factory: Callable[[], str] = new_submission_id) -> None:
        self.storage = storage
        self.id_factory = id_factory

    @staticmethod
    def assemble(
        answers: Mapping[int, str],
        contact: Mapping[str, Optional[str]] | None,
        submission_id: str,
    ) -> List[Dict[str, Any]]:
        """Expand `{question_id: response}` into answer rows, in response order."""
        contact = contact or {}
        instagram = _blank_to_none(contact.get("instagram"))
        phone_number = _blank_to_none(contact.get("phone_number"))
        return [
            {
                "submission_id": submission_id,
                "question_id": int(question_id),
                "response": str(response),
                "instagram": instagram,
                "phone_number": phone_number,
            }
            for question_id, response in answers.items()
        ]

    def submit(
        self,
        answers: Mapping[int, str],
        contact: Mapping[str, Optional[str]] | None = None,
        submission_id: Optional[str] = None,
    ) -> str:
        """Persist the batch and return its submission id.

        Raises SubmissionFailed when there is nothing to submit or the storage
        write fails; nothing is written in either case.
        """
        if not answers:
            raise SubmissionFailed("no answers to submit")
        submission_id = submission_id or self.id_factory()
        rows = self.assemble(answers, contact, submission_id)
        try:
            self.storage.insert("responses", rows)
        except StorageError as exc:
            logger.error("submission_insert_failed submission_id=%s rows=%s", submission_id, len(rows))
            raise SubmissionFailed("Error submitting responses") from exc
        publish(SUBMISSION_CREATED, {"submission_id": submission_id, "answers": len(rows)})
        return submission_id


__all__ = ["SubmissionAssembler", "new_submission_id"]
