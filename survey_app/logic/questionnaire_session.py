"""Questionnaire session state machine.

A session walks one respondent through a snapshot of the catalog, one
question at a time, collecting `{question_id: response}` in response order.
States are explicit tagged values:

- ``EmptyCatalog``: the snapshot had no questions; no transition is possible.
- ``Active(index)``: showing question ``index`` of ``N``.
- ``CollectingContact``: all questions answered; waiting for optional contact
  info and submission.
- ``Complete(submission_id)``: the batch was persisted.

There is no backward navigation and an answer cannot be revised once the
session has advanced past it.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from survey_app.logic.errors import AnswerRejected, InvalidTransition
from survey_app.logic.submission_assembler import SubmissionAssembler
from survey_app.models.question_kind import QuestionKind

logger = logging.getLogger(__name__)

THANK_YOU_PATH = "/thank-you"


@dataclass(frozen=True)
class EmptyCatalog:
    name: str = "empty_catalog"


@dataclass(frozen=True)
class Active:
    index: int
    name: str = "active"


@dataclass(frozen=True)
class CollectingContact:
    name: str = "collecting_contact"


@dataclass(frozen=True)
class Complete:
    submission_id: str
    name: str = "complete"


SessionState = Union[EmptyCatalog, Active, CollectingContact, Complete]


def _as_response(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        return str(int(value)) if float(value).is_integer() else str(value)
    return str(value)


class QuestionnaireSession:
    def __init__(self, questions: Sequence[Mapping[str, Any]], scale_choices: Sequence[int] = range(1, 11)) -> None:
        self.questions: List[Dict[str, Any]] = [dict(q) for q in questions]
        self.scale_choices = list(scale_choices)
        self.answers: Dict[int, str] = {}
        self.contact: Dict[str, Optional[str]] = {}
        # Fixed on the first submit attempt so a retry re-sends the same batch
        self.submission_id: Optional[str] = None
        self.state: SessionState = Active(0) if self.questions else EmptyCatalog()
        # Serializes answer() and submit_contact() on one session
        self._lock = threading.Lock()

    @classmethod
    def start(cls, catalog_snapshot: Sequence[Mapping[str, Any]], scale_choices: Sequence[int] = range(1, 11)) -> "QuestionnaireSession":
        """Begin a session over `catalog_snapshot`; later catalog edits do not reach it."""
        session = cls(catalog_snapshot, scale_choices=scale_choices)
        logger.info("session_started questions=%s state=%s", session.total, session.state.name)
        return session

    @property
    def total(self) -> int:
        return len(self.questions)

    def answer(self, response: Any) -> SessionState:
        """Record `response` for the current question and advance."""
        with self._lock:
            return self._answer(response)

    def _answer(self, response: Any) -> SessionState:
        state = self.state
        if not isinstance(state, Active):
            raise InvalidTransition(f"cannot answer in state {state.name}")
        question = self.questions[state.index]
        value = _as_response(response)
        if value == "":
            raise AnswerRejected(f"question {question['id']} requires a response")

        self.answers[int(question["id"])] = value
        next_index = state.index + 1
        self.state = Active(next_index) if next_index < self.total else CollectingContact()
        logger.info(
            "session_answered question_id=%s type=%s next_state=%s",
            question["id"],
            question.get("type"),
            self.state.name,
        )
        return self.state

    def submit_contact(
        self,
        contact: Mapping[str, Optional[str]] | None,
        assembler: SubmissionAssembler,
    ) -> SessionState:
        """Submit the collected answers with optional contact info.

        On failure the session stays in CollectingContact with its answers
        intact and the error propagates to the caller. A second submit that
        waited on an in-flight one sees Complete and raises InvalidTransition.
        """
        with self._lock:
            return self._submit_contact(contact, assembler)

    def _submit_contact(
        self,
        contact: Mapping[str, Optional[str]] | None,
        assembler: SubmissionAssembler,
    ) -> SessionState:
        if not isinstance(self.state, CollectingContact):
            raise InvalidTransition(f"cannot submit in state {self.state.name}")
        self.contact = {
            "instagram": (contact or {}).get("instagram"),
            "phone_number": (contact or {}).get("phone_number"),
        }
        if self.submission_id is None:
            self.submission_id = assembler.id_factory()
        submission_id = assembler.submit(self.answers, self.contact, self.submission_id)
        self.state = Complete(submission_id)
        return self.state

    def _question_view(self, question: Mapping[str, Any]) -> Dict[str, Any]:
        view: Dict[str, Any] = {
            "id": question["id"],
            "text": question["text"],
            "type": question["type"],
        }
        if question["type"] == QuestionKind.SCALE:
            view["scale_choices"] = list(self.scale_choices)
            view["hint"] = "Click a number to rate"
        elif question["type"] == QuestionKind.MULTIPLE_CHOICE:
            view["options"] = list(question.get("options") or [])
            view["hint"] = "Click an option to select"
        else:
            view["hint"] = "Type your answer and click Next"
        return view

    def view(self) -> Dict[str, Any]:
        state = self.state
        body: Dict[str, Any] = {"state": state.name, "total": self.total, "answered": len(self.answers)}
        if isinstance(state, Active):
            body["position"] = state.index + 1
            body["progress"] = f"Question {state.index + 1} of {self.total}"
            body["question"] = self._question_view(self.questions[state.index])
        elif isinstance(state, CollectingContact):
            body["prompt"] = "Leave your contact info for updates (optional)"
            body["fields"] = ["instagram", "phone_number"]
        elif isinstance(state, Complete):
            body["submission_id"] = state.submission_id
            body["redirect"] = THANK_YOU_PATH
        else:
            body["message"] = "No questions are available right now"
        return body


__all__ = [
    "QuestionnaireSession",
    "SessionState",
    "EmptyCatalog",
    "Active",
    "CollectingContact",
    "Complete",
    "THANK_YOU_PATH",
]
