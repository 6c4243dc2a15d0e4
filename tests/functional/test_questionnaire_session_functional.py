"""Functional tests for the questionnaire session state machine."""

from __future__ import annotations

import threading
import time

import pytest

from survey_app.logic.errors import AnswerRejected, InvalidTransition, StorageError, SubmissionFailed
from survey_app.logic.questionnaire_session import (
    Active,
    CollectingContact,
    Complete,
    EmptyCatalog,
    QuestionnaireSession,
)
from survey_app.logic.submission_assembler import SubmissionAssembler

QUESTIONS = [
    {"id": 11, "text": "Rate the show", "type": "scale", "options": [], "order": 0},
    {"id": 12, "text": "Best song?", "type": "multiple_choice", "options": ["Intro", "Encore"], "order": 1},
    {"id": 13, "text": "Anything else?", "type": "text", "options": [], "order": 2},
]


class RecordingStorage:
    """Storage double that can fail a configurable number of inserts."""

    def __init__(self, failures: int = 0) -> None:
        self.failures = failures
        self.inserted = []

    def insert(self, table_name, rows):
        if self.failures:
            self.failures -= 1
            raise StorageError("insert failed")
        self.inserted.append((table_name, list(rows)))
        return list(rows)


def _ids():
    counter = iter(range(1, 100))
    return lambda: f"sub-{next(counter)}"


def test_session_starts_on_first_question():
    session = QuestionnaireSession.start(QUESTIONS)

    assert session.state == Active(0)
    view = session.view()
    assert view["progress"] == "Question 1 of 3"
    assert view["question"]["scale_choices"] == list(range(1, 11))


def test_n_answers_reach_contact_step_with_n_distinct_entries():
    session = QuestionnaireSession(QUESTIONS)

    assert session.answer(8) == Active(1)
    assert session.answer("Encore") == Active(2)
    assert session.answer("Great night") == CollectingContact()

    assert session.answers == {11: "8", 12: "Encore", 13: "Great night"}
    assert list(session.answers) == [11, 12, 13]


def test_multiple_choice_view_lists_options():
    session = QuestionnaireSession(QUESTIONS)
    session.answer("5")

    question = session.view()["question"]
    assert question["options"] == ["Intro", "Encore"]
    assert "scale_choices" not in question


def test_empty_catalog_session_cannot_advance():
    session = QuestionnaireSession.start([])

    assert session.state == EmptyCatalog()
    assert session.view()["state"] == "empty_catalog"
    with pytest.raises(InvalidTransition):
        session.answer("1")
    with pytest.raises(InvalidTransition):
        session.submit_contact({}, SubmissionAssembler(RecordingStorage()))


@pytest.mark.parametrize("response", ["", None, False])
def test_empty_answer_is_rejected_and_state_unchanged(response):
    session = QuestionnaireSession(QUESTIONS)

    with pytest.raises(AnswerRejected):
        session.answer(response)
    assert session.state == Active(0)
    assert session.answers == {}


def test_submit_before_last_answer_is_invalid():
    session = QuestionnaireSession(QUESTIONS)
    session.answer(3)

    with pytest.raises(InvalidTransition):
        session.submit_contact({}, SubmissionAssembler(RecordingStorage()))


def test_submit_persists_batch_and_completes():
    storage = RecordingStorage()
    assembler = SubmissionAssembler(storage, id_factory=_ids())
    session = QuestionnaireSession(QUESTIONS)
    for response in (10, "Intro", "Loved it"):
        session.answer(response)

    state = session.submit_contact({"instagram": "@fan", "phone_number": ""}, assembler)

    assert state == Complete("sub-1")
    table, rows = storage.inserted[0]
    assert table == "responses"
    assert {r["submission_id"] for r in rows} == {"sub-1"}
    assert [r["phone_number"] for r in rows] == [None, None, None]
    assert session.view()["redirect"] == "/thank-you"
    with pytest.raises(InvalidTransition):
        session.answer("again")


def test_failed_submit_keeps_answers_and_retries_same_submission_id():
    storage = RecordingStorage(failures=1)
    assembler = SubmissionAssembler(storage, id_factory=_ids())
    session = QuestionnaireSession(QUESTIONS)
    for response in (2, "Encore", "meh"):
        session.answer(response)

    with pytest.raises(SubmissionFailed):
        session.submit_contact({}, assembler)

    assert session.state == CollectingContact()
    assert session.answers == {11: "2", 12: "Encore", 13: "meh"}
    assert storage.inserted == []

    assert session.submit_contact({}, assembler) == Complete("sub-1")
    assert {r["submission_id"] for r in storage.inserted[0][1]} == {"sub-1"}


def test_custom_scale_range_is_offered():
    session = QuestionnaireSession(QUESTIONS[:1], scale_choices=range(0, 6))

    assert session.view()["question"]["scale_choices"] == [0, 1, 2, 3, 4, 5]


class SlowStorage(RecordingStorage):
    def insert(self, table_name, rows):
        time.sleep(0.2)
        return super().insert(table_name, rows)


def test_concurrent_submits_persist_one_batch():
    storage = SlowStorage()
    assembler = SubmissionAssembler(storage, id_factory=_ids())
    session = QuestionnaireSession(QUESTIONS[:2])
    session.answer(6)
    session.answer("Intro")
    outcomes = []

    def submit():
        try:
            outcomes.append(session.submit_contact({}, assembler))
        except InvalidTransition as exc:
            outcomes.append(exc)

    threads = [threading.Thread(target=submit) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(storage.inserted) == 1
    assert len(storage.inserted[0][1]) == 2
    assert sum(isinstance(o, Complete) for o in outcomes) == 1
    assert sum(isinstance(o, InvalidTransition) for o in outcomes) == 1
    assert session.state == Complete("sub-1")
