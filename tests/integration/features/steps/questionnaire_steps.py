"""Step definitions for the respondent questionnaire and admin review.

Every step goes through the HTTP surface, so the same scenarios run against
the in-process app and a deployed service.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

from behave import given, then, when

_QUOTED = re.compile(r'"([^"]*)"')

# Answers used for the questions a scenario does not care about
_FILLER = {"scale": "5", "multiple_choice": None, "text": "n/a"}


def _quoted(text: str) -> List[str]:
    return _QUOTED.findall(text)


def _post(context: Any, path: str, **kwargs: Any):
    resp = context.client.post(path, **kwargs)
    context.last_response = resp
    return resp


def _question_id(context: Any, text: str) -> int:
    assert text in context.questions, f"unknown question {text!r}; known: {sorted(context.questions)}"
    return context.questions[text]["id"]


def _complete_questionnaire(context: Any, overrides: Dict[int, str]) -> str:
    start = _post(context, "/api/v1/sessions")
    assert start.status_code == 201, start.text
    view = start.json()
    sid = view["session_id"]
    while view["state"] == "active":
        question = view["question"]
        value = overrides.get(question["id"])
        if value is None:
            value = _FILLER.get(question["type"]) or (question.get("options") or ["x"])[0]
        resp = _post(context, f"/api/v1/sessions/{sid}/answers", json={"response": value})
        assert resp.status_code == 200, resp.text
        view = resp.json()
    done = _post(context, f"/api/v1/sessions/{sid}/contact", json={})
    assert done.status_code == 200, done.text
    return done.json()["submission_id"]


@given("the admin is signed in")
def step_admin_signed_in(context: Any) -> None:
    resp = _post(context, "/login", json={"email": context.admin_email, "password": context.admin_password})
    assert resp.status_code == 200, resp.text
    context.admin_headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}


@given("the catalog contains")
def step_catalog_contains(context: Any) -> None:
    existing = context.client.get("/admin/questions", headers=context.admin_headers).json()["questions"]
    for question in existing:
        context.client.delete(f"/admin/questions/{question['id']}", headers=context.admin_headers)

    for row in context.table:
        options = [o.strip() for o in (row["options"] or "").split(",") if o.strip()]
        resp = _post(
            context,
            "/admin/questions",
            json={"text": row["text"], "type": row["type"], "options": options},
            headers=context.admin_headers,
        )
        assert resp.status_code == 201, resp.text
        context.questions[row["text"]] = resp.json()


@given('respondents rated "{text}" with {values}')
def step_respondents_rated(context: Any, text: str, values: str) -> None:
    qid = _question_id(context, text)
    for value in _quoted(values):
        context.submission_ids.append(_complete_questionnaire(context, {qid: value}))


@when("a respondent starts a questionnaire")
def step_start(context: Any) -> None:
    resp = _post(context, "/api/v1/sessions")
    assert resp.status_code == 201, resp.text
    context.session_id = resp.json()["session_id"]


@when('the respondent answers "{value}"')
@when('the respondent answers ""')
def step_answer(context: Any, value: str = "") -> None:
    _post(context, f"/api/v1/sessions/{context.session_id}/answers", json={"response": value})


@when('the respondent submits contact instagram "{handle}"')
def step_submit_contact(context: Any, handle: str) -> None:
    resp = _post(context, f"/api/v1/sessions/{context.session_id}/contact", json={"instagram": handle})
    assert resp.status_code == 200, resp.text


@when('the admin filters responses by "{text}" sorted "{direction}"')
def step_filter_responses(context: Any, text: str, direction: str) -> None:
    qid = _question_id(context, text)
    resp = context.client.get(
        "/admin/responses",
        params={"question_id": qid, "sort": direction},
        headers=context.admin_headers,
    )
    context.last_response = resp
    assert resp.status_code == 200, resp.text


@when('the admin deletes "{text}" through the alternate admin path')
def step_delete_alt(context: Any, text: str) -> None:
    qid = _question_id(context, text)
    resp = context.client.delete(f"{context.admin_alt_path}/questions/{qid}", headers=context.admin_headers)
    context.last_response = resp
    assert resp.status_code == 200, resp.text


@then('the respondent sees "{progress}"')
def step_sees_progress(context: Any, progress: str) -> None:
    view = context.client.get(f"/api/v1/sessions/{context.session_id}").json()
    assert view.get("progress") == progress, view


@then('the session state is "{state}"')
def step_session_state(context: Any, state: str) -> None:
    view = context.client.get(f"/api/v1/sessions/{context.session_id}").json()
    assert view["state"] == state, view


@then("the response is a problem with status {status:d}")
def step_problem(context: Any, status: int) -> None:
    resp = context.last_response
    assert resp.status_code == status, resp.text
    assert resp.headers["content-type"].startswith("application/problem+json")


@then("the admin sees {count:d} submission with {answers:d} answers sharing one id")
def step_admin_sees_submission(context: Any, count: int, answers: int) -> None:
    body = context.client.get("/admin/responses", headers=context.admin_headers).json()
    groups = body["submissions"]
    assert len(groups) == count, groups
    assert len(groups[0]["responses"]) == answers
    assert {r["submission_id"] for r in groups[0]["responses"]} == {groups[0]["submission_id"]}


@then("the answers read {values}")
def step_answers_read(context: Any, values: str) -> None:
    got = [a["response"] for a in context.last_response.json()["answers"]]
    assert got == _quoted(values), got


@then("{count:d} answers were deleted")
def step_answers_deleted(context: Any, count: int) -> None:
    assert context.last_response.json()["answers_deleted"] == count


@then("the catalog lists {texts}")
def step_catalog_lists(context: Any, texts: str) -> None:
    listed = context.client.get("/api/v1/questions").json()["questions"]
    assert [q["text"] for q in listed] == _quoted(texts)
