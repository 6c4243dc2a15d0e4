"""Domain exceptions raised by the catalog, session and storage layers.

Each exception carries a stable `code` and HTTP `status` so the problem+json
handlers can render it without per-route branching.
"""

from __future__ import annotations


class SurveyError(Exception):
    code = "SURVEY_ERROR"
    status = 500
    title = "Error"

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail or self.title)
        self.detail = detail or self.title


class StorageError(SurveyError):
    code = "STORAGE_UNAVAILABLE"
    status = 503
    title = "Storage Unavailable"


class QuestionNotFound(SurveyError):
    code = "QUESTION_NOT_FOUND"
    status = 404
    title = "Question Not Found"

    def __init__(self, question_id: object) -> None:
        super().__init__(f"question {question_id} not found")
        self.question_id = question_id


class CatalogValidationError(SurveyError):
    code = "CATALOG_INVALID"
    status = 422
    title = "Unprocessable Entity"


class SessionNotFound(SurveyError):
    code = "SESSION_NOT_FOUND"
    status = 404
    title = "Session Not Found"


class InvalidTransition(SurveyError):
    code = "SESSION_INVALID_TRANSITION"
    status = 409
    title = "Conflict"


class AnswerRejected(SurveyError):
    code = "ANSWER_REJECTED"
    status = 422
    title = "Unprocessable Entity"


class SubmissionFailed(SurveyError):
    code = "SUBMISSION_FAILED"
    status = 503
    title = "Error submitting responses"


class AuthError(SurveyError):
    code = "AUTH_INVALID"
    status = 401
    title = "Unauthorized"


__all__ = [
    "SurveyError",
    "StorageError",
    "QuestionNotFound",
    "CatalogValidationError",
    "SessionNotFound",
    "InvalidTransition",
    "AnswerRejected",
    "SubmissionFailed",
    "AuthError",
]
