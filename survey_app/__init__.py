"""FastAPI application package for the Survey Feedback Service.

Exposes the application factory. Business logic lives in
`survey_app/logic/`, storage access in `survey_app/db/` and route handlers in
`survey_app/routes/`.
"""

from __future__ import annotations

from survey_app.main import create_app

__all__ = ["create_app"]
