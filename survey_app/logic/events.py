"""Domain event constants and publisher.

Defines event type constants and a simple publish() callable used by the
catalog and submission flows.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import logging

logger = logging.getLogger(__name__)

SUBMISSION_CREATED = "submission.created"
QUESTION_CREATED = "question.created"
QUESTION_DELETED = "question.deleted"
QUESTIONS_REORDERED = "questions.reordered"


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged for observability and buffered in-process.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


# In-memory buffer for domain events (test visibility); oldest dropped first
EVENT_BUFFER_SIZE = 1000
EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_SIZE)


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events

__all__ = [
    "SUBMISSION_CREATED",
    "QUESTION_CREATED",
    "QUESTION_DELETED",
    "QUESTIONS_REORDERED",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
    "EVENT_BUFFER_SIZE",
]
