"""Domain event constants and publisher.

Defines the question lifecycle event types and a ``publish()`` callable used
by the question service after a successful commit.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Deque, Dict, List
import logging

logger = logging.getLogger(__name__)

QUESTION_CREATED = "question.created"
QUESTION_UPDATED = "question.updated"
QUESTION_DELETED = "question.deleted"
QUESTIONS_REORDERED = "questions.reordered"

# Oldest events are dropped once the buffer is full
EVENT_BUFFER_LIMIT = 1000


def publish(event_type: str, payload: Dict[str, Any]) -> None:
    """Publish a domain event.

    Events are logged for observability and the most recent ones are kept
    in-process so tests can observe them.
    """
    logger.info("event_publish type=%s payload=%s", event_type, payload)
    EVENT_BUFFER.append({"type": event_type, "payload": payload})


# In-memory buffer for domain events (test-only visibility)
EVENT_BUFFER: Deque[Dict[str, Any]] = deque(maxlen=EVENT_BUFFER_LIMIT)


def get_buffered_events(clear: bool = True) -> List[Dict[str, Any]]:
    """Return buffered domain events; optionally clear the buffer."""
    events = list(EVENT_BUFFER)
    if clear:
        EVENT_BUFFER.clear()
    return events


__all__ = [
    "QUESTION_CREATED",
    "QUESTION_UPDATED",
    "QUESTION_DELETED",
    "QUESTIONS_REORDERED",
    "EVENT_BUFFER_LIMIT",
    "publish",
    "get_buffered_events",
    "EVENT_BUFFER",
]
