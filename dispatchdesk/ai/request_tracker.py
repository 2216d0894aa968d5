"""
Project Dispatch Desk
AI request sequencing.

Each AI generation for an entity (a project summary, a user persona, the
department workflow) takes a token from ``RequestSequencer.begin`` and
hands it back to ``finish`` when the response arrives. ``finish`` answers
whether the result may be written: a later request for the same entity
supersedes earlier ones, so a slow, stale response is discarded instead
of overwriting a newer result.

Usage:
    token = sequencer.begin(("summary", project_id))
    text = gateway.generate_text(prompt)
    if sequencer.finish(("summary", project_id), token):
        project.ai_summary = text
"""

import itertools
import logging
import threading

logger = logging.getLogger(__name__)


class RequestSequencer:
    """Thread-safe per-entity monotonic request tokens with in-flight tracking.

    State for an entity is kept only while it has requests running.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._latest: dict = {}
        self._in_flight: dict = {}

    def begin(self, entity_key) -> int:
        with self._lock:
            token = next(self._counter)
            self._latest[entity_key] = token
            self._in_flight[entity_key] = self._in_flight.get(entity_key, 0) + 1
            return token

    def finish(self, entity_key, token: int) -> bool:
        """Mark one request done; return whether its result may be written."""
        with self._lock:
            current = self._latest.get(entity_key) == token
            remaining = self._in_flight.get(entity_key, 0) - 1
            if remaining > 0:
                self._in_flight[entity_key] = remaining
            else:
                self._in_flight.pop(entity_key, None)
                self._latest.pop(entity_key, None)
        if not current:
            logger.info("Discarding stale AI result for %s (token %s)", entity_key, token)
        return current

    def snapshot(self) -> dict:
        """Entity keys with requests still running, for status reporting."""
        with self._lock:
            return {str(k): n for k, n in self._in_flight.items()}
