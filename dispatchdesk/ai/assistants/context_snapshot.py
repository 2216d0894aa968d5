"""
Project Dispatch Desk
Context Snapshot Assistant.

Pipeline:
    1. Take the 10 most recent history entries of a project
    2. Fill the PROJECT_SUMMARY template (with the department workflow context)
    3. Call the gateway for free text
    4. Store a successful result as ``project.ai_summary``

Failures never raise: the caller gets a fallback message in ``summary``
and nothing is stored.
"""

import logging

from dispatchdesk.ai.prompt_registry import interpolate
from dispatchdesk.core.exceptions import GatewayError, ProviderUnavailable
from dispatchdesk.models import db

logger = logging.getLogger(__name__)

RECENT_ENTRY_LIMIT = 10

NO_CREDENTIAL_MESSAGE = "API Key not configured. Unable to generate AI summary."
FAILURE_MESSAGE = "Error connecting to AI service."
EMPTY_MESSAGE = "Could not generate summary."


def recent_entries(project, limit: int = RECENT_ENTRY_LIMIT) -> list:
    """The ``limit`` most recent entries by date; ties keep history order."""
    return sorted(project.history, key=lambda e: e.date, reverse=True)[:limit]


def format_entries(entries) -> str:
    return "\n".join(f"[{e.date.isoformat()}] {e.entry_type}: {e.content}" for e in entries)


class ContextSnapshot:
    """Generates the short "where are we" summary shown on a project."""

    def __init__(self, gateway, sequencer=None):
        self.gateway = gateway
        self.sequencer = sequencer

    def generate(self, project, template: str, workflow_context: str) -> dict:
        """
        Returns:
            dict: project_id, summary (text or fallback), stored (bool),
                  stale (bool), error (classification or None)
        """
        result = {
            "project_id": project.id,
            "summary": None,
            "stored": False,
            "stale": False,
            "error": None,
        }

        prompt = interpolate(template, {
            "projectName": project.name,
            "workflowContext": workflow_context,
            "history": format_entries(recent_entries(project)),
        })

        key = ("summary", project.id)
        token = self.sequencer.begin(key) if self.sequencer else None
        try:
            text = self.gateway.generate_text(prompt, purpose="project_summary")
        except ProviderUnavailable:
            result["summary"] = NO_CREDENTIAL_MESSAGE
            result["error"] = "provider_unavailable"
            return result
        except GatewayError as exc:
            logger.warning("Context snapshot failed for project %s: %s", project.id, exc)
            result["summary"] = FAILURE_MESSAGE
            result["error"] = "request_failed"
            return result
        finally:
            current = self.sequencer.finish(key, token) if self.sequencer else True

        if not text:
            result["summary"] = EMPTY_MESSAGE
            result["error"] = "empty_response"
            return result

        result["summary"] = text
        if not current:
            result["stale"] = True
            return result

        project.ai_summary = text
        db.session.commit()
        result["stored"] = True
        return result
