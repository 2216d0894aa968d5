"""
Project Dispatch Desk
User Persona Assistant.

Summarises a department member's capability profile from every history
entry they authored, across all projects. Output is structured JSON
(PERSONA_SCHEMA) stored on the user as ``persona``.
"""

import logging
from datetime import date

from dispatchdesk.ai.prompt_registry import interpolate
from dispatchdesk.ai.workload import is_authored_by
from dispatchdesk.core.exceptions import GatewayError
from dispatchdesk.models import db

logger = logging.getLogger(__name__)

PERSONA_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "historySummary": {"type": "STRING"},
        "domains": {"type": "ARRAY", "items": {"type": "STRING"}},
        "workStyle": {"type": "STRING"},
        "improvementAreas": {"type": "STRING"},
    },
    "required": ["historySummary", "domains", "workStyle", "improvementAreas"],
}


def format_user_history(user, projects) -> str:
    lines = []
    for project in projects:
        for entry in project.history:
            if is_authored_by(entry, user):
                lines.append(f"[{entry.date.isoformat()}] {project.name} | {entry.entry_type}: {entry.content}")
    return "\n".join(lines)


class PersonaSynthesis:
    """Regenerates ``user.persona`` from the user's own work history."""

    def __init__(self, gateway, sequencer=None):
        self.gateway = gateway
        self.sequencer = sequencer

    def generate(self, user, projects, template: str, workflow_context: str) -> dict:
        """
        Returns:
            dict: user_id, persona (dict or None), stored, stale, skipped, error
        """
        result = {
            "user_id": user.id,
            "persona": None,
            "stored": False,
            "stale": False,
            "skipped": False,
            "error": None,
        }

        history = format_user_history(user, projects)
        if not history:
            result["skipped"] = True
            result["error"] = "no_history"
            return result

        prompt = interpolate(template, {
            "userName": user.name,
            "workflowContext": workflow_context,
            "userHistory": history,
        })

        key = ("persona", user.id)
        token = self.sequencer.begin(key) if self.sequencer else None
        try:
            data = self.gateway.generate_json(prompt, PERSONA_SCHEMA, purpose="user_persona")
        except GatewayError as exc:
            logger.warning("Persona synthesis failed for user %s: %s", user.id, exc)
            result["error"] = type(exc).__name__
            return result
        finally:
            current = self.sequencer.finish(key, token) if self.sequencer else True

        persona = {
            "summary": data["historySummary"],
            "domains": list(data["domains"]),
            "work_style": data["workStyle"],
            "improvement_areas": data["improvementAreas"],
        }
        result["persona"] = persona
        if not current:
            result["stale"] = True
            return result

        user.persona = persona
        user.last_persona_update = date.today()
        db.session.commit()
        result["stored"] = True
        return result
