"""Duplicate-name risk check for newly registered projects."""

import logging

from dispatchdesk.ai.prompt_registry import interpolate
from dispatchdesk.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

NO_DUPLICATE_SENTINEL = "NO"


class DuplicateCheck:
    """Asks the model whether a new name looks like an existing project."""

    def __init__(self, gateway):
        self.gateway = gateway

    def check(self, new_name: str, existing_names: list[str], template: str) -> str | None:
        """Return the warning text, or None when there is nothing to warn about."""
        prompt = interpolate(template, {
            "newProjectName": new_name,
            "existingProjectNames": ", ".join(existing_names),
        })
        try:
            text = self.gateway.generate_text(prompt, purpose="duplicate_check")
        except GatewayError as exc:
            logger.info("Duplicate check skipped for %r: %s", new_name, exc)
            return None

        text = text.strip()
        if not text or text == NO_DUPLICATE_SENTINEL:
            return None
        return text
