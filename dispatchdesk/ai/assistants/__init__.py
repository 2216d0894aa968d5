"""
AI Assistants — one module per AI feature.

Each assistant receives the gateway (and optionally the request
sequencer) by injection, turns gateway failures into the feature's
fallback, and returns a result dict.
"""

from dispatchdesk.ai.assistants.architect_recommendation import ArchitectRecommendation
from dispatchdesk.ai.assistants.context_snapshot import ContextSnapshot
from dispatchdesk.ai.assistants.duplicate_check import DuplicateCheck
from dispatchdesk.ai.assistants.persona import PersonaSynthesis
from dispatchdesk.ai.assistants.workflow_synthesis import WorkflowSynthesis

__all__ = [
    "ArchitectRecommendation",
    "ContextSnapshot",
    "DuplicateCheck",
    "PersonaSynthesis",
    "WorkflowSynthesis",
]
