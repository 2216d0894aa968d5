"""
Project Dispatch Desk
AI Blueprint.

Endpoints:
    SNAPSHOT     /api/v1/ai/projects/<id>/summary                     POST
    DUPLICATE    /api/v1/ai/duplicate-check                           POST
    WORKFLOW     /api/v1/ai/workflow-context                          POST  (ADMIN / MANAGER)
    PERSONA      /api/v1/ai/users/<id>/persona                        POST  (ADMIN / MANAGER)
    ARCHITECT    /api/v1/ai/projects/<id>/architect-recommendations   POST  (ADMIN / MANAGER)
    STATUS       /api/v1/ai/status                                    GET

Generation failures never surface as HTTP errors: each endpoint answers
200 with the feature's fallback and an ``error`` classification.
"""

from flask import Blueprint, current_app, jsonify, request

from dispatchdesk.ai.assistants import (
    ArchitectRecommendation,
    ContextSnapshot,
    DuplicateCheck,
    PersonaSynthesis,
    WorkflowSynthesis,
)
from dispatchdesk.ai.gateway import TextGenerationGateway
from dispatchdesk.ai.request_tracker import RequestSequencer
from dispatchdesk.auth import MANAGEMENT_ROLES, require_login, require_role
from dispatchdesk.core.exceptions import ValidationError
from dispatchdesk.services import project_service, prompt_service, user_service
from dispatchdesk.utils.errors import register_error_handlers

ai_bp = Blueprint("ai", __name__, url_prefix="/api/v1/ai")
register_error_handlers(ai_bp)

# ── Rate limiting ─────────────────────────────────────────────────────────
from dispatchdesk import limiter  # noqa: E402

_ai_generate_limit = limiter.shared_limit("30/minute", scope="ai_generate")


# ── Lazy singletons stored on Flask app (test-isolation safe) ───────────────

def get_gateway() -> TextGenerationGateway:
    if not hasattr(current_app, "_ai_gateway"):
        current_app._ai_gateway = TextGenerationGateway.from_config(current_app.config)
    return current_app._ai_gateway


def _get_sequencer() -> RequestSequencer:
    if not hasattr(current_app, "_ai_sequencer"):
        current_app._ai_sequencer = RequestSequencer()
    return current_app._ai_sequencer


def _template(key: str) -> str:
    return prompt_service.template_text(key, current_app.config.get("PROMPTS_DIR"))


# ══════════════════════════════════════════════════════════════════════════
# CONTEXT SNAPSHOT / DUPLICATE CHECK
# ══════════════════════════════════════════════════════════════════════════

@ai_bp.route("/projects/<int:project_id>/summary", methods=["POST"])
@require_login
@_ai_generate_limit
def project_summary(project_id):
    project = project_service.get_project(project_id)
    assistant = ContextSnapshot(get_gateway(), _get_sequencer())
    result = assistant.generate(
        project,
        template=_template("PROJECT_SUMMARY"),
        workflow_context=_template("WORKFLOW_CONTEXT"),
    )
    return jsonify(result), 200


@ai_bp.route("/duplicate-check", methods=["POST"])
@require_login
@_ai_generate_limit
def duplicate_check():
    data = request.get_json(silent=True) or {}
    name = str(data.get("name", "") or "").strip()
    if not name:
        raise ValidationError("name is required", details={"name": "required"})
    existing = [p.name for p in project_service.all_projects()]
    warning = DuplicateCheck(get_gateway()).check(name, existing, _template("DUPLICATE_CHECK"))
    return jsonify({"name": name, "warning": warning, "is_duplicate_risk": warning is not None}), 200


# ══════════════════════════════════════════════════════════════════════════
# MANAGEMENT FEATURES
# ══════════════════════════════════════════════════════════════════════════

@ai_bp.route("/workflow-context", methods=["POST"])
@require_login
@require_role(*MANAGEMENT_ROLES)
@_ai_generate_limit
def workflow_context():
    assistant = WorkflowSynthesis(
        get_gateway(),
        _get_sequencer(),
        max_prompt_chars=current_app.config.get("WORKFLOW_PROMPT_MAX_CHARS", 120000),
        prompts_dir=current_app.config.get("PROMPTS_DIR"),
    )
    result = assistant.synthesize(project_service.all_projects())
    return jsonify(result), 200


@ai_bp.route("/users/<int:user_id>/persona", methods=["POST"])
@require_login
@require_role(*MANAGEMENT_ROLES)
@_ai_generate_limit
def user_persona(user_id):
    user = user_service.get_user(user_id)
    assistant = PersonaSynthesis(get_gateway(), _get_sequencer())
    result = assistant.generate(
        user,
        project_service.all_projects(),
        template=_template("USER_PERSONA"),
        workflow_context=_template("WORKFLOW_CONTEXT"),
    )
    result["user"] = user.to_dict()
    return jsonify(result), 200


@ai_bp.route("/projects/<int:project_id>/architect-recommendations", methods=["POST"])
@require_login
@require_role(*MANAGEMENT_ROLES)
@_ai_generate_limit
def architect_recommendations(project_id):
    project = project_service.get_project(project_id)
    assistant = ArchitectRecommendation(get_gateway(), _get_sequencer())
    result = assistant.recommend(
        project,
        user_service.architect_candidates(),
        project_service.all_projects(),
        template=_template("ARCHITECT_RECOMMENDATION"),
    )
    return jsonify(result), 200


# ══════════════════════════════════════════════════════════════════════════
# STATUS
# ══════════════════════════════════════════════════════════════════════════

@ai_bp.route("/status", methods=["GET"])
@require_login
def status():
    gateway = get_gateway()
    return jsonify({
        "configured": gateway.configured,
        "provider": type(gateway.provider).__name__ if gateway.provider else None,
        "model": gateway.model,
        "in_flight": _get_sequencer().snapshot(),
    }), 200
