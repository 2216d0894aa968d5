"""
Prompt Template Blueprint.

Endpoints:
    GET /api/v1/prompts          all stored templates
    GET /api/v1/prompts/<key>    active template for a key
    PUT /api/v1/prompts/<id>     edit (ADMIN / MANAGER)
"""

from flask import Blueprint, jsonify, request

from dispatchdesk.auth import MANAGEMENT_ROLES, require_login, require_role
from dispatchdesk.services import prompt_service
from dispatchdesk.utils.errors import register_error_handlers

prompt_bp = Blueprint("prompts", __name__, url_prefix="/api/v1/prompts")
register_error_handlers(prompt_bp)


@prompt_bp.route("", methods=["GET"])
@require_login
def list_prompts():
    templates = prompt_service.list_templates()
    return jsonify({"items": [t.to_dict() for t in templates], "total": len(templates)}), 200


@prompt_bp.route("/<string:key>", methods=["GET"])
@require_login
def get_prompt(key):
    return jsonify(prompt_service.get_active(key).to_dict()), 200


@prompt_bp.route("/<int:template_id>", methods=["PUT"])
@require_login
@require_role(*MANAGEMENT_ROLES)
def update_prompt(template_id):
    data = request.get_json(silent=True) or {}
    template = prompt_service.update_template(template_id, data)
    return jsonify(template.to_dict()), 200
