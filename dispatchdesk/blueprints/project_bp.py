"""
Project Blueprint — dispatch pool, project detail, history log, lifecycle.

Endpoints:
    GET    /api/v1/projects                         ?q= search name/code/manager
    POST   /api/v1/projects                         register (NEW / OPPORTUNITY)
    GET    /api/v1/projects/<id>                    detail with history + contributors
    PATCH  /api/v1/projects/<id>/metadata           created_at, tags, architect_id
    POST   /api/v1/projects/<id>/toggle-pause       PAUSED <-> IN_PROGRESS
    PATCH  /api/v1/projects/<id>/status
    PATCH  /api/v1/projects/<id>/stage
    POST   /api/v1/projects/<id>/logs               prepend a history entry
    PUT    /api/v1/projects/<id>/logs/<log_id>      edit content/date, re-sort
    GET    /api/v1/projects/<id>/attachments        all attachments in history
"""

from flask import Blueprint, jsonify, request

from dispatchdesk.auth import current_user, require_login
from dispatchdesk.services import project_service
from dispatchdesk.utils.errors import register_error_handlers

project_bp = Blueprint("projects", __name__, url_prefix="/api/v1/projects")
register_error_handlers(project_bp)


@project_bp.route("", methods=["GET"])
@require_login
def list_projects():
    projects = project_service.list_projects(request.args.get("q"))
    return jsonify({"items": [p.to_dict() for p in projects], "total": len(projects)}), 200


@project_bp.route("", methods=["POST"])
@require_login
def register_project():
    data = request.get_json(silent=True) or {}
    project = project_service.register_project(data)
    return jsonify(project.to_dict(include_history=True)), 201


@project_bp.route("/<int:project_id>", methods=["GET"])
@require_login
def get_project(project_id):
    project = project_service.get_project(project_id)
    return jsonify(project.to_dict(include_history=True)), 200


@project_bp.route("/<int:project_id>/metadata", methods=["PATCH"])
@require_login
def update_metadata(project_id):
    data = request.get_json(silent=True) or {}
    project = project_service.update_metadata(project_id, data)
    return jsonify(project.to_dict()), 200


@project_bp.route("/<int:project_id>/toggle-pause", methods=["POST"])
@require_login
def toggle_pause(project_id):
    project = project_service.toggle_pause(project_id)
    return jsonify(project.to_dict()), 200


@project_bp.route("/<int:project_id>/status", methods=["PATCH"])
@require_login
def set_status(project_id):
    data = request.get_json(silent=True) or {}
    project = project_service.set_status(project_id, data.get("status"))
    return jsonify(project.to_dict()), 200


@project_bp.route("/<int:project_id>/stage", methods=["PATCH"])
@require_login
def set_stage(project_id):
    data = request.get_json(silent=True) or {}
    project = project_service.set_stage(project_id, data.get("stage"))
    return jsonify(project.to_dict()), 200


# ── History log ──────────────────────────────────────────────────────────────

@project_bp.route("/<int:project_id>/logs", methods=["POST"])
@require_login
def append_log(project_id):
    data = request.get_json(silent=True) or {}
    entry = project_service.append_log(project_id, data, author=current_user())
    return jsonify(entry.to_dict()), 201


@project_bp.route("/<int:project_id>/logs/<int:log_id>", methods=["PUT"])
@require_login
def edit_log(project_id, log_id):
    data = request.get_json(silent=True) or {}
    entry = project_service.edit_log(project_id, log_id, data)
    project = project_service.get_project(project_id)
    return jsonify({
        "entry": entry.to_dict(),
        "history": [e.to_dict() for e in project.history],
    }), 200


@project_bp.route("/<int:project_id>/attachments", methods=["GET"])
@require_login
def list_attachments(project_id):
    project = project_service.get_project(project_id)
    items = project.attachments()
    return jsonify({"items": items, "total": len(items)}), 200
