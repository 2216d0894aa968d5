"""
User Blueprint.

Endpoints:
    GET /api/v1/users          department members (with persona)
    GET /api/v1/users/<id>
"""

from flask import Blueprint, jsonify, request

from dispatchdesk.auth import require_login
from dispatchdesk.services import user_service
from dispatchdesk.utils.errors import register_error_handlers

user_bp = Blueprint("users", __name__, url_prefix="/api/v1/users")
register_error_handlers(user_bp)


@user_bp.route("", methods=["GET"])
@require_login
def list_users():
    users = user_service.list_users()
    role = (request.args.get("role") or "").upper()
    if role:
        users = [u for u in users if u.role == role]
    return jsonify({"items": [u.to_dict() for u in users], "total": len(users)}), 200


@user_bp.route("/<int:user_id>", methods=["GET"])
@require_login
def get_user(user_id):
    return jsonify(user_service.get_user(user_id).to_dict()), 200
