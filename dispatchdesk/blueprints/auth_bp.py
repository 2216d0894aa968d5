"""
Auth Blueprint — mock session login.

Endpoints:
    POST /api/v1/auth/login    {email, password}  any password for a known email
    POST /api/v1/auth/logout
    GET  /api/v1/auth/me
"""

from flask import Blueprint, jsonify, request

from dispatchdesk.auth import current_user, login_user, logout_user
from dispatchdesk.core.exceptions import NotFoundError
from dispatchdesk.services import user_service
from dispatchdesk.utils.errors import E, api_error, register_error_handlers

auth_bp = Blueprint("auth", __name__, url_prefix="/api/v1/auth")
register_error_handlers(auth_bp)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}
    try:
        user = user_service.authenticate(data.get("email", ""), data.get("password"))
    except NotFoundError:
        return api_error(E.AUTH_REQUIRED, "Unknown email")
    login_user(user)
    return jsonify(user.to_dict()), 200


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"status": "logged_out"}), 200


@auth_bp.route("/me", methods=["GET"])
def me():
    user = current_user()
    if user is None:
        return api_error(E.AUTH_REQUIRED, "Not logged in")
    return jsonify(user.to_dict()), 200
