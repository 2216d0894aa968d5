"""
Dashboard Blueprint.

Endpoints:
    GET /api/v1/dashboard   status counts + projects per business unit
"""

from flask import Blueprint, jsonify

from dispatchdesk.auth import require_login
from dispatchdesk.services.dashboard_service import compute_dashboard

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/v1/dashboard")


@dashboard_bp.route("", methods=["GET"])
@require_login
def dashboard():
    return jsonify(compute_dashboard()), 200
