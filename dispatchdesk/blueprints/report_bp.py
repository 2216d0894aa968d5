"""
Weekly Report Blueprint.

Endpoints:
    GET /api/v1/reports/weekly          ?start=YYYY-MM-DD&end=YYYY-MM-DD (default: this Mon-Sun)
    GET /api/v1/reports/weekly/export   same range, tab-separated text/plain
"""

from flask import Blueprint, Response, jsonify, request

from dispatchdesk.auth import require_login
from dispatchdesk.core.exceptions import ValidationError
from dispatchdesk.services import report_service
from dispatchdesk.utils.errors import register_error_handlers
from dispatchdesk.utils.helpers import parse_date_input

report_bp = Blueprint("reports", __name__, url_prefix="/api/v1/reports")
register_error_handlers(report_bp)


def _range_from_request():
    default_start, default_end = report_service.current_week()
    try:
        start = parse_date_input(request.args.get("start")) or default_start
        end = parse_date_input(request.args.get("end")) or default_end
    except ValueError as e:
        raise ValidationError(str(e), details={"range": "start/end must be YYYY-MM-DD"}) from e
    if start > end:
        raise ValidationError("start must not be after end", details={"start": start.isoformat(), "end": end.isoformat()})
    return start, end


@report_bp.route("/weekly", methods=["GET"])
@require_login
def weekly():
    start, end = _range_from_request()
    rows = report_service.weekly_rows(start, end)
    return jsonify({
        "start": start.isoformat(),
        "end": end.isoformat(),
        "rows": rows,
        "total": len(rows),
    }), 200


@report_bp.route("/weekly/export", methods=["GET"])
@require_login
def weekly_export():
    start, end = _range_from_request()
    text = report_service.to_tsv(report_service.weekly_rows(start, end))
    return Response(text, mimetype="text/plain", headers={
        "Content-Disposition": f"inline; filename=weekly_{start.isoformat()}_{end.isoformat()}.tsv",
    })
