"""Dashboard aggregates for the dispatch pool."""

from __future__ import annotations

from sqlalchemy import func

from dispatchdesk.models import db
from dispatchdesk.models.project import BUSINESS_UNITS, Project


def compute_dashboard() -> dict:
    """Status counts and projects per business unit (every known unit listed, zeros included)."""
    status_counts = dict(
        db.session.query(Project.status, func.count(Project.id)).group_by(Project.status).all()
    )
    unit_counts = dict(
        db.session.query(Project.business_unit, func.count(Project.id)).group_by(Project.business_unit).all()
    )

    by_unit = [{"business_unit": u, "count": unit_counts.pop(u, 0)} for u in BUSINESS_UNITS]
    by_unit.extend({"business_unit": u, "count": n} for u, n in sorted(unit_counts.items()))

    return {
        "total": sum(status_counts.values()),
        "in_progress": status_counts.get("IN_PROGRESS", 0),
        "paused": status_counts.get("PAUSED", 0),
        "by_status": status_counts,
        "by_business_unit": by_unit,
    }
