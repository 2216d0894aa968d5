"""Dispatch-pool project service: registration, history log, lifecycle changes.

All functions raise ``NotFoundError`` / ``ValidationError`` from
``dispatchdesk.core.exceptions``; blueprints map them to HTTP responses.
"""

from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import func, or_

from dispatchdesk.core.exceptions import NotFoundError, ValidationError
from dispatchdesk.models import db
from dispatchdesk.models.project import (
    BUSINESS_UNITS,
    PROJECT_STAGES,
    PROJECT_STATUSES,
    Attachment,
    LogEntry,
    Project,
)
from dispatchdesk.models.user import User
from dispatchdesk.utils.helpers import parse_date_input, split_tags

logger = logging.getLogger(__name__)

DEFAULT_MANAGER = "未分配"
DEFAULT_DESCRIPTION = "从派单池新建"
DEFAULT_AUTHOR = "当前用户"


# ── Queries ──────────────────────────────────────────────────────────────────

def get_project(project_id: int) -> Project:
    project = db.session.get(Project, project_id)
    if project is None:
        raise NotFoundError(resource="Project", resource_id=project_id)
    return project


def list_projects(search: str | None = None) -> list[Project]:
    """Dispatch pool, newest first; ``search`` matches name, code or manager (case-insensitive)."""
    query = Project.query
    term = (search or "").strip().lower()
    if term:
        like = f"%{term}%"
        query = query.filter(or_(
            func.lower(Project.name).like(like),
            func.lower(Project.code).like(like),
            func.lower(Project.manager).like(like),
        ))
    return query.order_by(Project.id.desc()).all()


def all_projects() -> list[Project]:
    return Project.query.order_by(Project.id.asc()).all()


# ── Registration ─────────────────────────────────────────────────────────────

def register_project(data: dict) -> Project:
    """Create a NEW project at stage OPPORTUNITY with an empty history."""
    name = str(data.get("name", "") or "").strip()
    if not name:
        raise ValidationError("name is required", details={"name": "required"})

    business_unit = str(data.get("business_unit", "") or "").strip() or BUSINESS_UNITS[0]
    if business_unit not in BUSINESS_UNITS:
        raise ValidationError(
            f"Invalid business_unit: {business_unit}",
            details={"business_unit": list(BUSINESS_UNITS)},
        )

    today = date.today()
    project = Project(
        code=str(data.get("code", "") or "").strip(),
        name=name,
        business_unit=business_unit,
        manager=str(data.get("manager", "") or "").strip() or DEFAULT_MANAGER,
        description=str(data.get("description", "") or "").strip() or DEFAULT_DESCRIPTION,
        current_stage="OPPORTUNITY",
        status="NEW",
        tags=[],
        created_at=today,
        last_active_at=today,
    )
    db.session.add(project)
    db.session.commit()
    logger.info("Project registered id=%s code=%s", project.id, project.code)
    return project


# ── History log ──────────────────────────────────────────────────────────────

def _attachment_from(data: dict) -> Attachment:
    name = str(data.get("name", "") or "").strip()
    if not name:
        raise ValidationError("attachment name is required", details={"attachments": "name required"})
    size = data.get("size", "")
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        size = f"{size / 1024:.1f} KB"
    file_type = str(data.get("type", "") or "").strip()
    if not file_type:
        file_type = name.rsplit(".", 1)[-1] if "." in name else "file"
    return Attachment(name=name, size=str(size), file_type=file_type)


def append_log(project_id: int, data: dict, *, author: User | None = None) -> LogEntry:
    """
    Prepend a history entry.

    Entries with attachments are DELIVERABLE, others NOTE. The project's
    ``last_active_at`` moves to the entry date only when that date is later.
    """
    project = get_project(project_id)

    content = str(data.get("content", "") or "").strip()
    if not content:
        raise ValidationError("content is required", details={"content": "required"})
    try:
        entry_date = parse_date_input(data.get("date")) or date.today()
    except ValueError as e:
        raise ValidationError(str(e), details={"date": "invalid"}) from e

    attachments = [_attachment_from(a) for a in (data.get("attachments") or [])]

    if author is not None:
        author_name, author_id = author.name, author.id
    else:
        author_name = str(data.get("author", "") or "").strip() or DEFAULT_AUTHOR
        author_id = None

    entry = LogEntry(
        date=entry_date,
        author=author_name,
        author_id=author_id,
        content=content,
        entry_type="DELIVERABLE" if attachments else "NOTE",
        attachments=attachments,
    )
    project.history.insert(0, entry)
    if entry_date > project.last_active_at:
        project.last_active_at = entry_date
    db.session.commit()
    logger.info("Log appended project=%s entry=%s type=%s", project.id, entry.id, entry.entry_type)
    return entry


def edit_log(project_id: int, log_id: int, data: dict) -> LogEntry:
    """Change content and/or date of an entry, then re-sort history by date (newest first)."""
    project = get_project(project_id)
    entry = next((e for e in project.history if e.id == log_id), None)
    if entry is None:
        raise NotFoundError(resource="LogEntry", resource_id=log_id)

    if "content" in data:
        content = str(data.get("content") or "").strip()
        if not content:
            raise ValidationError("content is required", details={"content": "required"})
        entry.content = content
    if "date" in data:
        try:
            new_date = parse_date_input(data.get("date"))
        except ValueError as e:
            raise ValidationError(str(e), details={"date": "invalid"}) from e
        if new_date is None:
            raise ValidationError("date is required", details={"date": "required"})
        entry.date = new_date

    project.history.sort(key=lambda e: e.date, reverse=True)
    project.history.reorder()
    db.session.commit()
    return entry


# ── Lifecycle ────────────────────────────────────────────────────────────────

def toggle_pause(project_id: int) -> Project:
    """PAUSED ↔ IN_PROGRESS. Other statuses are left unchanged."""
    project = get_project(project_id)
    if project.status == "PAUSED":
        project.status = "IN_PROGRESS"
    elif project.status == "IN_PROGRESS":
        project.status = "PAUSED"
    else:
        logger.info("toggle_pause ignored for project %s in status %s", project.id, project.status)
        return project
    db.session.commit()
    return project


def set_status(project_id: int, status: str) -> Project:
    project = get_project(project_id)
    status = str(status or "").strip().upper()
    if status not in PROJECT_STATUSES:
        raise ValidationError(f"Invalid status: {status}", details={"status": list(PROJECT_STATUSES)})
    project.status = status
    db.session.commit()
    return project


def set_stage(project_id: int, stage: str) -> Project:
    project = get_project(project_id)
    stage = str(stage or "").strip().upper()
    if stage not in PROJECT_STAGES:
        raise ValidationError(f"Invalid stage: {stage}", details={"stage": list(PROJECT_STAGES)})
    project.current_stage = stage
    db.session.commit()
    return project


def update_metadata(project_id: int, data: dict) -> Project:
    """Overwrite created date and tags; set or clear the architect when given."""
    project = get_project(project_id)

    if "created_at" in data:
        try:
            created = parse_date_input(data.get("created_at"))
        except ValueError as e:
            raise ValidationError(str(e), details={"created_at": "invalid"}) from e
        if created is None:
            raise ValidationError("created_at is required", details={"created_at": "required"})
        project.created_at = created

    if "tags" in data:
        project.tags = split_tags(data.get("tags"))

    if "architect_id" in data:
        architect_id = data.get("architect_id")
        if architect_id in (None, ""):
            project.architect_id = None
        else:
            try:
                architect_id = int(architect_id)
            except (TypeError, ValueError) as e:
                raise ValidationError("architect_id must be an integer", details={"architect_id": "invalid"}) from e
            if db.session.get(User, architect_id) is None:
                raise NotFoundError(resource="User", resource_id=architect_id)
            project.architect_id = architect_id

    db.session.commit()
    return project
