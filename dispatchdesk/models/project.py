"""
Project Dispatch Desk
Project domain models — dispatch pool projects and their work history.

Models:
    - Project: a registered engineering project moving through stages
    - LogEntry: a dated, authored history record owned by one project
    - Attachment: file metadata owned by one log entry (no bytes stored)
"""

from datetime import date

from sqlalchemy.ext.orderinglist import ordering_list

from dispatchdesk.models import db


# ── Constants ────────────────────────────────────────────────────────────────

PROJECT_STATUSES = ("NEW", "ASSIGNED", "IN_PROGRESS", "PAUSED", "COMPLETED", "ARCHIVED")

# Stage key → display label (labels appear in reports)
PROJECT_STAGES = {
    "OPPORTUNITY": "Opportunity/Presales",
    "BLUEPRINT": "Blueprint Design",
    "BIDDING": "Bidding/Tender",
    "IMPLEMENTATION": "Implementation/Delivery",
    "MAINTENANCE": "Maintenance/Optimization",
}

LOG_ENTRY_TYPES = ("MEETING", "DELIVERABLE", "DECISION", "NOTE")

BUSINESS_UNITS = (
    "Marketing & Service",
    "Metering & AMI",
    "Virtual Power Plant (VPP)",
    "Grid Dispatch",
    "Cyber Security",
)


# ── Project ──────────────────────────────────────────────────────────────────

class Project(db.Model):
    """A dispatch-pool project with an ordered work history."""

    __tablename__ = "projects"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), nullable=False, default="")
    name = db.Column(db.String(200), nullable=False)
    business_unit = db.Column(db.String(100), nullable=False, default=BUSINESS_UNITS[0])
    current_stage = db.Column(
        db.String(30), nullable=False, default="OPPORTUNITY",
        comment="OPPORTUNITY | BLUEPRINT | BIDDING | IMPLEMENTATION | MAINTENANCE",
    )
    status = db.Column(
        db.String(20), nullable=False, default="NEW",
        comment="NEW | ASSIGNED | IN_PROGRESS | PAUSED | COMPLETED | ARCHIVED",
    )
    manager = db.Column(db.String(100), nullable=False, default="")
    architect_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = db.Column(db.Date, nullable=False, default=date.today)
    last_active_at = db.Column(db.Date, nullable=False, default=date.today)
    description = db.Column(db.Text, nullable=False, default="")
    tags = db.Column(db.JSON, nullable=False, default=list)
    ai_summary = db.Column(db.Text, nullable=True)

    history = db.relationship(
        "LogEntry",
        back_populates="project",
        order_by="LogEntry.position",
        collection_class=ordering_list("position"),
        cascade="all, delete-orphan",
    )
    architect = db.relationship("User", foreign_keys=[architect_id])

    @property
    def stage_label(self) -> str:
        return PROJECT_STAGES.get(self.current_stage, self.current_stage)

    @property
    def contributors(self) -> list[str]:
        """Distinct history authors in first-seen order."""
        seen = []
        for entry in self.history:
            if entry.author and entry.author not in seen:
                seen.append(entry.author)
        return seen

    def attachments(self) -> list[dict]:
        """All attachments across the history, each with its log context."""
        items = []
        for entry in self.history:
            for att in entry.attachments:
                d = att.to_dict()
                d["log_id"] = entry.id
                d["log_date"] = entry.date.isoformat()
                d["log_author"] = entry.author
                items.append(d)
        return items

    def to_dict(self, include_history: bool = False) -> dict:
        d = {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "business_unit": self.business_unit,
            "current_stage": self.current_stage,
            "stage_label": self.stage_label,
            "status": self.status,
            "manager": self.manager,
            "architect_id": self.architect_id,
            "architect_name": self.architect.name if self.architect else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_active_at": self.last_active_at.isoformat() if self.last_active_at else None,
            "description": self.description,
            "tags": list(self.tags or []),
            "ai_summary": self.ai_summary,
        }
        if include_history:
            d["history"] = [e.to_dict() for e in self.history]
            d["contributors"] = self.contributors
        return d

    def __repr__(self) -> str:
        return f"<Project {self.id}: {self.code}>"


# ── LogEntry ─────────────────────────────────────────────────────────────────

class LogEntry(db.Model):
    """
    A history record of project activity.

    ``author`` is the display name; ``author_id`` links the user who created
    the entry when known. Entries seeded or imported without a user keep
    only the name.
    """

    __tablename__ = "log_entries"

    id = db.Column(db.Integer, primary_key=True)
    project_id = db.Column(
        db.Integer, db.ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position = db.Column(db.Integer, nullable=False, default=0)
    date = db.Column(db.Date, nullable=False)
    author = db.Column(db.String(100), nullable=False, default="")
    author_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    content = db.Column(db.Text, nullable=False)
    entry_type = db.Column(
        db.String(20), nullable=False, default="NOTE",
        comment="MEETING | DELIVERABLE | DECISION | NOTE",
    )

    project = db.relationship("Project", back_populates="history")
    attachments = db.relationship(
        "Attachment",
        back_populates="log_entry",
        order_by="Attachment.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "date": self.date.isoformat() if self.date else None,
            "author": self.author,
            "author_id": self.author_id,
            "content": self.content,
            "type": self.entry_type,
            "attachments": [a.to_dict() for a in self.attachments],
        }

    def __repr__(self) -> str:
        return f"<LogEntry {self.id}: {self.date} {self.entry_type}>"


# ── Attachment ───────────────────────────────────────────────────────────────

class Attachment(db.Model):
    """File metadata; the payload itself is never stored."""

    __tablename__ = "attachments"

    id = db.Column(db.Integer, primary_key=True)
    log_entry_id = db.Column(
        db.Integer, db.ForeignKey("log_entries.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    name = db.Column(db.String(255), nullable=False)
    size = db.Column(db.String(30), nullable=False, default="", comment="Display string, e.g. '2.4 MB'")
    file_type = db.Column(db.String(30), nullable=False, default="file", comment="pdf | docx | image | code | file")

    log_entry = db.relationship("LogEntry", back_populates="attachments")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "type": self.file_type,
        }
