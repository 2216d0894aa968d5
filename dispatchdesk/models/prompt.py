"""Prompt template model — editable text blobs keyed by feature."""

from datetime import date

from dispatchdesk.models import db

TEMPLATE_KEYS = (
    "PROJECT_SUMMARY",
    "DUPLICATE_CHECK",
    "WORKFLOW_CONTEXT",
    "ARCHITECT_RECOMMENDATION",
    "USER_PERSONA",
)


class PromptTemplate(db.Model):
    """
    A named prompt template with ``{{placeholder}}`` tokens.

    Several rows may share a key; dependent logic always consults the
    first one (lowest id). WORKFLOW_CONTEXT is system-generated: its text
    is replaced by the department workflow synthesis, not hand-edited.
    """

    __tablename__ = "prompt_templates"

    id = db.Column(db.Integer, primary_key=True)
    key = db.Column(db.String(40), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    template = db.Column(db.Text, nullable=False, default="")
    last_updated = db.Column(db.Date, nullable=False, default=date.today)
    is_system_generated = db.Column(db.Boolean, nullable=False, default=False)

    @classmethod
    def active(cls, key: str):
        """Return the template consulted for ``key`` (first match), or None."""
        return cls.query.filter_by(key=key).order_by(cls.id.asc()).first()

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "template": self.template,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "is_system_generated": self.is_system_generated,
        }

    def __repr__(self) -> str:
        return f"<PromptTemplate {self.id}: {self.key}>"
