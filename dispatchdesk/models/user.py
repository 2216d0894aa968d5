"""User model with role and AI-generated persona."""

from dispatchdesk.models import db

USER_ROLES = ("ADMIN", "MANAGER", "ARCHITECT")

# Roles offered as candidates by the architect recommendation
ARCHITECT_ELIGIBLE_ROLES = ("ARCHITECT",)


class User(db.Model):
    """Department member. Seeded at startup, never deleted."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(200), nullable=False, unique=True)
    name = db.Column(db.String(100), nullable=False)
    role = db.Column(db.String(20), nullable=False, default="ARCHITECT", comment="ADMIN | MANAGER | ARCHITECT")
    title = db.Column(db.String(100), nullable=True)
    join_date = db.Column(db.Date, nullable=True)
    avatar_url = db.Column(db.String(500), nullable=True)

    # {"summary": str, "domains": [str], "work_style": str, "improvement_areas": str}
    persona = db.Column(db.JSON, nullable=True)
    last_persona_update = db.Column(db.Date, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "title": self.title,
            "join_date": self.join_date.isoformat() if self.join_date else None,
            "avatar_url": self.avatar_url,
            "persona": self.persona,
            "last_persona_update": self.last_persona_update.isoformat() if self.last_persona_update else None,
        }

    def __repr__(self) -> str:
        return f"<User {self.id}: {self.email}>"
