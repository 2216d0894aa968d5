"""User lookup and mock login."""

from __future__ import annotations

import logging

from dispatchdesk.core.exceptions import NotFoundError, ValidationError
from dispatchdesk.models import db
from dispatchdesk.models.user import ARCHITECT_ELIGIBLE_ROLES, User

logger = logging.getLogger(__name__)


def list_users() -> list[User]:
    return User.query.order_by(User.id.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError(resource="User", resource_id=user_id)
    return user


def architect_candidates() -> list[User]:
    return User.query.filter(User.role.in_(ARCHITECT_ELIGIBLE_ROLES)).order_by(User.id.asc()).all()


def authenticate(email: str, password: str | None = None) -> User:
    """Mock login: any password is accepted for a known email."""
    email = (email or "").strip().lower()
    if not email:
        raise ValidationError("email is required", details={"email": "required"})
    user = User.query.filter(db.func.lower(User.email) == email).first()
    if user is None:
        logger.info("Login rejected for unknown email %s", email)
        raise NotFoundError(resource="User", resource_id=email)
    logger.info("User %s logged in (role=%s)", user.id, user.role)
    return user
