"""
Session-based mock authentication and role checks.

Login (``POST /api/v1/auth/login``) accepts any password for a known
email and stores the user id in the Flask session. Role checks run at
the API boundary through two decorators:

    @require_login                      # any logged-in user
    @require_role("ADMIN", "MANAGER")   # one of the listed roles

AUTH_ENABLED=false (development default, tests) skips both checks; a
logged-in user, when there is one, is still recorded as log author.
"""

import functools
import logging

from flask import current_app, g, request, session

from dispatchdesk.models import db
from dispatchdesk.models.user import User
from dispatchdesk.utils.errors import E, api_error

logger = logging.getLogger(__name__)

# Roles allowed to edit templates and run the management-level AI features
MANAGEMENT_ROLES = ("ADMIN", "MANAGER")


def _is_auth_enabled() -> bool:
    value = str(current_app.config.get("AUTH_ENABLED", "true"))
    return value.lower() not in ("false", "0", "no", "off")


def current_user() -> User | None:
    """The logged-in user for this request, or None."""
    user_id = session.get("user_id")
    return db.session.get(User, user_id) if user_id is not None else None


def login_user(user: User):
    session.clear()
    session["user_id"] = user.id


def logout_user():
    session.clear()


def require_login(f):
    """Require a logged-in user. Sets g.current_user_role."""
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        user = current_user()
        if user is None and _is_auth_enabled():
            return api_error(E.AUTH_REQUIRED, "Authentication required")
        g.current_user_role = user.role if user is not None else "ADMIN"
        return f(*args, **kwargs)
    return decorated


def require_role(*roles: str):
    """
    Require one of ``roles``. Apply below ``require_login``.

    Usage:
        @require_login
        @require_role(*MANAGEMENT_ROLES)
        def update_template(template_id): ...
    """
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            if not _is_auth_enabled():
                return f(*args, **kwargs)
            role = getattr(g, "current_user_role", None)
            if role not in roles:
                logger.warning("Access denied: role %s on %s %s", role, request.method, request.path)
                return api_error(E.FORBIDDEN, "Insufficient permissions")
            return f(*args, **kwargs)
        return decorated
    return decorator
