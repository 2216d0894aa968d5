"""
Project Dispatch Desk
Flask Application Factory.

Usage:
    from dispatchdesk import create_app
    app = create_app()           # defaults to APP_ENV or "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from sqlalchemy import engine as _sa_engine
from sqlalchemy import event as _sa_event

from dispatchdesk.config import config
from dispatchdesk.middleware.logging_config import configure_logging
from dispatchdesk.middleware.timing import init_request_timing
from dispatchdesk.models import db

logger = logging.getLogger(__name__)


# ── SQLite FK enforcement (global engine event) ─────────────────────────

@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # AI endpoints carry their own shared limit
)


def _is_true(value) -> bool:
    return str(value).lower() in ("true", "1", "yes", "on")


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: "development", "testing" or "production".
            Falls back to APP_ENV, then "development".

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__)
    # Instantiated so ProductionConfig can refuse to start without its env vars
    app.config.from_object(config[config_name]())

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()], supports_credentials=True)
    else:
        CORS(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from dispatchdesk.models import project as _project_models  # noqa: F401
    from dispatchdesk.models import prompt as _prompt_models    # noqa: F401
    from dispatchdesk.models import user as _user_models        # noqa: F401

    # ── Tables + seed data (the default in-memory store starts empty) ────
    with app.app_context():
        db.create_all()
        if _is_true(app.config.get("SEED_DEMO_DATA", "false")):
            from dispatchdesk.services.seed_service import seed_demo_data
            seed_demo_data(app.config.get("PROMPTS_DIR"))

    # ── Blueprints ───────────────────────────────────────────────────────
    from dispatchdesk.blueprints import register_blueprints
    register_blueprints(app)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-demo")
    def seed_demo_cmd():
        """Seed demo users, projects and prompt templates (idempotent)."""
        from dispatchdesk.services.seed_service import seed_demo_data
        summary = seed_demo_data(app.config.get("PROMPTS_DIR"))
        logger.info("Seeded demo data: %s", summary)

    # ── Error handlers ───────────────────────────────────────────────────
    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(429)
    def rate_limited(e):
        return {"error": "Too many requests", "retry_after": e.description}, 429

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500

    logger.info("Project Dispatch Desk started (config=%s)", config_name)
    return app
