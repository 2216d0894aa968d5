"""
Shared pytest fixtures for the Project Dispatch Desk test suite.

Provides:
    - app: Flask application (session-scoped, in-memory SQLite)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - stub: LocalStubProvider installed as the app's text-generation provider
    - no_provider: gateway with no credential configured
    - auth_enabled: turns session login + role checks on for one test
    - make_user / make_project / add_entry: ORM factories
"""

from datetime import date

import pytest

from dispatchdesk import create_app
from dispatchdesk.ai.gateway import LocalStubProvider, TextGenerationGateway
from dispatchdesk.models import db as _db
from dispatchdesk.models.project import Attachment, LogEntry, Project
from dispatchdesk.models.user import User


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()
    for attr in ("_ai_gateway", "_ai_sequencer"):
        if hasattr(app, attr):
            delattr(app, attr)


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── AI provider fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def stub(app):
    """Install a LocalStubProvider; queue replies with ``stub.queue(...)``."""
    provider = LocalStubProvider()
    app._ai_gateway = TextGenerationGateway(provider=provider, model="local-stub")
    return provider


@pytest.fixture()
def no_provider(app):
    """Gateway with no credential: every AI feature must fall back."""
    gateway = TextGenerationGateway(provider=None)
    app._ai_gateway = gateway
    return gateway


@pytest.fixture()
def auth_enabled(app):
    app.config["AUTH_ENABLED"] = "true"
    yield
    app.config["AUTH_ENABLED"] = "false"


# ── ORM factories ────────────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    def _make_user(name="Li Ming", role="ARCHITECT", email=None, **kw):
        user = User(
            name=name,
            role=role,
            email=email or f"{name.lower().replace(' ', '.')}@example.com",
            **kw,
        )
        _db.session.add(user)
        _db.session.commit()
        return user
    return _make_user


@pytest.fixture()
def make_project():
    def _make_project(name="Hangzhou VPP Pilot", **kw):
        fields = {
            "code": "VPP-001",
            "business_unit": "Virtual Power Plant (VPP)",
            "manager": "Zhang San",
            "status": "NEW",
            "current_stage": "OPPORTUNITY",
            "created_at": date(2024, 1, 1),
            "last_active_at": date(2024, 1, 1),
            "description": "Aggregate industrial loads.",
            "tags": [],
        }
        fields.update(kw)
        project = Project(name=name, **fields)
        _db.session.add(project)
        _db.session.commit()
        return project
    return _make_project


@pytest.fixture()
def add_entry():
    """Append an entry at the end of a project's history (oldest position)."""
    def _add_entry(project, on, content="Worked on it", author="Li Ming",
                   author_id=None, entry_type="NOTE", attachments=()):
        entry = LogEntry(
            date=on,
            content=content,
            author=author,
            author_id=author_id,
            entry_type=entry_type,
            attachments=[Attachment(name=n, size="1 KB", file_type="pdf") for n in attachments],
        )
        project.history.append(entry)
        _db.session.commit()
        return entry
    return _add_entry
