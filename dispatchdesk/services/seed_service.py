"""Demo data seeding: department members, two sample projects and the prompt templates.

Idempotent: users are matched by email and projects by code, so running
it on an already seeded database adds nothing.
"""

from __future__ import annotations

import logging
from datetime import date

from dispatchdesk.models import db
from dispatchdesk.models.project import Attachment, LogEntry, Project
from dispatchdesk.models.user import User
from dispatchdesk.services.prompt_service import seed_templates

logger = logging.getLogger(__name__)

DEMO_USERS = [
    {"email": "admin@dispatchdesk.local", "name": "Admin", "role": "ADMIN", "title": "系统管理员"},
    {"email": "zhang.san@dispatchdesk.local", "name": "Zhang San", "role": "MANAGER", "title": "部门经理",
     "join_date": date(2018, 3, 1)},
    {"email": "li.ming@dispatchdesk.local", "name": "Li Ming", "role": "ARCHITECT", "title": "首席架构师",
     "join_date": date(2016, 7, 15)},
    {"email": "wang.lei@dispatchdesk.local", "name": "Wang Lei", "role": "ARCHITECT", "title": "高级架构师",
     "join_date": date(2020, 9, 1)},
    {"email": "li.si@dispatchdesk.local", "name": "Li Si", "role": "ARCHITECT", "title": "架构师",
     "join_date": date(2022, 4, 18)},
]

DEMO_PROJECTS = [
    {
        "code": "SG-2023-088",
        "name": "Marketing 2.0 Data Middle Platform",
        "business_unit": "Marketing & Service",
        "manager": "Zhang San",
        "created_at": date(2023, 5, 12),
        "last_active_at": date(2024, 5, 20),
        "status": "IN_PROGRESS",
        "current_stage": "IMPLEMENTATION",
        "description": "Upgrade of legacy marketing database to distributed architecture.",
        "tags": ["Big Data", "Oracle->MySQL"],
        "ai_summary": (
            "Currently in late implementation phase. Data migration is 80% complete with "
            "validation ongoing. No critical blockers reported recently."
        ),
        "history": [
            {"date": date(2024, 5, 20), "author": "Zhang San", "entry_type": "MEETING",
             "content": "Weekly sync. Data migration 80% complete. Validating accuracy."},
            {"date": date(2024, 5, 10), "author": "Li Si", "entry_type": "DELIVERABLE",
             "content": "Uploaded migration script v4.",
             "attachments": [{"name": "Migration_Script_v4.sql", "size": "45 KB", "file_type": "code"}]},
        ],
    },
    {
        "code": "VPP-PILOT-HZ",
        "name": "Hangzhou Virtual Power Plant Pilot",
        "business_unit": "Virtual Power Plant (VPP)",
        "manager": "Li Ming",
        "created_at": date(2023, 10, 1),
        "last_active_at": date(2024, 1, 10),
        "status": "PAUSED",
        "current_stage": "BIDDING",
        "description": "Pilot project for aggregating industrial loads in Xiaoshan district.",
        "tags": ["IoT", "Demand Response"],
        "ai_summary": (
            "Project paused since Jan 2024 due to client budget cycles. Last output was the "
            "Architecture Blueprint v1.0. Needs reactivating to check 2024 budget status."
        ),
        "history": [
            {"date": date(2024, 1, 10), "author": "Li Ming", "entry_type": "DECISION",
             "content": "Project paused due to client budget reallocation for next fiscal year."},
            {"date": date(2023, 11, 2), "author": "Wang Lei", "entry_type": "DELIVERABLE",
             "content": "Submitted technical architecture blueprint v1.0. Pending security team review.",
             "attachments": [
                 {"name": "Architecture_Blueprint_v1.0.pdf", "size": "2.4 MB", "file_type": "pdf"},
                 {"name": "Network_Topology.png", "size": "1.1 MB", "file_type": "image"},
             ]},
            {"date": date(2023, 10, 15), "author": "Li Ming", "entry_type": "MEETING",
             "content": "Initial requirements meeting with State Grid client. Focus on high-concurrency data collection."},
        ],
    },
]


def seed_demo_data(prompts_dir: str | None = None) -> dict:
    """Insert demo users, projects and prompt templates that are not present yet."""
    users_added = 0
    for data in DEMO_USERS:
        if User.query.filter_by(email=data["email"]).first():
            continue
        db.session.add(User(**data))
        users_added += 1
    db.session.flush()

    projects_added = 0
    for data in DEMO_PROJECTS:
        if Project.query.filter_by(code=data["code"]).first():
            continue
        fields = {k: v for k, v in data.items() if k != "history"}
        project = Project(**fields)
        for item in data["history"]:
            attachments = [Attachment(**a) for a in item.get("attachments", [])]
            entry_fields = {k: v for k, v in item.items() if k != "attachments"}
            project.history.append(LogEntry(attachments=attachments, **entry_fields))
        db.session.add(project)
        projects_added += 1
    db.session.commit()

    templates_added = seed_templates(prompts_dir)
    summary = {"users": users_added, "projects": projects_added, "templates": templates_added}
    logger.info("Demo data seeded: %s", summary)
    return summary
