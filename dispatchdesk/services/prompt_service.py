"""Prompt template service: seeding, lookup and editing of persisted templates."""

from __future__ import annotations

import logging
from datetime import date

from dispatchdesk.ai.prompt_registry import PromptRegistry
from dispatchdesk.core.exceptions import NotFoundError, ValidationError
from dispatchdesk.models import db
from dispatchdesk.models.prompt import TEMPLATE_KEYS, PromptTemplate

logger = logging.getLogger(__name__)


def seed_templates(prompts_dir: str | None = None) -> int:
    """Insert a template row for every key that has none yet. Returns rows added."""
    registry = PromptRegistry(prompts_dir)
    added = 0
    for tpl in registry.defaults():
        if PromptTemplate.active(tpl["key"]) is not None:
            continue
        db.session.add(PromptTemplate(
            key=tpl["key"],
            name=tpl["name"],
            description=tpl["description"],
            template=tpl["template"],
            is_system_generated=tpl["is_system_generated"],
            last_updated=date.today(),
        ))
        added += 1
    db.session.commit()
    if added:
        logger.info("Seeded %d prompt templates", added)
    return added


def list_templates() -> list[PromptTemplate]:
    return PromptTemplate.query.order_by(PromptTemplate.id.asc()).all()


def get_active(key: str) -> PromptTemplate:
    key = (key or "").upper()
    if key not in TEMPLATE_KEYS:
        raise NotFoundError(resource="PromptTemplate", resource_id=key)
    template = PromptTemplate.active(key)
    if template is None:
        raise NotFoundError(resource="PromptTemplate", resource_id=key)
    return template


def template_text(key: str, prompts_dir: str | None = None) -> str:
    """Text of the active template for ``key``, or the built-in default when none is stored."""
    template = PromptTemplate.active(key)
    if template is not None:
        return template.template
    logger.warning("No stored template for %s, using built-in default", key)
    return PromptRegistry(prompts_dir).get(key)["template"]


def update_template(template_id: int, data: dict) -> PromptTemplate:
    """Edit name/description/template text; stamps ``last_updated``."""
    template = db.session.get(PromptTemplate, template_id)
    if template is None:
        raise NotFoundError(resource="PromptTemplate", resource_id=template_id)

    if "template" in data:
        text = str(data.get("template") or "")
        if not text.strip():
            raise ValidationError("template is required", details={"template": "required"})
        template.template = text
    for field in ("name", "description"):
        if field in data:
            value = str(data.get(field) or "").strip()
            if field == "name" and not value:
                raise ValidationError("name is required", details={"name": "required"})
            setattr(template, field, value)

    template.last_updated = date.today()
    db.session.commit()
    logger.info("Prompt template %s (%s) updated", template.id, template.key)
    return template
