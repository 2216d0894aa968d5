"""
Tests — Prompt interpolation and the prompt registry.

Covers:
    - {{name}} substitution (all occurrences, absent keys kept, single pass)
    - Built-in defaults for every template key
    - YAML overrides from a prompts directory
    - Template seeding into the database
"""

from dispatchdesk.ai.prompt_registry import PromptRegistry, interpolate
from dispatchdesk.models.prompt import TEMPLATE_KEYS, PromptTemplate
from dispatchdesk.services.prompt_service import seed_templates, template_text


class TestInterpolate:
    def test_replaces_known_token(self):
        assert interpolate("Hello {{name}}!", {"name": "VPP"}) == "Hello VPP!"

    def test_replaces_every_occurrence(self):
        assert interpolate("{{a}}-{{a}}-{{a}}", {"a": "x"}) == "x-x-x"

    def test_absent_token_survives_verbatim(self):
        assert interpolate("{{x}} and {{y}}", {"x": "1"}) == "1 and {{y}}"

    def test_single_pass_does_not_expand_value(self):
        assert interpolate("{{a}}", {"a": "{{b}}", "b": "Z"}) == "{{b}}"

    def test_non_string_values_are_converted(self):
        assert interpolate("score={{s}}", {"s": 7}) == "score=7"

    def test_no_tokens_is_identity(self):
        text = "plain text with {single} braces"
        assert interpolate(text, {"single": "x"}) == text

    def test_empty_value(self):
        assert interpolate("[{{v}}]", {"v": ""}) == "[]"


class TestPromptRegistry:
    def test_defaults_cover_every_key_in_order(self):
        keys = [t["key"] for t in PromptRegistry().defaults()]
        assert keys == list(TEMPLATE_KEYS)

    def test_only_workflow_context_is_system_generated(self):
        flags = {t["key"]: t["is_system_generated"] for t in PromptRegistry().defaults()}
        assert flags["WORKFLOW_CONTEXT"] is True
        assert [k for k, v in flags.items() if v] == ["WORKFLOW_CONTEXT"]

    def test_default_templates_use_expected_placeholders(self):
        reg = PromptRegistry()
        assert "{{history}}" in reg.get("PROJECT_SUMMARY")["template"]
        assert "{{existingProjectNames}}" in reg.get("DUPLICATE_CHECK")["template"]
        assert "{{candidates}}" in reg.get("ARCHITECT_RECOMMENDATION")["template"]
        assert "{{userHistory}}" in reg.get("USER_PERSONA")["template"]

    def test_yaml_override(self, tmp_path):
        (tmp_path / "DUPLICATE_CHECK.yaml").write_text(
            "template: 'Is {{newProjectName}} a duplicate?'\n", encoding="utf-8",
        )
        reg = PromptRegistry(str(tmp_path))
        tpl = reg.get("DUPLICATE_CHECK")
        assert tpl["template"] == "Is {{newProjectName}} a duplicate?"
        assert tpl["name"] == PromptRegistry().get("DUPLICATE_CHECK")["name"]

    def test_unknown_key_and_broken_yaml_are_ignored(self, tmp_path):
        (tmp_path / "SOMETHING_ELSE.yaml").write_text("template: x\n", encoding="utf-8")
        (tmp_path / "USER_PERSONA.yaml").write_text("template: [unclosed\n", encoding="utf-8")
        reg = PromptRegistry(str(tmp_path))
        assert reg.get("SOMETHING_ELSE") is None
        assert reg.get("USER_PERSONA") == PromptRegistry().get("USER_PERSONA")

    def test_missing_directory_uses_defaults(self, tmp_path):
        reg = PromptRegistry(str(tmp_path / "nope"))
        assert len(reg.defaults()) == len(TEMPLATE_KEYS)


class TestTemplateSeeding:
    def test_seed_is_idempotent(self):
        assert seed_templates() == len(TEMPLATE_KEYS)
        assert seed_templates() == 0
        assert PromptTemplate.query.count() == len(TEMPLATE_KEYS)

    def test_active_template_is_first_by_key(self):
        seed_templates()
        first = PromptTemplate.active("DUPLICATE_CHECK")
        from dispatchdesk.models import db
        db.session.add(PromptTemplate(key="DUPLICATE_CHECK", name="second", template="other"))
        db.session.commit()
        assert PromptTemplate.active("DUPLICATE_CHECK").id == first.id
        assert template_text("DUPLICATE_CHECK") == first.template

    def test_template_text_falls_back_to_builtin(self):
        assert PromptTemplate.query.count() == 0
        assert template_text("PROJECT_SUMMARY") == PromptRegistry().get("PROJECT_SUMMARY")["template"]
