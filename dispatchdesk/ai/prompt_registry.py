"""
Project Dispatch Desk
Prompt Registry.

Prompt template management with:
    - {{placeholder}} interpolation (single pass, unknown tokens kept)
    - Built-in default templates for every template key
    - YAML overrides loaded from PROMPTS_DIR (one file per key)

The registry only knows template *text*. The editable, persisted copy of
each template lives in the ``prompt_templates`` table and is seeded from
``PromptRegistry.defaults()``.

Usage:
    from dispatchdesk.ai.prompt_registry import interpolate
    prompt = interpolate(template.template, {"projectName": "VPP Pilot"})
"""

import logging
import re
from pathlib import Path

from dispatchdesk.models.prompt import TEMPLATE_KEYS

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\{\{(\w+)\}\}")


def interpolate(template: str, values: dict) -> str:
    """
    Replace every ``{{name}}`` token whose name is in ``values``.

    Tokens with no supplied value are left as-is. Replacement text is
    inserted literally and never scanned again, so a value containing
    ``{{other}}`` stays unexpanded.
    """
    def replacer(match):
        key = match.group(1)
        if key in values:
            return str(values[key])
        return match.group(0)
    return _TOKEN.sub(replacer, template)


class PromptRegistry:
    """
    Source of default prompt template text.

    Built-in defaults are registered first; a ``<KEY>.yaml`` file in the
    prompts directory replaces the matching default's fields.
    """

    def __init__(self, prompts_dir: str | None = None):
        self._prompts_dir = prompts_dir
        self._templates: dict[str, dict] = {}
        self._load_defaults()
        if prompts_dir:
            self._load_from_dir()

    def _load_defaults(self):
        for tpl in _DEFAULT_TEMPLATES:
            self._templates[tpl["key"]] = dict(tpl)

    def _load_from_dir(self):
        """Apply YAML overrides on top of the built-in defaults."""
        prompts_path = Path(self._prompts_dir)
        if not prompts_path.exists():
            logger.info("Prompts directory not found: %s. Using defaults only.", self._prompts_dir)
            return

        import yaml

        for yaml_file in sorted(prompts_path.glob("*.yaml")):
            try:
                with open(yaml_file, "r", encoding="utf-8") as f:
                    data = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error("Failed to load prompt %s: %s", yaml_file.name, e)
                continue
            if not data or not isinstance(data, dict):
                continue

            key = data.get("key", yaml_file.stem).upper()
            if key not in TEMPLATE_KEYS:
                logger.warning("Ignoring prompt file %s: unknown key %s", yaml_file.name, key)
                continue

            merged = dict(self._templates[key])
            for field in ("name", "description", "template"):
                if data.get(field):
                    merged[field] = data[field]
            self._templates[key] = merged
            logger.info("Loaded prompt override: %s from %s", key, yaml_file.name)

    def get(self, key: str) -> dict | None:
        return self._templates.get(key)

    def defaults(self) -> list[dict]:
        """Template definitions in key order, ready to seed."""
        return [self._templates[k] for k in TEMPLATE_KEYS if k in self._templates]


# ── Built-in Default Templates ────────────────────────────────────────────────

_DEFAULT_TEMPLATES = [
    {
        "key": "PROJECT_SUMMARY",
        "name": "智能场景回溯 (AI Recall)",
        "description": "用于生成项目详情页顶部的上下文快照，分析当前状态和下一步行动。",
        "is_system_generated": False,
        "template": (
            "You are a senior assistant to a Power Industry Solution Architect Manager.\n"
            "Review the following recent history logs for the project \"{{projectName}}\".\n\n"
            "CONTEXT - DEPARTMENT WORKFLOW STANDARDS:\n"
            "{{workflowContext}}\n\n"
            "INSTRUCTIONS:\n"
            "Generate a concise \"Context Snapshot\" (max 3 sentences).\n"
            "1. Current State: What was the last major thing happening?\n"
            "2. Blocker/Pending: Is there anything stuck?\n"
            "3. Action: What is the likely next step based on the DEPARTMENT WORKFLOW STANDARDS provided above?\n\n"
            "Use professional, technical tone suitable for utility sector. You must answer in Chinese.\n\n"
            "History Logs:\n"
            "{{history}}"
        ),
    },
    {
        "key": "DUPLICATE_CHECK",
        "name": "项目重名/重复风险检测",
        "description": "在派单池新建项目时，检测是否与已有项目重复。",
        "is_system_generated": False,
        "template": (
            "I am adding a new project named \"{{newProjectName}}\".\n"
            "Here is a list of existing projects: {{existingProjectNames}}.\n\n"
            "Does this new project sound like a duplicate or a continuation of an existing one?\n"
            "If yes, return a short warning message mentioning the similar project name.\n"
            "If no, return \"NO\"."
        ),
    },
    {
        "key": "WORKFLOW_CONTEXT",
        "name": "部门工作职责与流程画像",
        "description": (
            "系统通过扫描所有项目历史自动生成的部门工作习惯描述。"
            "此内容将被注入到\"AI Recall\"中以提高建议的准确性。"
        ),
        "is_system_generated": True,
        "template": (
            "目前暂无生成的部门画像。请点击“全量扫描生成”按钮，让AI分析您的历史数据。\n\n"
            "(默认占位符: 本部门主要负责电力行业解决方案设计。通常工作流程为："
            "需求调研 -> 方案蓝图设计 -> 内部评审 -> 招投标 -> 交付实施。)"
        ),
    },
    {
        "key": "ARCHITECT_RECOMMENDATION",
        "name": "架构师智能推荐",
        "description": "根据项目需求、成员画像与近期工作负载，为项目推荐技术架构师。",
        "is_system_generated": False,
        "template": (
            "You are staffing a Solution Architecture Department project.\n\n"
            "PROJECT: {{projectName}}\n"
            "DESCRIPTION: {{projectDescription}}\n\n"
            "CANDIDATES:\n"
            "{{candidates}}\n\n"
            "Score every candidate on a 0-10 scale made of:\n"
            "- Workload score (0-3): already computed, use the value given for each candidate.\n"
            "- History match (0-3): similar projects or domains in the candidate's past work.\n"
            "- Persona fit (0-2): how well the work style and domains fit this project.\n"
            "- Other factors (0-2): seniority, growth opportunity, anything else relevant.\n"
            "totalScore is the sum of the four parts. Give a one-sentence reason in Chinese.\n"
            "Return JSON: {\"recommendations\": [{\"userId\": \"...\", \"totalScore\": 0, \"reason\": \"...\"}]}"
        ),
    },
    {
        "key": "USER_PERSONA",
        "name": "成员能力画像",
        "description": "根据成员的历史工作记录与部门工作流程，生成个人能力画像。",
        "is_system_generated": False,
        "template": (
            "You are an engineering manager writing a capability profile for \"{{userName}}\".\n\n"
            "DEPARTMENT RESPONSIBILITIES AND WORKFLOW:\n"
            "{{workflowContext}}\n\n"
            "WORK HISTORY OF {{userName}}:\n"
            "{{userHistory}}\n\n"
            "Answer in Chinese and return JSON with exactly these fields:\n"
            "- historySummary: how this person has supported past projects\n"
            "- domains: list of project domains this person is strong in\n"
            "- workStyle: the way this person prefers to work\n"
            "- improvementAreas: capabilities to strengthen, judged against the department responsibilities"
        ),
    },
]
