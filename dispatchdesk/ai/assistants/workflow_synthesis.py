"""
Project Dispatch Desk
Department Workflow Synthesis.

Reverse-engineers the department's working pattern from every project
and its full activity log, and stores the narrative as the text of the
WORKFLOW_CONTEXT template (which other prompts then embed).

When the project dump is larger than WORKFLOW_PROMPT_MAX_CHARS the
projects are analysed in chunks and the partial analyses are merged,
in several rounds when they do not fit a single merge prompt.
"""

import logging
from datetime import date

from dispatchdesk.ai.prompt_registry import PromptRegistry, interpolate
from dispatchdesk.core.exceptions import GatewayError, ProviderUnavailable
from dispatchdesk.models import db
from dispatchdesk.models.prompt import PromptTemplate

logger = logging.getLogger(__name__)

WORKFLOW_KEY = "WORKFLOW_CONTEXT"
SEQUENCE_KEY = ("workflow", WORKFLOW_KEY)

NO_CREDENTIAL_MESSAGE = "Error: API Key not found. Please configure it."
NO_PROJECTS_MESSAGE = "Error: No projects available to analyze."
FAILURE_PREFIX = "Error generating workflow analysis: "
EMPTY_MESSAGE = "Analysis failed to generate text."

BLOCK_SEPARATOR = "\n\n----------------\n\n"

ANALYSIS_PROMPT = """You are an expert Business Process Analyst.
I will provide you with the raw activity logs and details from multiple projects in a "Solution Architecture Department".

Your goal is to analyze this data and reverse-engineer the "Department Work Profile".

Please output a structured description (in Chinese) covering:
1. **Core Responsibilities**: What does this team actually do based on the logs? (e.g., Blueprint design, Meeting clients, Coding?)
2. **Standard Workflow Steps**: What seems to be the typical sequence of events? (e.g., Meeting -> Design -> Review -> Delivery)
3. **Time Estimation**: Roughly how long do certain phases take based on the dates in the logs?
4. **Common Deliverables**: What kind of files are usually outputted?

This output will be used as a "System Prompt" to guide an AI in helping future project managers. It needs to be insightful about the *process*.

Here is the raw project data:
{{projectData}}"""

MERGE_PROMPT = """You are an expert Business Process Analyst.
The activity logs of a "Solution Architecture Department" were too large to analyse at once, so they were split into groups.
Below are the separate "Department Work Profile" analyses, one per group.

Merge them into ONE structured description (in Chinese) with the same four sections:
1. **Core Responsibilities**
2. **Standard Workflow Steps**
3. **Time Estimation**
4. **Common Deliverables**

Resolve overlaps, keep patterns that appear across groups, and drop group-specific noise.

Partial analyses:
{{partialAnalyses}}"""


def format_project_block(project) -> str:
    lines = [
        f"Project: {project.name} ({project.stage_label})",
        f"Tags: {', '.join(project.tags or [])}",
        f"Created: {project.created_at.isoformat()}",
        "Key Activities:",
    ]
    lines.extend(f"- [{e.date.isoformat()}] {e.entry_type}: {e.content}" for e in project.history)
    return "\n".join(lines)


def chunk_blocks(blocks: list[str], budget: int) -> list[list[str]]:
    """
    Greedily group blocks so each joined group stays within ``budget`` chars.

    A block that is on its own larger than the budget is cut to fit.
    """
    chunks: list[list[str]] = []
    current: list[str] = []
    size = 0
    for block in blocks:
        if len(block) > budget:
            block = block[:budget]
        extra = len(block) + (len(BLOCK_SEPARATOR) if current else 0)
        if current and size + extra > budget:
            chunks.append(current)
            current, size = [], 0
            extra = len(block)
        current.append(block)
        size += extra
    if current:
        chunks.append(current)
    return chunks


class WorkflowSynthesis:
    """Builds and stores the department workflow narrative."""

    def __init__(self, gateway, sequencer=None, max_prompt_chars: int = 120000, prompts_dir: str | None = None):
        self.gateway = gateway
        self.sequencer = sequencer
        self.max_prompt_chars = max_prompt_chars
        self.prompts_dir = prompts_dir

    def synthesize(self, projects) -> dict:
        """
        Returns:
            dict: context (narrative or fallback), stored (bool), stale (bool),
                  chunks (int), error (classification or None)
        """
        result = {"context": None, "stored": False, "stale": False, "chunks": 0, "error": None}

        if not self.gateway.configured:
            result["context"] = NO_CREDENTIAL_MESSAGE
            result["error"] = "provider_unavailable"
            return result
        if not projects:
            result["context"] = NO_PROJECTS_MESSAGE
            result["error"] = "no_projects"
            return result

        blocks = [format_project_block(p) for p in projects]
        budget = max(self.max_prompt_chars - len(ANALYSIS_PROMPT), 1)
        chunks = chunk_blocks(blocks, budget)
        result["chunks"] = len(chunks)

        token = self.sequencer.begin(SEQUENCE_KEY) if self.sequencer else None
        try:
            text = self._analyse(chunks)
        except ProviderUnavailable:
            result["context"] = NO_CREDENTIAL_MESSAGE
            result["error"] = "provider_unavailable"
            return result
        except GatewayError as exc:
            logger.warning("Workflow synthesis failed: %s", exc)
            result["context"] = FAILURE_PREFIX + str(exc)
            result["error"] = "request_failed"
            return result
        finally:
            current = self.sequencer.finish(SEQUENCE_KEY, token) if self.sequencer else True

        if not text:
            result["context"] = EMPTY_MESSAGE
            result["error"] = "empty_response"
            return result

        result["context"] = text
        if not current:
            result["stale"] = True
            return result

        self._store(text)
        result["stored"] = True
        return result

    def _analyse(self, chunks: list[list[str]]) -> str:
        if len(chunks) == 1:
            prompt = interpolate(ANALYSIS_PROMPT, {"projectData": BLOCK_SEPARATOR.join(chunks[0])})
            return self.gateway.generate_text(prompt, purpose="workflow_context")

        logger.info("Workflow dump over budget, analysing %d chunks", len(chunks))
        partials = []
        for i, chunk in enumerate(chunks, start=1):
            prompt = interpolate(ANALYSIS_PROMPT, {"projectData": BLOCK_SEPARATOR.join(chunk)})
            partial = self.gateway.generate_text(prompt, purpose=f"workflow_context_chunk_{i}")
            if partial:
                partials.append(f"### Group {i}\n{partial}")
        return self._merge(partials)

    def _merge(self, partials: list[str]) -> str:
        """
        Merge partial analyses, in rounds when they do not fit one prompt.

        Each partial is capped at half the merge budget so every group holds
        at least two of them and each round shrinks the list.
        """
        budget = max(self.max_prompt_chars - len(MERGE_PROMPT), 1)
        cap = max((budget - len(BLOCK_SEPARATOR)) // 2, 1)
        round_no = 1
        while partials:
            groups = chunk_blocks([p[:cap] for p in partials], budget)
            if len(groups) == 1:
                merge = interpolate(MERGE_PROMPT, {"partialAnalyses": BLOCK_SEPARATOR.join(groups[0])})
                return self.gateway.generate_text(merge, purpose="workflow_context_merge")
            if len(groups) >= len(partials):
                logger.warning("Merge budget too small to combine analyses, keeping the first group only")
                partials = groups[0]
                continue

            logger.info("Partial analyses over budget, merge round %d over %d groups", round_no, len(groups))
            merged = []
            for i, group in enumerate(groups, start=1):
                prompt = interpolate(MERGE_PROMPT, {"partialAnalyses": BLOCK_SEPARATOR.join(group)})
                text = self.gateway.generate_text(prompt, purpose=f"workflow_context_merge_{round_no}_{i}")
                if text:
                    merged.append(f"### Group {i}\n{text}")
            partials = merged
            round_no += 1
        return ""

    def _store(self, text: str):
        template = PromptTemplate.active(WORKFLOW_KEY)
        if template is None:
            default = PromptRegistry(self.prompts_dir).get(WORKFLOW_KEY)
            template = PromptTemplate(
                key=WORKFLOW_KEY,
                name=default["name"],
                description=default["description"],
                is_system_generated=True,
            )
            db.session.add(template)
        template.template = text
        template.last_updated = date.today()
        db.session.commit()
        logger.info("Department workflow context updated (%d chars)", len(text))
