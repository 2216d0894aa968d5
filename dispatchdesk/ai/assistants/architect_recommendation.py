"""
Project Dispatch Desk
Architect Recommendation Aggregator.

Pipeline:
    1. Workload score (0-3) per candidate from the last 10 days of entries
    2. One request with the project and a block per candidate
    3. Model returns totalScore (0-10, workload included) + reason per candidate
    4. ai_score = total_score - workload_score (display only)
    5. Stable sort by total_score descending

Any gateway failure means "no recommendation available" (empty list).
"""

import logging
from datetime import date

from dispatchdesk.ai.prompt_registry import interpolate
from dispatchdesk.ai.workload import compute_workload_scores
from dispatchdesk.core.exceptions import GatewayError

logger = logging.getLogger(__name__)

NO_PERSONA_MARKER = "no persona data"

RECOMMENDATION_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "recommendations": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "userId": {"type": "STRING"},
                    "totalScore": {"type": "NUMBER"},
                    "reason": {"type": "STRING"},
                },
                "required": ["userId", "totalScore", "reason"],
            },
        },
    },
    "required": ["recommendations"],
}


def format_candidate(user, workload: int) -> str:
    head = f"- ID: {user.id} | Name: {user.name} | Title: {user.title or '-'} | Workload score: {workload}/3"
    persona = user.persona or {}
    if persona.get("summary"):
        domains = ", ".join(persona.get("domains") or [])
        return f"{head}\n  Persona: {persona['summary']} | Domains: {domains or '-'}"
    return f"{head}\n  Persona: {NO_PERSONA_MARKER}"


def rank_recommendations(raw: list[dict], workload: dict[str, int], names: dict[str, str]) -> list[dict]:
    """Attach the score breakdown and order by total score, best first (stable)."""
    ranked = []
    for item in raw:
        user_id = str(item["userId"])
        total = item["totalScore"]
        ranked.append({
            "candidate_id": user_id,
            "candidate_name": names.get(user_id),
            "total_score": total,
            "reason": item["reason"],
            "score_breakdown": {
                "workload_score": workload.get(user_id, 0),
                "ai_score": total - workload.get(user_id, 0),
            },
        })
    return sorted(ranked, key=lambda r: r["total_score"], reverse=True)


class ArchitectRecommendation:
    """Ranks architect candidates for a project."""

    def __init__(self, gateway, sequencer=None):
        self.gateway = gateway
        self.sequencer = sequencer

    def recommend(self, project, candidates, projects, template: str, today: date | None = None) -> dict:
        """
        Returns:
            dict: project_id, recommendations (list, empty when unavailable),
                  workload (candidate id → score), stale, error
        """
        workload = compute_workload_scores(candidates, projects, today=today)
        result = {
            "project_id": project.id,
            "recommendations": [],
            "workload": workload,
            "stale": False,
            "error": None,
        }
        if not candidates:
            result["error"] = "no_candidates"
            return result

        prompt = interpolate(template, {
            "projectName": project.name,
            "projectDescription": project.description,
            "candidates": "\n".join(format_candidate(u, workload[str(u.id)]) for u in candidates),
        })

        key = ("recommendation", project.id)
        token = self.sequencer.begin(key) if self.sequencer else None
        try:
            data = self.gateway.generate_json(prompt, RECOMMENDATION_SCHEMA, purpose="architect_recommendation")
        except GatewayError as exc:
            logger.warning("Architect recommendation failed for project %s: %s", project.id, exc)
            result["error"] = type(exc).__name__
            return result
        finally:
            current = self.sequencer.finish(key, token) if self.sequencer else True

        names = {str(u.id): u.name for u in candidates}
        result["recommendations"] = rank_recommendations(data["recommendations"], workload, names)
        result["stale"] = not current
        return result
