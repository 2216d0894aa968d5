"""
Tests — Architect recommendation aggregator.

Covers:
    - candidate block (workload score, persona or "no persona data")
    - stable ranking by total score, ai_score = total - workload
    - failure / malformed reply → empty list
"""

from datetime import date

from dispatchdesk.ai.assistants import ArchitectRecommendation
from dispatchdesk.ai.assistants.architect_recommendation import rank_recommendations
from dispatchdesk.ai.gateway import LocalStubProvider, TextGenerationGateway

TEMPLATE = "PROJECT={{projectName}} DESC={{projectDescription}}\n{{candidates}}"
TODAY = date(2024, 5, 20)


def _reply(*items):
    return {"recommendations": [
        {"userId": uid, "totalScore": score, "reason": f"reason {uid}"} for uid, score in items
    ]}


class TestRanking:
    def test_stable_descending_order(self):
        raw = _reply(("A", 7), ("B", 9), ("C", 9), ("D", 3))["recommendations"]
        workload = {"A": 3, "B": 2, "C": 1, "D": 3}
        ranked = rank_recommendations(raw, workload, {})
        assert [r["candidate_id"] for r in ranked] == ["B", "C", "A", "D"]
        assert [r["score_breakdown"]["ai_score"] for r in ranked] == [7, 8, 4, 0]

    def test_unknown_candidate_has_zero_workload(self):
        ranked = rank_recommendations(_reply(("ghost", 6))["recommendations"], {}, {})
        assert ranked[0]["score_breakdown"] == {"workload_score": 0, "ai_score": 6}
        assert ranked[0]["candidate_name"] is None


class TestArchitectRecommendation:
    def test_end_to_end(self, make_user, make_project, add_entry):
        busy = make_user("Li Ming", title="首席架构师",
                         persona={"summary": "Grid expert", "domains": ["Grid", "VPP"]})
        idle = make_user("Wang Lei", title="高级架构师")
        project = make_project(description="Aggregate industrial loads.")
        for d in range(14, 20):
            add_entry(project, date(2024, 5, d), author="Li Ming")

        provider = LocalStubProvider([_reply((str(busy.id), 6), (str(idle.id), 8))])
        gw = TextGenerationGateway(provider)

        result = ArchitectRecommendation(gw).recommend(project, [busy, idle], [project], TEMPLATE, today=TODAY)

        prompt = provider.calls[0]["prompt"]
        assert "PROJECT=Hangzhou VPP Pilot DESC=Aggregate industrial loads." in prompt
        assert f"ID: {busy.id} | Name: Li Ming | Title: 首席架构师 | Workload score: 1/3" in prompt
        assert "Persona: Grid expert | Domains: Grid, VPP" in prompt
        assert f"ID: {idle.id} | Name: Wang Lei | Title: 高级架构师 | Workload score: 3/3" in prompt
        assert "Persona: no persona data" in prompt

        recs = result["recommendations"]
        assert [r["candidate_name"] for r in recs] == ["Wang Lei", "Li Ming"]
        assert recs[0]["score_breakdown"] == {"workload_score": 3, "ai_score": 5}
        assert recs[1]["score_breakdown"] == {"workload_score": 1, "ai_score": 5}
        assert result["workload"] == {str(busy.id): 1, str(idle.id): 3}

    def test_malformed_reply_gives_empty_list(self, make_user, make_project):
        user = make_user()
        gw = TextGenerationGateway(LocalStubProvider([{"items": []}]))
        result = ArchitectRecommendation(gw).recommend(make_project(), [user], [], TEMPLATE, today=TODAY)
        assert result["recommendations"] == []
        assert result["error"] == "MalformedResponse"

    def test_request_failure_gives_empty_list(self, make_user, make_project):
        gw = TextGenerationGateway(LocalStubProvider([ConnectionError("reset")]))
        result = ArchitectRecommendation(gw).recommend(make_project(), [make_user()], [], TEMPLATE, today=TODAY)
        assert result["recommendations"] == []

    def test_no_credential_makes_no_calls(self, make_user, make_project):
        gw = TextGenerationGateway(None)
        result = ArchitectRecommendation(gw).recommend(make_project(), [make_user()], [], TEMPLATE, today=TODAY)
        assert result["recommendations"] == []
        assert result["error"] == "ProviderUnavailable"

    def test_no_candidates(self, make_project):
        provider = LocalStubProvider()
        result = ArchitectRecommendation(TextGenerationGateway(provider)).recommend(
            make_project(), [], [], TEMPLATE, today=TODAY,
        )
        assert result["recommendations"] == []
        assert provider.calls == []
