"""
Tests — Demo data seeding.
"""

from dispatchdesk.models.project import Project
from dispatchdesk.models.user import User
from dispatchdesk.services.seed_service import DEMO_PROJECTS, DEMO_USERS, seed_demo_data


class TestSeedDemoData:
    def test_seeds_once(self):
        first = seed_demo_data()
        assert first == {"users": len(DEMO_USERS), "projects": len(DEMO_PROJECTS), "templates": 5}
        assert seed_demo_data() == {"users": 0, "projects": 0, "templates": 0}
        assert User.query.count() == len(DEMO_USERS)

    def test_history_is_newest_first(self):
        seed_demo_data()
        for project in Project.query.all():
            dates = [e.date for e in project.history]
            assert dates == sorted(dates, reverse=True)

    def test_seeded_architects_are_candidates(self, client):
        seed_demo_data()
        names = [u["name"] for u in client.get("/api/v1/users?role=ARCHITECT").get_json()["items"]]
        assert names == ["Li Ming", "Wang Lei", "Li Si"]
