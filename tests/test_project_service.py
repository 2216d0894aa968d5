"""
Tests — Project service (registration, history log, lifecycle).

Covers:
    - register defaults
    - append: prepend order, DELIVERABLE/NOTE type, last_active_at monotonic
    - edit: stable re-sort by date descending
    - toggle pause, status/stage, metadata
"""

from datetime import date

import pytest

from dispatchdesk.core.exceptions import NotFoundError, ValidationError
from dispatchdesk.services import project_service


class TestRegister:
    def test_defaults(self):
        project = project_service.register_project({"name": "  Grid Dispatch Upgrade ", "code": "GD-1"})
        assert project.name == "Grid Dispatch Upgrade"
        assert project.status == "NEW"
        assert project.current_stage == "OPPORTUNITY"
        assert project.manager == "未分配"
        assert project.description == "从派单池新建"
        assert project.history == []
        assert project.tags == []
        assert project.created_at == date.today()
        assert project.last_active_at == date.today()

    def test_name_required(self):
        with pytest.raises(ValidationError):
            project_service.register_project({"name": "   "})

    def test_unknown_business_unit_rejected(self):
        with pytest.raises(ValidationError):
            project_service.register_project({"name": "X", "business_unit": "Space"})


class TestAppendLog:
    def test_prepends_entry(self, make_project, add_entry):
        project = make_project()
        add_entry(project, date(2024, 1, 5), content="older")
        entry = project_service.append_log(project.id, {"content": "newest", "date": "2024-01-03"})
        assert [e.content for e in project.history] == ["newest", "older"]
        assert entry.entry_type == "NOTE"
        assert entry.author == "当前用户"

    def test_attachments_make_deliverable(self, make_project):
        project = make_project()
        entry = project_service.append_log(project.id, {
            "content": "Blueprint",
            "date": "2024-02-01",
            "attachments": [{"name": "Blueprint_v1.pdf", "size": 2048}],
        })
        assert entry.entry_type == "DELIVERABLE"
        att = entry.attachments[0]
        assert (att.name, att.size, att.file_type) == ("Blueprint_v1.pdf", "2.0 KB", "pdf")

    def test_last_active_advances_only_for_later_dates(self, make_project):
        project = make_project(last_active_at=date(2024, 5, 1))
        project_service.append_log(project.id, {"content": "earlier", "date": "2024-04-20"})
        assert project.last_active_at == date(2024, 5, 1)
        project_service.append_log(project.id, {"content": "same day", "date": "2024-05-01"})
        assert project.last_active_at == date(2024, 5, 1)
        project_service.append_log(project.id, {"content": "later", "date": "2024-05-03"})
        assert project.last_active_at == date(2024, 5, 3)

    def test_logged_in_author_is_recorded(self, make_project, make_user):
        user = make_user("Wang Lei")
        project = make_project()
        entry = project_service.append_log(project.id, {"content": "x", "author": "ignored"}, author=user)
        assert (entry.author, entry.author_id) == ("Wang Lei", user.id)

    def test_empty_content_rejected(self, make_project):
        project = make_project()
        with pytest.raises(ValidationError):
            project_service.append_log(project.id, {"content": "  "})
        assert project.history == []

    @pytest.mark.parametrize("value", ["yesterday", "15.05.2024", "05/15/2024"])
    def test_non_iso_date_rejected(self, make_project, value):
        with pytest.raises(ValidationError):
            project_service.append_log(make_project().id, {"content": "x", "date": value})

    def test_unknown_project(self):
        with pytest.raises(NotFoundError):
            project_service.append_log(999, {"content": "x"})


class TestEditLog:
    def test_resorts_by_date_descending(self, make_project, add_entry):
        project = make_project()
        a = add_entry(project, date(2024, 3, 10), content="a")
        add_entry(project, date(2024, 3, 5), content="b")
        add_entry(project, date(2024, 3, 1), content="c")

        project_service.edit_log(project.id, a.id, {"date": "2024-03-02"})

        assert [e.content for e in project.history] == ["b", "a", "c"]
        dates = [e.date for e in project.history]
        assert dates == sorted(dates, reverse=True)

    def test_ties_keep_previous_order(self, make_project, add_entry):
        project = make_project()
        add_entry(project, date(2024, 3, 5), content="first")
        add_entry(project, date(2024, 3, 5), content="second")
        c = add_entry(project, date(2024, 3, 9), content="moved")
        project_service.edit_log(project.id, c.id, {"date": "2024-03-01", "content": "moved later"})
        assert [e.content for e in project.history] == ["first", "second", "moved later"]

    def test_unknown_entry(self, make_project):
        with pytest.raises(NotFoundError):
            project_service.edit_log(make_project().id, 12345, {"content": "x"})

    def test_entry_of_other_project_not_found(self, make_project, add_entry):
        p1 = make_project("A", code="A")
        p2 = make_project("B", code="B")
        entry = add_entry(p2, date(2024, 1, 1))
        with pytest.raises(NotFoundError):
            project_service.edit_log(p1.id, entry.id, {"content": "x"})


class TestLifecycle:
    @pytest.mark.parametrize("start,expected", [
        ("PAUSED", "IN_PROGRESS"),
        ("IN_PROGRESS", "PAUSED"),
        ("NEW", "NEW"),
        ("COMPLETED", "COMPLETED"),
    ])
    def test_toggle_pause(self, make_project, start, expected):
        project = make_project(status=start)
        assert project_service.toggle_pause(project.id).status == expected

    def test_set_status_and_stage(self, make_project):
        project = make_project()
        assert project_service.set_status(project.id, "assigned").status == "ASSIGNED"
        assert project_service.set_stage(project.id, "BIDDING").stage_label == "Bidding/Tender"

    def test_invalid_status(self, make_project):
        with pytest.raises(ValidationError):
            project_service.set_status(make_project().id, "DONE")

    def test_update_metadata(self, make_project, make_user):
        project = make_project()
        architect = make_user("Li Ming")
        project_service.update_metadata(project.id, {
            "created_at": "2023-05-12",
            "tags": "IoT， Demand Response, ,Big Data ",
            "architect_id": architect.id,
        })
        assert project.created_at == date(2023, 5, 12)
        assert project.tags == ["IoT", "Demand Response", "Big Data"]
        assert project.architect_id == architect.id
        assert project.to_dict()["architect_name"] == "Li Ming"

    def test_unassigned_project_has_no_architect_name(self, make_project):
        assert make_project().to_dict()["architect_name"] is None

    def test_metadata_architect_must_exist(self, make_project):
        with pytest.raises(NotFoundError):
            project_service.update_metadata(make_project().id, {"architect_id": 42})


class TestQueries:
    def test_search_is_case_insensitive(self, make_project):
        make_project("Metering Rollout", code="AMI-7", manager="Zhang San")
        make_project("VPP Pilot", code="VPP-1", manager="Li Ming")
        assert [p.code for p in project_service.list_projects("ami")] == ["AMI-7"]
        assert [p.code for p in project_service.list_projects("li ming")] == ["VPP-1"]
        assert len(project_service.list_projects("")) == 2

    def test_contributors_and_attachments(self, make_project, add_entry):
        project = make_project()
        add_entry(project, date(2024, 1, 3), author="Li Ming", attachments=["a.pdf"])
        add_entry(project, date(2024, 1, 2), author="Wang Lei")
        add_entry(project, date(2024, 1, 1), author="Li Ming", attachments=["b.pdf", "c.pdf"])
        assert project.contributors == ["Li Ming", "Wang Lei"]
        assert [a["name"] for a in project.attachments()] == ["a.pdf", "b.pdf", "c.pdf"]
