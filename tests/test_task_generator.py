# tests/test_task_generator.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from deliverz.models.entities import Client, StaffMember
from deliverz.models.types import STAGE_NAMES, STAGE_ROLES
from deliverz.services.assignment import NoAssignmentSelector, RandomSelector, RoundRobinSelector
from deliverz.services.errors import UnknownPlanError
from deliverz.services.plan_catalog import PlanCatalog
from deliverz.services.staff_directory import StaffDirectory
from deliverz.services.task_generator import TaskGenerator

NOW = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


def _client(plan: str) -> Client:
    return Client(
        id="client-1", business_name="Biz", owner_name="Owner", email="o@biz.com",
        phone="", plan=plan, created_at=NOW, created_by="manager@company.com",
    )


@pytest.fixture()
def staff() -> StaffDirectory:
    return StaffDirectory()


def test_generate_standard_project(staff):
    gen = TaskGenerator(PlanCatalog(), staff, RoundRobinSelector())
    out = gen.generate_project(_client("standard"), NOW)

    p = out.project
    assert p.period == "2025-03"
    assert p.status == "active"
    assert (p.total_posts, p.total_videos, p.total_infographics) == (12, 4, 0)
    assert p.completed_deliverables == 0

    posts = out.tasks_in("post")
    assert [t.title for t in posts] == [f"Post #{n}" for n in range(1, 13)]
    assert [t.title for t in out.tasks_in("video")] == ["Video #1", "Video #2", "Video #3", "Video #4"]
    assert all(t.status == "not-started" and t.project_id == p.id for t in out.tasks)
    assert len(out.stages) == 4 * 5


def test_stage_chain(staff):
    gen = TaskGenerator(PlanCatalog(), staff, RoundRobinSelector())
    task_id = "task-xyz"
    stages = gen.generate_stages(task_id, NOW)

    assert [s.stage_number for s in stages] == [1, 2, 3, 4, 5]
    assert [s.stage_name for s in stages] == list(STAGE_NAMES)
    assert stages[0].depends_on is None
    for prev, cur in zip(stages, stages[1:]):
        assert cur.depends_on == prev.id
    assert all(s.task_id == task_id and s.status == "not-started" for s in stages)
    assert len({s.id for s in stages}) == 5


def test_seeded_assignees_hold_the_right_role(staff):
    # which member is picked is random; only the role is a contract
    gen = TaskGenerator(PlanCatalog(), staff, RandomSelector())
    out = gen.generate_project(_client("premium"), NOW)

    for task in out.tasks_in("post"):
        assert staff.get(task.assignee.email).role == "designer"
    for task in out.tasks_in("video"):
        assert task.assignee is None
    for stage in out.stages:
        assert staff.get(stage.assignee.email).role == STAGE_ROLES[stage.stage_name]


def test_round_robin_spreads_work(staff):
    gen = TaskGenerator(PlanCatalog(), staff, RoundRobinSelector())
    out = gen.generate_project(_client("basic"), NOW)
    emails = [t.assignee.email for t in out.tasks_in("post")]
    designers = [m.email for m in staff.members_with_role("designer")]
    assert emails[:4] == [designers[0], designers[1], designers[0], designers[1]]


def test_optional_categories_from_overrides(staff):
    catalog = PlanCatalog({"basic": {"newsletters": 2, "podcasts": 1}})
    gen = TaskGenerator(catalog, staff, NoAssignmentSelector())
    out = gen.generate_project(_client("basic"), NOW)
    assert [t.title for t in out.tasks_in("newsletter")] == ["Newsletter #1", "Newsletter #2"]
    assert [t.title for t in out.tasks_in("podcast")] == ["Podcast #1"]
    assert out.project.total_newsletters == 2
    assert all(t.assignee is None for t in out.tasks)


def test_unknown_plan_aborts(staff):
    gen = TaskGenerator(PlanCatalog(), staff)
    with pytest.raises(UnknownPlanError):
        gen.generate_project(_client("gold"), NOW)


def test_staff_directory_role_filters(staff):
    assert len(staff.members()) == 12
    assert {m.role for m in staff.members_for_category("post")} == {"designer"}
    assert {m.role for m in staff.members_for_category("newsletter")} == {"scriptWriter"}
    assert {m.role for m in staff.members_for_category("podcast")} == {"voiceSpecialist"}
    assert staff.members_for_category("video") == []
    assert [m.role for m in staff.members_for_stage("edit")] == ["videoEditor", "videoEditor"]
    assert staff.get(" PRIYA@company.com ").name == "Priya Sharma"
    assert staff.get("nobody@company.com") is None


def test_staff_directory_rejects_bad_roster():
    with pytest.raises(ValueError):
        StaffDirectory([StaffMember("a@x.com", "A", "juggler")])
    with pytest.raises(ValueError):
        StaffDirectory([StaffMember("a@x.com", "A", "designer"), StaffMember("A@x.com", "B", "designer")])
