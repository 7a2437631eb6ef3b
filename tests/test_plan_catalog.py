# tests/test_plan_catalog.py
from __future__ import annotations

import pytest

from deliverz.services.errors import UnknownPlanError
from deliverz.services.plan_catalog import PlanCatalog, quotas_for


@pytest.mark.parametrize(
    "plan,posts,videos",
    [
        ("basic", 8, 2),
        ("standard", 12, 4),
        ("premium", 20, 8),
    ],
)
def test_builtin_quotas(plan, posts, videos):
    q = quotas_for(plan)
    assert (q["posts"], q["videos"]) == (posts, videos)
    assert q["infographics"] == q["newsletters"] == q["podcasts"] == 0


def test_unknown_plan_is_loud():
    with pytest.raises(UnknownPlanError):
        quotas_for("platinum")
    with pytest.raises(UnknownPlanError):
        PlanCatalog().quotas_for("")


def test_overrides_merge_over_defaults():
    catalog = PlanCatalog({"premium": {"infographics": 4, "podcasts": 2}})
    q = catalog.quotas_for("premium")
    assert q == {"posts": 20, "videos": 8, "infographics": 4, "newsletters": 0, "podcasts": 2}
    # other tiers untouched, and the module table is not mutated
    assert catalog.quotas_for("basic")["infographics"] == 0
    assert quotas_for("premium")["infographics"] == 0


def test_returned_quotas_are_copies():
    catalog = PlanCatalog()
    catalog.quotas_for("basic")["posts"] = 999
    assert catalog.quota("basic", "post") == 8


@pytest.mark.parametrize(
    "overrides,exc",
    [
        ({"gold": {"posts": 1}}, UnknownPlanError),
        ({"basic": {"reels": 1}}, ValueError),
        ({"basic": {"posts": -1}}, ValueError),
    ],
)
def test_bad_overrides_rejected(overrides, exc):
    with pytest.raises(exc):
        PlanCatalog(overrides)
