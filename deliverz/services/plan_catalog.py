# Rev 0.2.0

"""Plan catalog (Rev 0.2.0)
Static plan tier -> per-category deliverable quotas.
Optional categories default to zero; settings may override any count.
"""
from __future__ import annotations

import copy
from typing import Dict, Mapping, Optional

from deliverz.models.types import QUOTA_KEYS
from .errors import UnknownPlanError

Quotas = Dict[str, int]

DEFAULT_PLANS: Dict[str, Quotas] = {
    "basic": {"posts": 8, "videos": 2, "infographics": 0, "newsletters": 0, "podcasts": 0},
    "standard": {"posts": 12, "videos": 4, "infographics": 0, "newsletters": 0, "podcasts": 0},
    "premium": {"posts": 20, "videos": 8, "infographics": 0, "newsletters": 0, "podcasts": 0},
}


class PlanCatalog:
    def __init__(self, overrides: Optional[Mapping[str, Mapping[str, int]]] = None):
        self._plans = copy.deepcopy(DEFAULT_PLANS)
        for tier, counts in (overrides or {}).items():
            if tier not in self._plans:
                raise UnknownPlanError(tier)
            for key, value in counts.items():
                if key not in QUOTA_KEYS.values():
                    raise ValueError(f"unknown quota key {key!r} for plan {tier!r}")
                if int(value) < 0:
                    raise ValueError(f"negative quota {key}={value} for plan {tier!r}")
                self._plans[tier][key] = int(value)

    def quotas_for(self, plan: str) -> Quotas:
        if plan not in self._plans:
            raise UnknownPlanError(plan)
        return dict(self._plans[plan])

    def quota(self, plan: str, category: str) -> int:
        return self.quotas_for(plan)[QUOTA_KEYS[category]]


def quotas_for(plan: str) -> Quotas:
    """Lookup against the built-in table."""
    if plan not in DEFAULT_PLANS:
        raise UnknownPlanError(plan)
    return dict(DEFAULT_PLANS[plan])
