# Rev 0.2.0
"""Staff directory: the production team roster, one role per member."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

from deliverz.models.entities import StaffMember
from deliverz.models.types import CATEGORY_ROLES, ROLES, STAGE_ROLES

DEFAULT_ROSTER: Tuple[StaffMember, ...] = (
    StaffMember("priya@company.com", "Priya Sharma", "designer"),
    StaffMember("amit@company.com", "Amit Mehta", "designer"),
    StaffMember("sarah@company.com", "Sarah Johnson", "scriptWriter"),
    StaffMember("vikram@company.com", "Vikram Patel", "scriptWriter"),
    StaffMember("karan@company.com", "Karan Singh", "imageSpecialist"),
    StaffMember("deepak@company.com", "Deepak Kumar", "imageSpecialist"),
    StaffMember("neha@company.com", "Neha Verma", "motionDesigner"),
    StaffMember("maya@company.com", "Maya Reddy", "motionDesigner"),
    StaffMember("rajesh@company.com", "Rajesh Nair", "voiceSpecialist"),
    StaffMember("alex@company.com", "Alex Thompson", "voiceSpecialist"),
    StaffMember("rohit@company.com", "Rohit Sharma", "videoEditor"),
    StaffMember("ananya@company.com", "Ananya Gupta", "videoEditor"),
)


class StaffDirectory:
    def __init__(self, members: Iterable[StaffMember] = DEFAULT_ROSTER):
        self._members: List[StaffMember] = list(members)
        self._by_email: Dict[str, StaffMember] = {}
        for m in self._members:
            if m.role not in ROLES:
                raise ValueError(f"unknown staff role {m.role!r} for {m.email}")
            key = m.email.lower()
            if key in self._by_email:
                raise ValueError(f"duplicate staff email {m.email}")
            self._by_email[key] = m

    def members(self) -> List[StaffMember]:
        return list(self._members)

    def members_with_role(self, role: str) -> List[StaffMember]:
        return [m for m in self._members if m.role == role]

    def get(self, email: str) -> Optional[StaffMember]:
        return self._by_email.get(email.strip().lower())

    def members_for_category(self, category: str) -> List[StaffMember]:
        role = CATEGORY_ROLES[category]
        return self.members_with_role(role) if role else []

    def members_for_stage(self, stage_name: str) -> List[StaffMember]:
        return self.members_with_role(STAGE_ROLES[stage_name])
