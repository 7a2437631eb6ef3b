# Rev 0.2.0
"""Assignee selection strategies used when seeding generated work.

Which member gets picked is not a stable contract; tests inject
``RoundRobinSelector`` when they need determinism.
"""
from __future__ import annotations

import random
from typing import Dict, Optional, Protocol, Sequence

from deliverz.models.entities import StaffMember


class AssigneeSelector(Protocol):
    def choose(self, role: str, candidates: Sequence[StaffMember]) -> Optional[StaffMember]:
        ...


class RandomSelector:
    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def choose(self, role: str, candidates: Sequence[StaffMember]) -> Optional[StaffMember]:
        if not candidates:
            return None
        return self._rng.choice(list(candidates))


class RoundRobinSelector:
    """Cycles through the qualified members of each role independently."""

    def __init__(self) -> None:
        self._cursor: Dict[str, int] = {}

    def choose(self, role: str, candidates: Sequence[StaffMember]) -> Optional[StaffMember]:
        if not candidates:
            return None
        i = self._cursor.get(role, 0)
        self._cursor[role] = i + 1
        return candidates[i % len(candidates)]


class NoAssignmentSelector:
    def choose(self, role: str, candidates: Sequence[StaffMember]) -> Optional[StaffMember]:
        return None


def build_selector(strategy: str, seed: Optional[int] = None) -> AssigneeSelector:
    if strategy == "random":
        return RandomSelector(seed)
    if strategy == "round_robin":
        return RoundRobinSelector()
    if strategy == "none":
        return NoAssignmentSelector()
    raise ValueError(f"unknown assignment strategy {strategy!r}")
