# Rev 0.2.0
"""Loud failures. Expected, recoverable conditions (not-found, blocked
stages) are reported through UpdateResult codes instead."""
from __future__ import annotations


class UnknownPlanError(ValueError):
    def __init__(self, plan: str):
        super().__init__(f"unknown plan tier: {plan!r}")
        self.plan = plan


class DuplicateClientError(ValueError):
    def __init__(self, email: str):
        super().__init__(f"a client with email {email!r} already exists")
        self.email = email


class InvalidClientError(ValueError):
    pass
