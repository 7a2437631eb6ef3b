# Rev 0.2.0

"""Pytest fixtures for deliverZ (Rev 0.2.0)"""
from __future__ import annotations
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from deliverz.repositories.db import Database
from deliverz.services.assignment import RoundRobinSelector
from deliverz.services.plan_catalog import PlanCatalog
from deliverz.services.staff_directory import StaffDirectory
from deliverz.services.task_generator import TaskGenerator
from deliverz.services.workflow_store import WorkflowStore


class FakeClock:
    """Fixed, manually advanced UTC clock."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture()
def db(tmp_path: Path):
    database = Database(path=tmp_path / "test.db")
    try:
        database.run_migrations()
        yield database
    finally:
        database.close()


@pytest.fixture()
def staff() -> StaffDirectory:
    return StaffDirectory()


@pytest.fixture()
def generator(staff: StaffDirectory) -> TaskGenerator:
    return TaskGenerator(PlanCatalog(), staff, RoundRobinSelector())


@pytest.fixture()
def store(db: Database, generator: TaskGenerator, staff: StaffDirectory, clock: FakeClock) -> WorkflowStore:
    return WorkflowStore(db, generator, staff, clock=clock)


def make_client(store: WorkflowStore, plan: str = "standard", email: str = "raj@restaurant.com", **extra):
    fields = dict(
        business_name="Raj's Restaurant",
        owner_name="Raj Kumar",
        email=email,
        phone="9876543210",
        plan=plan,
        created_by="manager@company.com",
    )
    fields.update(extra)
    return store.create_client(**fields)


@pytest.fixture()
def client(store: WorkflowStore):
    return make_client(store)


@pytest.fixture()
def project(store: WorkflowStore, client):
    return store.get_current_project_for_client(client.id)


@pytest.fixture()
def video_task(store: WorkflowStore, project):
    return store.get_tasks_by_project(project.id, category="video")[0]
