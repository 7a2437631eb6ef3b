# tests/test_stage_cascade.py
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from deliverz.models.entities import Project, StagePatch, Task, VideoStage
from deliverz.models.types import STAGE_NAMES
from deliverz.services.workflow_store import WorkflowStore

T0 = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)

# --- In-memory stubs: the cascade needs no SQLite ---------------------------

class _StubDb:
    def __init__(self):
        self.transactions = 0

    @contextmanager
    def transaction(self):
        self.transactions += 1
        yield None

    @contextmanager
    def read(self):
        yield None


class _StubRepo:
    def __init__(self):
        self.rows: Dict[str, object] = {}
        self.saves: List[str] = []

    def get(self, row_id: str):
        row = self.rows.get(row_id)
        return replace(row) if row is not None else None

    def save(self, row) -> bool:
        self.rows[row.id] = replace(row)
        self.saves.append(row.id)
        return True


class _StubStageRepo(_StubRepo):
    def list_by_task(self, task_id: str) -> List[VideoStage]:
        stages = [replace(s) for s in self.rows.values() if s.task_id == task_id]
        return sorted(stages, key=lambda s: s.stage_number)


# --- Fixtures --------------------------------------------------------------

@pytest.fixture()
def stubbed(staff, generator):
    db = _StubDb()
    store = WorkflowStore(db, generator, staff, clock=lambda: T0)
    store.projects = _StubRepo()
    store.tasks = _StubRepo()
    store.stages = _StubStageRepo()

    store.projects.rows["project-1"] = Project(
        id="project-1", client_id="client-1", period="2025-03", created_at=T0, total_videos=1,
    )
    store.tasks.rows["task-1"] = Task(
        id="task-1", project_id="project-1", client_id="client-1",
        category="video", title="Video #1", created_at=T0,
    )
    previous: Optional[str] = None
    for number, name in enumerate(STAGE_NAMES, start=1):
        stage_id = f"stage-{number}"
        store.stages.rows[stage_id] = VideoStage(
            id=stage_id, task_id="task-1", stage_number=number, stage_name=name,
            created_at=T0, depends_on=previous,
        )
        previous = stage_id
    return store, db


# --- Tests -----------------------------------------------------------------

def test_final_stage_completes_task_and_rolls_up(stubbed):
    store, db = stubbed
    for number in range(1, 6):
        result = store.update_video_stage(f"stage-{number}", StagePatch(status="complete"))
        assert result.ok, result.code

    task = store.tasks.rows["task-1"]
    assert task.status == "complete"
    assert task.completed_at == T0
    project = store.projects.rows["project-1"]
    assert project.completed_videos == 1
    assert project.status == "completed"
    # the task and the project are only written by the last stage
    assert store.tasks.saves == ["task-1"]
    assert store.projects.saves == ["project-1"]
    assert db.transactions == 5


def test_blocked_stage_writes_nothing(stubbed):
    store, _ = stubbed
    result = store.update_video_stage("stage-2", StagePatch(status="in-progress"))
    assert (result.ok, result.code) == (False, "dependency_blocked")
    assert store.stages.saves == []
    assert store.tasks.saves == []


def test_reopening_final_stage_reverses_roll_up(stubbed):
    store, _ = stubbed
    for number in range(1, 6):
        store.update_video_stage(f"stage-{number}", StagePatch(status="complete"))

    result = store.update_video_stage("stage-5", StagePatch(status="in-progress"))
    assert result.ok
    assert store.tasks.rows["task-1"].status == "in-progress"
    assert store.tasks.rows["task-1"].completed_at is None
    project = store.projects.rows["project-1"]
    assert project.completed_videos == 0
    assert project.status == "active"


def test_non_status_patch_skips_cascade(stubbed):
    store, _ = stubbed
    result = store.update_video_stage("stage-1", StagePatch(clear_delivery_date=True))
    assert (result.ok, result.code) == (True, "no_change")
    assert store.tasks.saves == []
