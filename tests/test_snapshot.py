# tests/test_snapshot.py
from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import make_client
from deliverz.models.entities import StagePatch, TaskPatch
from deliverz.repositories.db import Database
from deliverz.services.snapshot import COLLECTIONS, export_snapshot, import_snapshot, read_snapshot, write_snapshot
from deliverz.services.workflow_store import WorkflowStore


@pytest.fixture()
def busy_store(store):
    client = make_client(store)
    project = store.get_current_project_for_client(client.id)
    post = store.get_tasks_by_project(project.id, category="post")[0]
    store.update_task(post.id, TaskPatch(status="complete"))
    video = store.get_tasks_by_project(project.id, category="video")[0]
    first = store.get_video_stages_by_task(video.id)[0]
    store.update_video_stage(first.id, StagePatch(status="complete"))
    make_client(store, plan="premium", email="alice@techinnovations.com", business_name="Tech Innovations Inc")
    return store


@pytest.fixture()
def other_store(tmp_path: Path, generator, staff, clock):
    database = Database(path=tmp_path / "other.db")
    database.run_migrations()
    yield WorkflowStore(database, generator, staff, clock=clock)
    database.close()


def test_export_layout_is_flat_json(busy_store):
    data = export_snapshot(busy_store)
    assert set(data) == set(COLLECTIONS)
    json.dumps(data)  # serialisable as-is
    stage = data["stages"][1]
    assert isinstance(stage["depends_on"], str)
    assert isinstance(data["clients"][0]["created_at"], str)


def test_round_trip_reproduces_state(busy_store, other_store, tmp_path):
    path = write_snapshot(busy_store, tmp_path / "snap.json")
    counts = read_snapshot(other_store, path)

    assert counts["clients"] == 2
    assert export_snapshot(other_store) == export_snapshot(busy_store)

    for client in busy_store.get_clients():
        assert other_store.get_client(client.id) == client
        assert other_store.calculate_client_progress(client.id) == busy_store.calculate_client_progress(client.id)
        project = busy_store.get_current_project_for_client(client.id)
        assert other_store.get_current_project_for_client(client.id) == project
        for task in busy_store.get_tasks_by_project(project.id):
            assert other_store.get_task(task.id) == task
            assert other_store.get_video_stages_by_task(task.id) == busy_store.get_video_stages_by_task(task.id)


def test_import_replaces_existing_rows(busy_store, other_store):
    make_client(other_store, email="someone@else.com")
    import_snapshot(other_store, export_snapshot(busy_store))
    assert other_store.get_client_by_email("someone@else.com") is None
    assert len(other_store.get_clients()) == 2


def test_import_rejects_partial_documents(other_store):
    with pytest.raises(ValueError):
        import_snapshot(other_store, {"clients": [], "projects": []})


def test_reopened_database_keeps_state(tmp_path, generator, staff, clock):
    path = tmp_path / "persist.db"
    first = Database(path)
    first.run_migrations()
    store = WorkflowStore(first, generator, staff, clock=clock)
    client = make_client(store)
    before = export_snapshot(store)
    first.close()

    second = Database(path)
    assert second.run_migrations() == []
    reopened = WorkflowStore(second, generator, staff, clock=clock)
    assert export_snapshot(reopened) == before
    assert reopened.get_client(client.id) == client
    second.close()
