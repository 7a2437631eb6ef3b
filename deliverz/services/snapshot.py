# Rev 0.2.0

"""Snapshot export/import (Rev 0.2.0)
Four flat JSON collections, one list of records each:

    {"clients": [...], "projects": [...], "tasks": [...], "stages": [...]}

Records carry their own ids and string foreign keys; timestamps are ISO-8601.
Import replaces the store contents in one transaction.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

from deliverz.models.entities import Client, Project, Task, VideoStage
from deliverz.utils.logging_setup import get_logger
from .workflow_store import WorkflowStore

log = get_logger("snapshot")

COLLECTIONS = ("clients", "projects", "tasks", "stages")


def export_snapshot(store: WorkflowStore) -> Dict[str, List[Dict[str, Any]]]:
    return {
        "clients": [c.to_dict() for c in store.clients.list_all()],
        "projects": [p.to_dict() for p in store.projects.list_all()],
        "tasks": [t.to_dict() for t in store.tasks.list_all()],
        "stages": [s.to_dict() for s in store.stages.list_all()],
    }


def import_snapshot(store: WorkflowStore, data: Dict[str, List[Dict[str, Any]]]) -> Dict[str, int]:
    missing = [name for name in COLLECTIONS if name not in data]
    if missing:
        raise ValueError(f"snapshot is missing collections: {', '.join(missing)}")

    clients = [Client.from_dict(r) for r in data["clients"]]
    projects = [Project.from_dict(r) for r in data["projects"]]
    tasks = [Task.from_dict(r) for r in data["tasks"]]
    stages = _dependency_order([VideoStage.from_dict(r) for r in data["stages"]])

    with store.transaction():
        for repo in (store.stages, store.tasks, store.projects, store.clients):
            repo.delete_all()
        for c in clients:
            store.clients.insert(c)
        for p in projects:
            store.projects.insert(p)
        for t in tasks:
            store.tasks.insert(t)
        for s in stages:
            store.stages.insert(s)

    counts = {"clients": len(clients), "projects": len(projects), "tasks": len(tasks), "stages": len(stages)}
    log.info("Imported snapshot: %s", counts)
    return counts


def _dependency_order(stages: List[VideoStage]) -> List[VideoStage]:
    # a stage row must exist before the row whose depends_on points at it
    index = {s.id: i for i, s in enumerate(stages)}
    if all(s.depends_on is None or index.get(s.depends_on, -1) < index[s.id] for s in stages):
        return stages
    return sorted(stages, key=lambda s: (s.task_id, s.stage_number))


def write_snapshot(store: WorkflowStore, path: Path) -> Path:
    path.write_text(json.dumps(export_snapshot(store), indent=2), encoding="utf-8")
    log.info("Wrote snapshot to %s", path)
    return path


def read_snapshot(store: WorkflowStore, path: Path) -> Dict[str, int]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return import_snapshot(store, data)
