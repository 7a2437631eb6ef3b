# Rev 0.2.0
"""
Developer seed: wipes the store and creates demo clients with some progress.

Usage:
    python -m deliverz.dev_seed [--db PATH]
"""
from __future__ import annotations

import argparse
import random
from datetime import timedelta
from pathlib import Path
from typing import Optional

from deliverz.app_context import AppContext
from deliverz.models.entities import StagePatch, TaskPatch
from deliverz.services.workflow_store import WorkflowStore
from deliverz.utils.logging_setup import get_logger

log = get_logger("dev_seed")

MANAGER = "manager@company.com"

EXTRA_CLIENTS = (
    dict(business_name="Tech Innovations Inc", owner_name="Alice Chen", email="alice@techinnovations.com",
         phone="5551234567", plan="premium", msa_file="msa-tech-innovations.pdf",
         assets_file="assets-tech-innovations.zip"),
    dict(business_name="Green Garden Cafe", owner_name="Bob Wilson", email="bob@greengarden.com",
         phone="5559876543", plan="basic", msa_file="msa-green-garden.pdf",
         assets_file="assets-green-garden.zip"),
    dict(business_name="Fitness First Gym", owner_name="Carol Martinez", email="carol@fitnessfirst.com",
         phone="5555551234", plan="standard", msa_file="msa-fitness-first.pdf",
         assets_file="assets-fitness-first.zip"),
)


def seed_demo_data(store: WorkflowStore, *, rng: Optional[random.Random] = None) -> None:
    rng = rng or random.Random()
    today = store.now().date()

    store.clear_all_data()

    raj = store.create_client(
        business_name="Raj's Restaurant",
        owner_name="Raj Kumar",
        email="raj@restaurant.com",
        phone="9876543210",
        plan="standard",
        msa_file="msa-raj-restaurant.pdf",
        assets_file="assets-raj-restaurant.zip",
        created_by=MANAGER,
    )
    project = store.get_current_project_for_client(raj.id)
    posts = store.get_tasks_by_project(project.id, category="post")

    # first 5 posts delivered, next 3 underway, the rest scheduled
    for i, task in enumerate(posts[:5]):
        store.update_task(task.id, TaskPatch(status="complete", delivery_date=today - timedelta(days=10 - i * 2)))
    for i, task in enumerate(posts[5:8]):
        store.update_task(task.id, TaskPatch(status="in-progress", delivery_date=today + timedelta(days=i + 1)))
    for i, task in enumerate(posts[8:]):
        store.update_task(task.id, TaskPatch(delivery_date=today + timedelta(days=5 + i * 2)))

    videos = store.get_tasks_by_project(project.id, category="video")
    if videos:
        stages = store.get_video_stages_by_task(videos[0].id)
        for i, stage in enumerate(stages[:3]):
            store.update_video_stage(stage.id, StagePatch(status="complete", delivery_date=today - timedelta(days=6 - i)))
        store.update_video_stage(stages[3].id, StagePatch(status="in-progress", delivery_date=today + timedelta(days=2)))
        store.update_video_stage(stages[4].id, StagePatch(delivery_date=today + timedelta(days=4)))

    for fields in EXTRA_CLIENTS:
        client = store.create_client(created_by=MANAGER, **fields)
        project = store.get_current_project_for_client(client.id)
        # video tasks only complete through their stages
        deliverables = [t for t in store.get_tasks_by_project(project.id) if not t.is_video]
        for task in deliverables[: rng.randint(1, 5)]:
            store.update_task(
                task.id,
                TaskPatch(status="complete", delivery_date=today - timedelta(days=rng.randint(0, 9))),
            )

    log.info("Seed data created: %d clients", len(store.get_clients()))


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="deliverz-seed", description="Seed deliverZ with demo clients")
    p.add_argument("--db", type=Path, default=None, help="Path to SQLite DB (default: settings db_path)")
    ns = p.parse_args(argv)

    ctx = AppContext.create(ns.db)
    try:
        seed_demo_data(ctx.store)
        for c in ctx.store.get_clients():
            print(f"{c.business_name:<24} {c.plan:<9} {ctx.store.calculate_client_progress(c.id):>3}%")
    finally:
        ctx.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
