# File: deliverz/tools/cli.py
# Usage examples:
#   python -m deliverz.tools.cli migrate
#   python -m deliverz.tools.cli seed
#   python -m deliverz.tools.cli progress raj@restaurant.com
#   python -m deliverz.tools.cli export snapshot.json
#   python -m deliverz.tools.cli import snapshot.json --db /tmp/copy.db
#   python -m deliverz.tools.cli workload karan@company.com
#
# Notes:
# - DB path defaults to env DELIVERZ_DB, then settings.json db_path

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from deliverz.app_context import AppContext
from deliverz.dev_seed import seed_demo_data
from deliverz.services.snapshot import read_snapshot, write_snapshot
from deliverz.utils.logging_setup import setup_logging


def cmd_migrate(ctx: AppContext) -> int:
    # AppContext.create already ran pending migrations
    print(f"Applied migrations: {', '.join(sorted(ctx.db.applied())) or '(none)'}")
    return 0


def cmd_seed(ctx: AppContext) -> int:
    seed_demo_data(ctx.store)
    print(f"Seeded {len(ctx.store.get_clients())} clients into {ctx.db_path}")
    return 0


def cmd_progress(ctx: AppContext, email: Optional[str]) -> int:
    store = ctx.store
    if email:
        client = store.get_client_by_email(email)
        if client is None:
            print(f"No client with email {email}", file=sys.stderr)
            return 1
        clients = [client]
    else:
        clients = store.get_clients()
        if not clients:
            print("No clients yet; run `deliverz seed` or create one first")
            return 0
    for client in clients:
        project = store.get_current_project_for_client(client.id)
        print(f"{client.business_name} ({client.plan}) {store.calculate_client_progress(client.id)}%")
        if project is None:
            print("  no project for the current period")
            continue
        for task in store.get_tasks_by_project(project.id, category="video"):
            print(f"  {task.title:<12} {store.calculate_video_progress(task.id):>3}%  {task.status}")
    return 0


def cmd_workload(ctx: AppContext, email: str) -> int:
    member = ctx.staff.get(email)
    if member is None:
        print(f"No staff member with email {email}", file=sys.stderr)
        return 1
    w = ctx.store.staff_workload(member.email)
    print(f"{member.name} ({member.role}): {w.open_items} open")
    print(f"  tasks:  {w.tasks}")
    print(f"  stages: {w.stages}")
    return 0


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="deliverz", description="deliverZ workflow store tools")
    p.add_argument("--db", type=Path, default=None, help="Path to SQLite DB (default: DELIVERZ_DB or settings)")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("migrate", help="Apply pending migrations")
    sub.add_parser("seed", help="Replace all data with demo clients")

    s_progress = sub.add_parser("progress", help="Show client progress for the current period")
    s_progress.add_argument("email", nargs="?", default=None)

    s_export = sub.add_parser("export", help="Write the four collections to a JSON snapshot")
    s_export.add_argument("path", type=Path)

    s_import = sub.add_parser("import", help="Replace all data from a JSON snapshot")
    s_import.add_argument("path", type=Path)

    s_workload = sub.add_parser("workload", help="Show a staff member's assigned work")
    s_workload.add_argument("email")

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    setup_logging()
    ctx = AppContext.create(ns.db)
    try:
        if ns.cmd == "migrate":
            return cmd_migrate(ctx)
        if ns.cmd == "seed":
            return cmd_seed(ctx)
        if ns.cmd == "progress":
            return cmd_progress(ctx, ns.email)
        if ns.cmd == "export":
            write_snapshot(ctx.store, ns.path)
            return 0
        if ns.cmd == "import":
            counts = read_snapshot(ctx.store, ns.path)
            print(f"Imported {counts}")
            return 0
        if ns.cmd == "workload":
            return cmd_workload(ctx, ns.email)
        return 2
    finally:
        ctx.close()


if __name__ == "__main__":
    raise SystemExit(main())
