# Rev 0.2.0

"""Workflow store (Rev 0.2.0)
The single entry point the dashboards talk to: clients, project periods,
tasks and video stages, plus the roll-ups derived from them.

- One store object per process, handed to callers (see app_context)
- Every mutation runs inside Database.transaction() and is committed before
  the call returns; the database lock makes the store single-writer
  and reads wait on the same lock
- Reads of unknown ids return None / [] and never raise
- Updates return UpdateResult; dependency violations are rejections, not errors
"""
from __future__ import annotations

import sqlite3
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from deliverz.models.entities import (
    Assignee,
    Client,
    ClientPatch,
    Project,
    StagePatch,
    Task,
    TaskPatch,
    UpdateResult,
    VideoStage,
    Workload,
)
from deliverz.models.types import CATEGORY_ROLES, STAGE_ROLES, STATUSES
from deliverz.repositories.db import Database
from deliverz.repositories.sqlite_client_repository import SQLiteClientRepository
from deliverz.repositories.sqlite_project_repository import SQLiteProjectRepository
from deliverz.repositories.sqlite_stage_repository import SQLiteVideoStageRepository
from deliverz.repositories.sqlite_task_repository import SQLiteTaskRepository
from deliverz.utils.logging_setup import get_logger
from . import progress
from .errors import DuplicateClientError, InvalidClientError
from .staff_directory import StaffDirectory
from .stage_rules import all_complete, check_stage_transition
from .task_generator import TaskGenerator, new_id, period_key


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkflowStore:
    def __init__(
        self,
        db: Database,
        generator: TaskGenerator,
        staff: StaffDirectory,
        *,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._db = db
        self._generator = generator
        self._staff = staff
        self._clock = clock
        self._log = get_logger("store")

        self.clients = SQLiteClientRepository(db)
        self.projects = SQLiteProjectRepository(db)
        self.tasks = SQLiteTaskRepository(db)
        self.stages = SQLiteVideoStageRepository(db)

    @property
    def staff(self) -> StaffDirectory:
        return self._staff

    def transaction(self):
        """Run several store calls as one atomic unit."""
        return self._db.transaction()

    def read(self):
        """Hold the store lock across several reads for a consistent view."""
        return self._db.read()

    def now(self) -> datetime:
        return self._clock()

    def current_period(self) -> str:
        return period_key(self._clock())

    # ---------------- clients ----------------

    def create_client(
        self,
        *,
        business_name: str,
        owner_name: str,
        email: str,
        phone: str = "",
        plan: str,
        msa_file: Optional[str] = None,
        assets_file: Optional[str] = None,
        created_by: str = "",
    ) -> Client:
        """Create a client and, atomically, its current project, tasks and stages."""
        missing = [
            label
            for label, value in (("business_name", business_name), ("owner_name", owner_name), ("email", email))
            if not (value or "").strip()
        ]
        if missing:
            raise InvalidClientError(f"missing required client fields: {', '.join(missing)}")

        now = self._clock()
        client = Client(
            id=new_id("client"),
            business_name=business_name.strip(),
            owner_name=owner_name.strip(),
            email=email.strip(),
            phone=(phone or "").strip(),
            plan=plan,
            created_at=now,
            created_by=created_by,
            msa_file=msa_file,
            assets_file=assets_file,
        )
        try:
            with self._db.transaction():
                # under the lock so selectors never interleave; UnknownPlanError rolls back
                generated = self._generator.generate_project(client, now)
                if self.clients.get_by_email(client.email) is not None:
                    raise DuplicateClientError(client.email)
                self.clients.insert(client)
                self.projects.insert(generated.project)
                for task in generated.tasks:
                    self.tasks.insert(task)
                for stage in generated.stages:
                    self.stages.insert(stage)
        except sqlite3.IntegrityError as exc:
            if "clients.email" in str(exc) or "ux_clients_email" in str(exc):
                raise DuplicateClientError(client.email) from exc
            raise

        self._log.info(
            "Created client %s (%s, plan=%s) with project %s: %d tasks, %d stages",
            client.id, client.business_name, client.plan, generated.project.id,
            len(generated.tasks), len(generated.stages),
        )
        return client

    def get_clients(self) -> List[Client]:
        return self.clients.list_all()

    def get_client(self, client_id: str) -> Optional[Client]:
        return self.clients.get(client_id)

    def get_client_by_email(self, email: str) -> Optional[Client]:
        return self.clients.get_by_email(email)

    def update_client(self, client_id: str, patch: ClientPatch) -> Optional[Client]:
        with self._db.transaction():
            client = self.clients.get(client_id)
            if client is None:
                return None
            changes = {k: v for k, v in vars(patch).items() if v is not None}
            for key in ("business_name", "owner_name", "phone"):
                if key in changes:
                    changes[key] = changes[key].strip()
            blank = [k for k in ("business_name", "owner_name") if k in changes and not changes[k]]
            if blank:
                raise InvalidClientError(f"required client fields cannot be blank: {', '.join(blank)}")
            if not changes:
                return client
            updated = replace(client, **changes)
            self.clients.save(updated)
        self._log.info("Updated client %s: %s", client_id, sorted(changes))
        return updated

    # ---------------- projects ----------------

    def get_projects(self) -> List[Project]:
        return self.projects.list_all()

    def get_project(self, project_id: str) -> Optional[Project]:
        return self.projects.get(project_id)

    def get_projects_by_client(self, client_id: str) -> List[Project]:
        return self.projects.list_by_client(client_id)

    def get_current_project_for_client(self, client_id: str) -> Optional[Project]:
        return self.projects.get_for_period(client_id, self.current_period())

    # ---------------- tasks ----------------

    def get_task(self, task_id: str) -> Optional[Task]:
        return self.tasks.get(task_id)

    def get_tasks_by_project(self, project_id: str, *, category: Optional[str] = None) -> List[Task]:
        return self.tasks.list_by_project(project_id, category=category)

    def get_tasks_by_client(self, client_id: str) -> List[Task]:
        return self.tasks.list_by_client(client_id)

    def get_tasks_by_assignee(self, email: str) -> List[Task]:
        return self.tasks.list_by_assignee(email)

    def update_task(self, task_id: str, patch: TaskPatch) -> UpdateResult:
        with self._db.transaction():
            task = self.tasks.get(task_id)
            if task is None:
                return UpdateResult(False, "not_found", message=f"task {task_id} not found")

            if patch.status is not None and patch.status not in STATUSES:
                return UpdateResult(False, "invalid_status", task, f"unknown status {patch.status!r}")

            # video completion only ever follows from its stages
            if task.is_video and patch.status is not None and patch.status != task.status and (
                patch.status == "complete" or task.status == "complete"
            ):
                self._log.warning("Rejected direct completion change on video task %s", task_id)
                return UpdateResult(
                    False, "managed_by_stages", task,
                    "Video task completion follows its stages.",
                )

            if patch.assignee is not None and not self._qualified(patch.assignee, CATEGORY_ROLES[task.category]):
                return UpdateResult(
                    False, "unqualified_assignee", task,
                    f"{patch.assignee.email} cannot take {task.category} work",
                )

            updated = replace(task)
            if patch.title is not None:
                updated.title = patch.title
            if patch.clear_delivery_date:
                updated.delivery_date = None
            elif patch.delivery_date is not None:
                updated.delivery_date = patch.delivery_date
            if patch.clear_assignee:
                updated.assignee = None
            elif patch.assignee is not None:
                updated.assignee = self._canonical(patch.assignee)

            delta = 0
            if patch.status is not None and patch.status != task.status:
                updated.status = patch.status
                if patch.status == "complete":
                    updated.completed_at = self._clock()
                    delta = 1
                elif task.status == "complete":
                    updated.completed_at = None
                    delta = -1

            if updated.to_dict() == task.to_dict():
                return UpdateResult(True, "no_change", task)

            self.tasks.save(updated)
            if delta:
                self._roll_up(updated, delta)

        self._log.info("Updated task %s (%s): status=%s", task_id, task.title, updated.status)
        return UpdateResult(True, "applied", updated)

    def assign_task(self, task_id: str, email: Optional[str]) -> UpdateResult:
        if email is None:
            return self.update_task(task_id, TaskPatch(clear_assignee=True))
        member = self._staff.get(email)
        if member is None:
            return UpdateResult(False, "unqualified_assignee", self.tasks.get(task_id), f"unknown staff member {email}")
        return self.update_task(task_id, TaskPatch(assignee=member.as_assignee()))

    # ---------------- video stages ----------------

    def get_video_stage(self, stage_id: str) -> Optional[VideoStage]:
        return self.stages.get(stage_id)

    def get_video_stages_by_task(self, task_id: str) -> List[VideoStage]:
        return self.stages.list_by_task(task_id)

    def get_video_stages_by_assignee(self, email: str) -> List[VideoStage]:
        return self.stages.list_by_assignee(email)

    def update_video_stage(self, stage_id: str, patch: StagePatch) -> UpdateResult:
        with self._db.transaction():
            stage = self.stages.get(stage_id)
            if stage is None:
                return UpdateResult(False, "not_found", message=f"stage {stage_id} not found")

            if patch.status is not None:
                siblings = self.stages.list_by_task(stage.task_id)
                predecessor = self.stages.get(stage.depends_on) if stage.depends_on else None
                successor = next((s for s in siblings if s.depends_on == stage.id), None)
                check = check_stage_transition(stage, patch.status, predecessor, successor)
                if not check.ok:
                    self._log.warning(
                        "Rejected stage %s (%s #%d) -> %s: %s",
                        stage_id, stage.stage_name, stage.stage_number, patch.status, check.code,
                    )
                    return UpdateResult(False, check.code, stage, check.message)

            if patch.assignee is not None and not self._qualified(patch.assignee, STAGE_ROLES[stage.stage_name]):
                return UpdateResult(
                    False, "unqualified_assignee", stage,
                    f"{patch.assignee.email} cannot take the {stage.stage_name} stage",
                )

            updated = replace(stage)
            if patch.clear_delivery_date:
                updated.delivery_date = None
            elif patch.delivery_date is not None:
                updated.delivery_date = patch.delivery_date
            if patch.clear_assignee:
                updated.assignee = None
            elif patch.assignee is not None:
                updated.assignee = self._canonical(patch.assignee)

            entering = leaving = False
            if patch.status is not None and patch.status != stage.status:
                updated.status = patch.status
                entering = patch.status == "complete"
                leaving = stage.status == "complete"
                if entering:
                    updated.completed_at = self._clock()
                elif leaving:
                    updated.completed_at = None

            if updated.to_dict() == stage.to_dict():
                return UpdateResult(True, "no_change", stage)

            self.stages.save(updated)
            if entering or leaving:
                self._sync_video_task(updated.task_id)

        self._log.info(
            "Updated stage %s (%s #%d): status=%s",
            stage_id, updated.stage_name, updated.stage_number, updated.status,
        )
        return UpdateResult(True, "applied", updated)

    def assign_stage(self, stage_id: str, email: Optional[str]) -> UpdateResult:
        if email is None:
            return self.update_video_stage(stage_id, StagePatch(clear_assignee=True))
        member = self._staff.get(email)
        if member is None:
            return UpdateResult(False, "unqualified_assignee", self.stages.get(stage_id), f"unknown staff member {email}")
        return self.update_video_stage(stage_id, StagePatch(assignee=member.as_assignee()))

    # ---------------- progress ----------------

    def calculate_client_progress(self, client_id: str) -> int:
        return progress.project_progress(self.get_current_project_for_client(client_id))

    def calculate_project_progress(self, project_id: str) -> int:
        return progress.project_progress(self.projects.get(project_id))

    def calculate_video_progress(self, task_id: str) -> int:
        return progress.video_task_progress(self.stages.list_by_task(task_id))

    def staff_workload(self, email: str) -> Workload:
        with self._db.read():
            return Workload(
                email=email,
                tasks=self.tasks.count_by_status_for_assignee(email),
                stages=self.stages.count_by_status_for_assignee(email),
            )

    # ---------------- maintenance ----------------

    def clear_all_data(self) -> None:
        with self._db.transaction():
            counts: Dict[str, int] = {}
            for repo in (self.stages, self.tasks, self.projects, self.clients):
                counts[repo.table] = repo.delete_all()
        self._log.info("Cleared all data: %s", counts)

    # ---------------- internals ----------------

    def _roll_up(self, task: Task, delta: int) -> None:
        project = self.projects.get(task.project_id)
        if project is None:
            self._log.error("Task %s references missing project %s", task.id, task.project_id)
            return
        progress.apply_completion(project, task.category, delta)
        self.projects.save(project)
        self._log.debug(
            "Project %s %s counter %+d -> %d/%d (%s)",
            project.id, task.category, delta,
            project.completed_for(task.category), project.total_for(task.category), project.status,
        )

    def _sync_video_task(self, task_id: str) -> None:
        """Complete the parent video task when all five stages are complete,
        and reopen it when a stage leaves complete."""
        task = self.tasks.get(task_id)
        if task is None:
            return
        done = all_complete(self.stages.list_by_task(task_id))
        if done and task.status != "complete":
            task.status = "complete"
            task.completed_at = self._clock()
            self.tasks.save(task)
            self._roll_up(task, +1)
            self._log.info("Video task %s complete: all stages done", task_id)
        elif not done and task.status == "complete":
            task.status = "in-progress"
            task.completed_at = None
            self.tasks.save(task)
            self._roll_up(task, -1)
            self._log.info("Video task %s reopened", task_id)

    def _qualified(self, assignee: Assignee, role: Optional[str]) -> bool:
        member = self._staff.get(assignee.email)
        return member is not None and role is not None and member.role == role

    def _canonical(self, assignee: Assignee) -> Assignee:
        member = self._staff.get(assignee.email)
        return member.as_assignee() if member else assignee
