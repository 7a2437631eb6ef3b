# Rev 0.2.0

"""Task generator (Rev 0.2.0)
Expands a client's plan into one project period, its tasks and, for every
video task, the five-stage pipeline. Generation is pure: it returns a staging
buffer (GeneratedProject) that the store commits in a single transaction.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from deliverz.models.entities import Client, Project, Task, VideoStage
from deliverz.models.types import CATEGORIES, CATEGORY_ROLES, QUOTA_KEYS, STAGE_NAMES, STAGE_ROLES
from deliverz.utils.logging_setup import get_logger
from .assignment import AssigneeSelector, RandomSelector
from .plan_catalog import PlanCatalog
from .staff_directory import StaffDirectory

log = get_logger("generator")


def new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex}"


def period_key(moment: datetime) -> str:
    return moment.strftime("%Y-%m")


@dataclass
class GeneratedProject:
    project: Project
    tasks: List[Task] = field(default_factory=list)
    stages: List[VideoStage] = field(default_factory=list)

    def tasks_in(self, category: str) -> List[Task]:
        return [t for t in self.tasks if t.category == category]


class TaskGenerator:
    def __init__(
        self,
        catalog: PlanCatalog,
        staff: StaffDirectory,
        selector: Optional[AssigneeSelector] = None,
        id_factory: Callable[[str], str] = new_id,
    ):
        self._catalog = catalog
        self._staff = staff
        self._selector = selector or RandomSelector()
        self._new_id = id_factory

    def generate_project(self, client: Client, now: datetime) -> GeneratedProject:
        """Build the current-period project for ``client``. Raises UnknownPlanError."""
        quotas = self._catalog.quotas_for(client.plan)

        project = Project(
            id=self._new_id("project"),
            client_id=client.id,
            period=period_key(now),
            created_at=now,
            status="active",
        )
        for category in CATEGORIES:
            setattr(project, f"total_{QUOTA_KEYS[category]}", quotas[QUOTA_KEYS[category]])

        out = GeneratedProject(project=project)
        for category in CATEGORIES:
            for n in range(1, quotas[QUOTA_KEYS[category]] + 1):
                task = Task(
                    id=self._new_id("task"),
                    project_id=project.id,
                    client_id=client.id,
                    category=category,
                    title=f"{category.capitalize()} #{n}",
                    created_at=now,
                    assignee=self._pick(CATEGORY_ROLES[category]),
                )
                out.tasks.append(task)
                if task.is_video:
                    out.stages.extend(self.generate_stages(task.id, now))

        log.debug(
            "Generated project %s for client %s: %d tasks, %d stages",
            project.id, client.id, len(out.tasks), len(out.stages),
        )
        return out

    def generate_stages(self, task_id: str, now: datetime) -> List[VideoStage]:
        stages: List[VideoStage] = []
        previous: Optional[VideoStage] = None
        for i, name in enumerate(STAGE_NAMES):
            stage = VideoStage(
                id=self._new_id("stage"),
                task_id=task_id,
                stage_number=i + 1,
                stage_name=name,
                created_at=now,
                depends_on=previous.id if previous else None,
                assignee=self._pick(STAGE_ROLES[name]),
            )
            stages.append(stage)
            previous = stage
        return stages

    def _pick(self, role: Optional[str]):
        if role is None:
            return None
        member = self._selector.choose(role, self._staff.members_with_role(role))
        return member.as_assignee() if member else None
