# Rev 0.2.0
# deliverZ – SQLiteProjectRepository
from __future__ import annotations
from typing import List, Optional

from deliverz.models.entities import Project
from .base import SQLiteRepository


class SQLiteProjectRepository(SQLiteRepository):
    """
    Projects table: one row per (client, YYYY-MM period).
    Carries per-category totals copied from the plan and completed counters.
    """

    table = "projects"
    columns = (
        "id", "client_id", "period", "status",
        "total_posts", "total_videos", "total_infographics", "total_newsletters", "total_podcasts",
        "completed_posts", "completed_videos", "completed_infographics",
        "completed_newsletters", "completed_podcasts",
        "created_at",
    )

    def insert(self, project: Project) -> None:
        self._insert(project.to_dict())

    def save(self, project: Project) -> bool:
        return self._update(project.id, project.to_dict())

    def get(self, project_id: str) -> Optional[Project]:
        row = self._fetch_one(f"{self._select()} WHERE id = ?", (project_id,))
        return Project.from_dict(row) if row else None

    def get_for_period(self, client_id: str, period: str) -> Optional[Project]:
        row = self._fetch_one(
            f"{self._select()} WHERE client_id = ? AND period = ?", (client_id, period)
        )
        return Project.from_dict(row) if row else None

    def list_by_client(self, client_id: str) -> List[Project]:
        rows = self._fetch_all(f"{self._select()} WHERE client_id = ? ORDER BY period DESC", (client_id,))
        return [Project.from_dict(r) for r in rows]

    def list_all(self) -> List[Project]:
        rows = self._fetch_all(f"{self._select()} ORDER BY created_at, rowid")
        return [Project.from_dict(r) for r in rows]
