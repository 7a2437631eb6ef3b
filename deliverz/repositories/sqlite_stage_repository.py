# Rev 0.2.0
# deliverZ – SQLiteVideoStageRepository
from __future__ import annotations
from typing import Dict, List, Optional

from deliverz.models.entities import VideoStage
from .base import SQLiteRepository


class SQLiteVideoStageRepository(SQLiteRepository):
    """
    Video stages table. Per-task listing is always ordered by stage_number,
    which is the authoritative ordering key.
    """

    table = "video_stages"
    columns = (
        "id", "task_id", "stage_number", "stage_name", "status", "depends_on",
        "assigned_to", "assigned_to_name", "delivery_date", "created_at", "completed_at",
    )

    def insert(self, stage: VideoStage) -> None:
        self._insert(stage.to_dict())

    def save(self, stage: VideoStage) -> bool:
        return self._update(stage.id, stage.to_dict())

    def get(self, stage_id: str) -> Optional[VideoStage]:
        row = self._fetch_one(f"{self._select()} WHERE id = ?", (stage_id,))
        return VideoStage.from_dict(row) if row else None

    def list_by_task(self, task_id: str) -> List[VideoStage]:
        rows = self._fetch_all(f"{self._select()} WHERE task_id = ? ORDER BY stage_number", (task_id,))
        return [VideoStage.from_dict(r) for r in rows]

    def list_by_assignee(self, email: str) -> List[VideoStage]:
        rows = self._fetch_all(
            f"{self._select()} WHERE assigned_to = ? COLLATE NOCASE ORDER BY task_id, stage_number",
            (email,),
        )
        return [VideoStage.from_dict(r) for r in rows]

    def list_all(self) -> List[VideoStage]:
        rows = self._fetch_all(f"{self._select()} ORDER BY rowid")
        return [VideoStage.from_dict(r) for r in rows]

    def count_by_status_for_assignee(self, email: str) -> Dict[str, int]:
        rows = self._fetch_all(
            "SELECT status, COUNT(1) AS n FROM video_stages WHERE assigned_to = ? COLLATE NOCASE GROUP BY status",
            (email,),
        )
        return {r["status"]: int(r["n"]) for r in rows}
