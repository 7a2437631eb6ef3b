# Rev 0.2.0
from __future__ import annotations

from datetime import date
from typing import Optional

from PySide6.QtCore import QObject, Signal

from deliverz.models.entities import StagePatch


class StageBoardViewModel(QObject):
    """
    VM for the five stages of one video task.
    Emits:
      - stagesReloaded(task_id: str, rows: list[dict])
      - stageRejected(stage_id: str, message: str)   blocking message for the UI
      - videoProgressChanged(task_id: str, percent: int)
    """

    stagesReloaded = Signal(str, list)
    stageRejected = Signal(str, str)
    videoProgressChanged = Signal(str, int)

    def __init__(self, store):
        super().__init__()
        self._store = store
        self._task_id: Optional[str] = None

    def set_task(self, task_id: str) -> None:
        self._task_id = task_id

    # ---- queries ----
    def reload(self) -> None:
        if self._task_id is None:
            self.stagesReloaded.emit("", [])
            return
        rows = [s.to_dict() for s in self._store.get_video_stages_by_task(self._task_id)]
        self.stagesReloaded.emit(self._task_id, rows)
        self.videoProgressChanged.emit(self._task_id, self._store.calculate_video_progress(self._task_id))

    # ---- commands ----
    def change_stage_status(self, *, stage_id: str, status: str, delivery_date: Optional[date] = None) -> bool:
        result = self._store.update_video_stage(stage_id, StagePatch(status=status, delivery_date=delivery_date))
        if not result.ok:
            self.stageRejected.emit(stage_id, result.message or result.code)
            return False
        self.reload()
        return True

    def assign_stage(self, *, stage_id: str, email: Optional[str]) -> bool:
        result = self._store.assign_stage(stage_id, email)
        if not result.ok:
            self.stageRejected.emit(stage_id, result.message or result.code)
            return False
        self.reload()
        return True
