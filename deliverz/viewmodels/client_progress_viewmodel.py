# Rev 0.2.0 — client dashboard progress card
from __future__ import annotations
from typing import Any, Dict, Optional
from PySide6.QtCore import QObject, Signal

from deliverz.models.types import CATEGORIES, QUOTA_KEYS


class ClientProgressViewModel(QObject):
    """
    Emits:
      loaded({
        "client_id": str,
        "business_name": str,
        "plan": str,
        "period": str|None,
        "progress": int,
        "categories": {"post": {"total": int, "completed": int}, ...},
        "videos": [{"task_id": str, "title": str, "progress": int}, ...],
      })
    An unknown client emits an empty dict.
    """
    loaded = Signal(dict)

    def __init__(self, store):
        super().__init__()
        self._store = store
        self._last: Optional[Dict[str, Any]] = None

    def load(self, client_id: str) -> None:
        client = self._store.get_client(client_id)
        if not client:
            self._last = None
            self.loaded.emit({})
            return

        project = self._store.get_current_project_for_client(client_id)
        categories: Dict[str, Dict[str, int]] = {}
        videos = []
        if project is not None:
            for c in CATEGORIES:
                if project.total_for(c):
                    categories[c] = {"total": project.total_for(c), "completed": project.completed_for(c)}
            for task in self._store.get_tasks_by_project(project.id, category="video"):
                videos.append({
                    "task_id": task.id,
                    "title": task.title,
                    "progress": self._store.calculate_video_progress(task.id),
                })

        info = {
            "client_id": client.id,
            "business_name": client.business_name,
            "plan": client.plan,
            "period": project.period if project else None,
            "progress": self._store.calculate_client_progress(client_id),
            "categories": categories,
            "videos": videos,
        }
        self._last = info
        self.loaded.emit(info)

    def last(self) -> Optional[Dict[str, Any]]:
        return self._last
