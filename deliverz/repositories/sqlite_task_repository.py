# Rev 0.2.0
# deliverZ – SQLiteTaskRepository
from __future__ import annotations
from typing import Any, Dict, List, Optional

from deliverz.models.entities import Task
from .base import SQLiteRepository


class SQLiteTaskRepository(SQLiteRepository):
    """
    Tasks table. Listing keeps generation order (``seq``) so titles read
    "Post #1", "Post #2", ... within each category.
    """

    table = "tasks"
    columns = (
        "id", "project_id", "client_id", "category", "title", "status",
        "assigned_to", "assigned_to_name", "delivery_date", "created_at", "completed_at",
    )

    def _next_seq(self) -> int:
        row = self._conn().execute("SELECT COALESCE(MAX(seq), 0) FROM tasks").fetchone()
        return int(row[0]) + 1

    def insert(self, task: Task) -> None:
        values: Dict[str, Any] = task.to_dict()
        self._conn().execute(
            """
            INSERT INTO tasks(id, project_id, client_id, category, title, status,
                              assigned_to, assigned_to_name, delivery_date,
                              created_at, completed_at, seq)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (*[values[c] for c in self.columns], self._next_seq()),
        )

    def save(self, task: Task) -> bool:
        return self._update(task.id, task.to_dict())

    def get(self, task_id: str) -> Optional[Task]:
        row = self._fetch_one(f"{self._select()} WHERE id = ?", (task_id,))
        return Task.from_dict(row) if row else None

    def list_by_project(self, project_id: str, *, category: Optional[str] = None) -> List[Task]:
        where = ["project_id = ?"]
        params: List[Any] = [project_id]
        if category is not None:
            where.append("category = ?")
            params.append(category)
        rows = self._fetch_all(f"{self._select()} WHERE {' AND '.join(where)} ORDER BY seq", params)
        return [Task.from_dict(r) for r in rows]

    def list_by_client(self, client_id: str) -> List[Task]:
        rows = self._fetch_all(f"{self._select()} WHERE client_id = ? ORDER BY seq", (client_id,))
        return [Task.from_dict(r) for r in rows]

    def list_by_assignee(self, email: str) -> List[Task]:
        rows = self._fetch_all(
            f"{self._select()} WHERE assigned_to = ? COLLATE NOCASE ORDER BY seq", (email,)
        )
        return [Task.from_dict(r) for r in rows]

    def list_all(self) -> List[Task]:
        rows = self._fetch_all(f"{self._select()} ORDER BY seq")
        return [Task.from_dict(r) for r in rows]

    def count_by_status_for_assignee(self, email: str) -> Dict[str, int]:
        rows = self._fetch_all(
            "SELECT status, COUNT(1) AS n FROM tasks WHERE assigned_to = ? COLLATE NOCASE GROUP BY status",
            (email,),
        )
        return {r["status"]: int(r["n"]) for r in rows}
