# Rev 0.2.0
"""Entities for the client/project/task/stage ledger.

All four collections are flat: relationships are string foreign keys, never
nested objects. ``to_dict``/``from_dict`` give the JSON-safe row shape used by
both the SQLite repositories and the snapshot export (ISO-8601 timestamps,
``YYYY-MM-DD`` delivery dates).
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, Optional

from .types import CATEGORIES, QUOTA_KEYS


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_dt(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def _parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass
class Assignee:
    email: str
    name: str


@dataclass(frozen=True)
class StaffMember:
    email: str
    name: str
    role: str

    def as_assignee(self) -> Assignee:
        return Assignee(email=self.email, name=self.name)


@dataclass
class Client:
    id: str
    business_name: str
    owner_name: str
    email: str
    phone: str
    plan: str
    created_at: datetime
    created_by: str
    msa_file: Optional[str] = None
    assets_file: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = _iso(self.created_at)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Client":
        return cls(
            id=data["id"],
            business_name=data["business_name"],
            owner_name=data["owner_name"],
            email=data["email"],
            phone=data.get("phone") or "",
            plan=data["plan"],
            created_at=_parse_dt(data["created_at"]),
            created_by=data.get("created_by") or "",
            msa_file=data.get("msa_file"),
            assets_file=data.get("assets_file"),
        )


@dataclass
class Project:
    """One client's quota ledger for one ``YYYY-MM`` period."""

    id: str
    client_id: str
    period: str
    created_at: datetime
    status: str = "active"
    total_posts: int = 0
    total_videos: int = 0
    total_infographics: int = 0
    total_newsletters: int = 0
    total_podcasts: int = 0
    completed_posts: int = 0
    completed_videos: int = 0
    completed_infographics: int = 0
    completed_newsletters: int = 0
    completed_podcasts: int = 0

    def total_for(self, category: str) -> int:
        return getattr(self, f"total_{QUOTA_KEYS[category]}")

    def completed_for(self, category: str) -> int:
        return getattr(self, f"completed_{QUOTA_KEYS[category]}")

    def set_completed(self, category: str, value: int) -> None:
        setattr(self, f"completed_{QUOTA_KEYS[category]}", value)

    @property
    def total_deliverables(self) -> int:
        return sum(self.total_for(c) for c in CATEGORIES)

    @property
    def completed_deliverables(self) -> int:
        return sum(self.completed_for(c) for c in CATEGORIES)

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["created_at"] = _iso(self.created_at)
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        kwargs = {f.name: data[f.name] for f in fields(cls) if f.name in data}
        kwargs["created_at"] = _parse_dt(data["created_at"])
        return cls(**kwargs)


@dataclass
class Task:
    id: str
    project_id: str
    client_id: str
    category: str
    title: str
    created_at: datetime
    status: str = "not-started"
    assignee: Optional[Assignee] = None
    delivery_date: Optional[date] = None
    completed_at: Optional[datetime] = None

    @property
    def is_video(self) -> bool:
        return self.category == "video"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "client_id": self.client_id,
            "category": self.category,
            "title": self.title,
            "status": self.status,
            "assigned_to": self.assignee.email if self.assignee else None,
            "assigned_to_name": self.assignee.name if self.assignee else None,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "created_at": _iso(self.created_at),
            "completed_at": _iso(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        assignee = None
        if data.get("assigned_to"):
            assignee = Assignee(email=data["assigned_to"], name=data.get("assigned_to_name") or "")
        return cls(
            id=data["id"],
            project_id=data["project_id"],
            client_id=data["client_id"],
            category=data["category"],
            title=data["title"],
            status=data.get("status") or "not-started",
            assignee=assignee,
            delivery_date=_parse_date(data.get("delivery_date")),
            created_at=_parse_dt(data["created_at"]),
            completed_at=_parse_dt(data.get("completed_at")),
        )


@dataclass
class VideoStage:
    id: str
    task_id: str
    stage_number: int
    stage_name: str
    created_at: datetime
    status: str = "not-started"
    depends_on: Optional[str] = None
    assignee: Optional[Assignee] = None
    delivery_date: Optional[date] = None
    completed_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "stage_number": self.stage_number,
            "stage_name": self.stage_name,
            "status": self.status,
            "depends_on": self.depends_on,
            "assigned_to": self.assignee.email if self.assignee else None,
            "assigned_to_name": self.assignee.name if self.assignee else None,
            "delivery_date": self.delivery_date.isoformat() if self.delivery_date else None,
            "created_at": _iso(self.created_at),
            "completed_at": _iso(self.completed_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VideoStage":
        assignee = None
        if data.get("assigned_to"):
            assignee = Assignee(email=data["assigned_to"], name=data.get("assigned_to_name") or "")
        return cls(
            id=data["id"],
            task_id=data["task_id"],
            stage_number=int(data["stage_number"]),
            stage_name=data["stage_name"],
            status=data.get("status") or "not-started",
            depends_on=data.get("depends_on"),
            assignee=assignee,
            delivery_date=_parse_date(data.get("delivery_date")),
            created_at=_parse_dt(data["created_at"]),
            completed_at=_parse_dt(data.get("completed_at")),
        )


# --- patches -----------------------------------------------------------------
# A field left at None is "unspecified" and keeps the stored value.
# Clearing an assignee or delivery date goes through the explicit clear_* flags.

@dataclass
class ClientPatch:
    business_name: Optional[str] = None
    owner_name: Optional[str] = None
    phone: Optional[str] = None
    msa_file: Optional[str] = None
    assets_file: Optional[str] = None


@dataclass
class TaskPatch:
    status: Optional[str] = None
    title: Optional[str] = None
    delivery_date: Optional[date] = None
    clear_delivery_date: bool = False
    assignee: Optional[Assignee] = None
    clear_assignee: bool = False


@dataclass
class StagePatch:
    status: Optional[str] = None
    delivery_date: Optional[date] = None
    clear_delivery_date: bool = False
    assignee: Optional[Assignee] = None
    clear_assignee: bool = False


@dataclass
class UpdateResult:
    """Outcome of a gated update; ``record`` is the stored state afterwards."""

    ok: bool
    code: str
    record: Any = None
    message: str = ""


@dataclass
class Workload:
    email: str
    tasks: Dict[str, int] = field(default_factory=dict)
    stages: Dict[str, int] = field(default_factory=dict)

    @property
    def open_items(self) -> int:
        return sum(n for s, n in self.tasks.items() if s != "complete") + sum(
            n for s, n in self.stages.items() if s != "complete"
        )
