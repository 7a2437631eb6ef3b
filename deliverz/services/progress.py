# Rev 0.2.0
"""Progress roll-ups. Percentages are integers rounded half-up."""
from __future__ import annotations

from fractions import Fraction
from math import floor
from typing import Optional, Sequence

from deliverz.models.entities import Project, VideoStage

STAGES_PER_VIDEO = 5


def percent(done: int, total: int) -> int:
    if total <= 0:
        return 0
    return floor(Fraction(100 * done, total) + Fraction(1, 2))


def video_task_progress(stages: Sequence[VideoStage]) -> int:
    if not stages:
        return 0
    done = sum(1 for s in stages if s.status == "complete")
    return percent(done, STAGES_PER_VIDEO)


def project_progress(project: Optional[Project]) -> int:
    if project is None:
        return 0
    return percent(project.completed_deliverables, project.total_deliverables)


def apply_completion(project: Project, category: str, delta: int) -> None:
    """Move the category counter by ``delta`` (clamped to [0, total]) and
    refresh the project status."""
    value = project.completed_for(category) + delta
    value = max(0, min(value, project.total_for(category)))
    project.set_completed(category, value)
    finished = project.total_deliverables > 0 and project.completed_deliverables >= project.total_deliverables
    project.status = "completed" if finished else "active"
