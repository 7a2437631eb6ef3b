# tests/test_progress.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from deliverz.models.entities import Project, VideoStage
from deliverz.services.progress import apply_completion, percent, project_progress, video_task_progress

NOW = datetime(2025, 3, 14, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "done,total,expected",
    [
        (0, 16, 0),
        (4, 16, 25),
        (1, 8, 13),   # 12.5 rounds up
        (1, 3, 33),
        (2, 3, 67),
        (5, 16, 31),  # 31.25
        (16, 16, 100),
        (3, 0, 0),
    ],
)
def test_percent_rounds_half_up(done, total, expected):
    assert percent(done, total) == expected


def test_video_task_progress_steps():
    stages = [
        VideoStage(id=f"s{n}", task_id="t", stage_number=n, stage_name="script", created_at=NOW)
        for n in range(1, 6)
    ]
    seen = [video_task_progress(stages)]
    for s in stages:
        s.status = "complete"
        seen.append(video_task_progress(stages))
    assert seen == [0, 20, 40, 60, 80, 100]
    assert video_task_progress([]) == 0


def test_apply_completion_clamps_and_flips_status():
    p = Project(id="p", client_id="c", period="2025-03", created_at=NOW, total_posts=1, total_videos=1)
    assert project_progress(p) == 0
    assert project_progress(None) == 0

    apply_completion(p, "post", 1)
    apply_completion(p, "post", 1)  # clamped at total
    assert p.completed_posts == 1
    assert p.status == "active"

    apply_completion(p, "video", 1)
    assert p.status == "completed"
    assert project_progress(p) == 100

    apply_completion(p, "video", -1)
    apply_completion(p, "video", -1)  # clamped at zero
    assert p.completed_videos == 0
    assert p.status == "active"
