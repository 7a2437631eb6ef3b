# Rev 0.2.0

"""Stage dependency rules (Rev 0.2.0)
Video stages run script → images → motion → voice → edit. A stage may enter
in-progress or complete only once the stage it depends on is complete.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from deliverz.models.entities import VideoStage
from deliverz.models.types import STAGE_NAMES, STATUSES

ADVANCING = ("in-progress", "complete")

BLOCKED_MESSAGE = "Cannot update this stage until the previous stage is complete."
SUCCESSOR_MESSAGE = "Cannot reopen this stage while the next stage has already started."


@dataclass(frozen=True)
class StageCheck:
    ok: bool
    code: str  # "allowed" | "no_change" | "dependency_blocked" | "successor_active" | "invalid_status"
    message: str = ""


def check_stage_transition(
    stage: VideoStage,
    target: str,
    predecessor: Optional[VideoStage],
    successor: Optional[VideoStage] = None,
) -> StageCheck:
    """Decide whether ``stage`` may move to ``target``.

    ``predecessor`` is the stage named by ``stage.depends_on`` (None for the
    script stage); ``successor`` is the stage depending on this one.
    """
    if target not in STATUSES:
        return StageCheck(False, "invalid_status", f"unknown status {target!r}")
    if target == stage.status:
        return StageCheck(True, "no_change")
    if target in ADVANCING and predecessor is not None and predecessor.status != "complete":
        return StageCheck(False, "dependency_blocked", BLOCKED_MESSAGE)
    if (
        stage.status == "complete"
        and successor is not None
        and successor.status != "not-started"
    ):
        return StageCheck(False, "successor_active", SUCCESSOR_MESSAGE)
    return StageCheck(True, "allowed")


def all_complete(stages: Sequence[VideoStage]) -> bool:
    return len(stages) == len(STAGE_NAMES) and all(s.status == "complete" for s in stages)
