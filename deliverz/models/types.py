# deliverZ type definitions
# Rev 0.2.0

from __future__ import annotations
from typing import Dict, Literal, Optional, Tuple

# Ownership hierarchy: client → project → task → video stage
EntityType = Literal["client", "project", "task", "stage"]

PlanTier = Literal["basic", "standard", "premium"]
PLAN_TIERS: Tuple[str, ...] = ("basic", "standard", "premium")

Category = Literal["post", "video", "infographic", "newsletter", "podcast"]
CATEGORIES: Tuple[str, ...] = ("post", "video", "infographic", "newsletter", "podcast")

# category -> plural quota / counter key ("post" -> "posts")
QUOTA_KEYS: Dict[str, str] = {c: f"{c}s" for c in CATEGORIES}

Status = Literal["not-started", "in-progress", "complete"]
STATUSES: Tuple[str, ...] = ("not-started", "in-progress", "complete")

ProjectStatus = Literal["active", "completed"]

StageName = Literal["script", "images", "motion", "voice", "edit"]
STAGE_NAMES: Tuple[str, ...] = ("script", "images", "motion", "voice", "edit")

Role = Literal[
    "designer",
    "scriptWriter",
    "imageSpecialist",
    "motionDesigner",
    "voiceSpecialist",
    "videoEditor",
    "manager",
]
ROLES: Tuple[str, ...] = (
    "designer",
    "scriptWriter",
    "imageSpecialist",
    "motionDesigner",
    "voiceSpecialist",
    "videoEditor",
    "manager",
)

STAGE_ROLES: Dict[str, str] = {
    "script": "scriptWriter",
    "images": "imageSpecialist",
    "motion": "motionDesigner",
    "voice": "voiceSpecialist",
    "edit": "videoEditor",
}

# video tasks carry no task-level role; their stages do
CATEGORY_ROLES: Dict[str, Optional[str]] = {
    "post": "designer",
    "infographic": "designer",
    "newsletter": "scriptWriter",
    "podcast": "voiceSpecialist",
    "video": None,
}
