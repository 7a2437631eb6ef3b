# Rev 0.2.0
# deliverz/utils/config.py
from __future__ import annotations

import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .logging_setup import get_logger
from .paths import DB_PATH, config_dir

log = get_logger("config")

SETTINGS_NAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "db_path": str(DB_PATH),
    "assignment_strategy": "random",   # random | round_robin
    "assignment_seed": None,
    # per-tier overrides merged over the built-in plan catalog,
    # e.g. {"premium": {"infographics": 4}}
    "plans": {},
}


def settings_file() -> Path:
    return config_dir() / SETTINGS_NAME


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or settings_file()
    data = copy.deepcopy(_DEFAULTS)
    if path.exists():
        try:
            loaded = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Ignoring unreadable settings %s: %s", path, exc)
        else:
            if isinstance(loaded, dict):
                data.update(loaded)
            else:
                log.warning("Ignoring settings %s: top level is not an object", path)
    env_db = os.environ.get("DELIVERZ_DB")
    if env_db:
        data["db_path"] = env_db
    return data


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
