# Rev 0.2.0

"""Paths and XDG helpers (Rev 0.2.0)
- Uses XDG Base Directory layout
- DB lives under XDG data dir unless DELIVERZ_DB or settings say otherwise
- Logs under XDG state dir, settings under XDG config dir
"""
from __future__ import annotations
import os
from pathlib import Path


APP_NAME = "deliverZ"


XDG_DATA_HOME = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
XDG_STATE_HOME = Path(os.environ.get("XDG_STATE_HOME", Path.home() / ".local" / "state"))
XDG_CONFIG_HOME = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


DATA_DIR = XDG_DATA_HOME / APP_NAME
STATE_DIR = XDG_STATE_HOME / APP_NAME
LOGS_DIR = STATE_DIR / "logs"
CONFIG_DIR = XDG_CONFIG_HOME / APP_NAME


# SQL migrations ship inside the package
MIGRATIONS_DIR = (Path(__file__).resolve().parents[1] / "migrations").resolve()


DB_PATH = DATA_DIR / "deliverz.db"


def config_dir() -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR

