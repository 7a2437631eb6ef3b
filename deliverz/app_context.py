# deliverZ application context
# Rev 0.2.0

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from .utils.config import load_settings
from .utils.logging_setup import get_logger
from .repositories.db import Database
from .services.assignment import build_selector
from .services.plan_catalog import PlanCatalog
from .services.staff_directory import StaffDirectory
from .services.task_generator import TaskGenerator
from .services.workflow_store import WorkflowStore, utc_now


@dataclass
class AppContext:
    """Central container for shared app resources."""
    db_path: Path
    db: Database
    catalog: PlanCatalog
    staff: StaffDirectory
    store: WorkflowStore

    @classmethod
    def create(
        cls,
        db_path: Optional[Path] = None,
        *,
        settings: Optional[Dict[str, Any]] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> "AppContext":
        """Open the DB, apply migrations, and wire catalog, staff and store."""
        log = get_logger("AppContext")
        settings = settings if settings is not None else load_settings()
        path = Path(db_path or settings["db_path"])

        db = Database(path)
        db.run_migrations()
        catalog = PlanCatalog(settings.get("plans"))
        staff = StaffDirectory()
        selector = build_selector(settings.get("assignment_strategy", "random"), settings.get("assignment_seed"))
        store = WorkflowStore(db, TaskGenerator(catalog, staff, selector), staff, clock=clock)
        log.info("AppContext initialized with DB=%s", path)
        return cls(db_path=path, db=db, catalog=catalog, staff=staff, store=store)

    def close(self) -> None:
        self.db.close()
