# Rev 0.2.0
from __future__ import annotations
from PySide6.QtCore import QObject, Signal


class StaffWorkloadViewModel(QObject):
    """
    Emits:
      loaded({"email", "name", "role", "tasks": {status: n}, "stages": {status: n}, "open_items"})
    Unknown staff emits an empty dict.
    """
    loaded = Signal(dict)

    def __init__(self, store):
        super().__init__()
        self._store = store

    def load(self, email: str) -> None:
        member = self._store.staff.get(email)
        if member is None:
            self.loaded.emit({})
            return
        workload = self._store.staff_workload(member.email)
        self.loaded.emit({
            "email": member.email,
            "name": member.name,
            "role": member.role,
            "tasks": dict(workload.tasks),
            "stages": dict(workload.stages),
            "open_items": workload.open_items,
        })
