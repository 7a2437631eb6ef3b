# Rev 0.2.0

"""SQLite connection & migration runner (Rev 0.2.0)
- WAL mode, foreign_keys=ON
- Applies SQL files in deliverz/migrations in lexical order
- Tracks applied files in schema_migrations(filename TEXT PRIMARY KEY, applied_at UTC)
- transaction() wraps multi-row writes in BEGIN/COMMIT with rollback on error
- read() takes the same lock, so readers wait for an open transaction
"""
from __future__ import annotations
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from deliverz.utils.logging_setup import get_logger
from deliverz.utils.paths import DB_PATH, MIGRATIONS_DIR


class Database:
    def __init__(self, path: Path | str = DB_PATH) -> None:
        self._log = get_logger("db")
        self.path = Path(path)
        if str(path) != ":memory:":
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.path), isolation_level=None, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL;")
        self.conn.execute("PRAGMA foreign_keys=ON;")
        self.conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_migrations (filename TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
        )
        # one writer over the whole store; re-entrant so a cascade can nest
        self.lock = threading.RLock()
        self._depth = 0
        self._log.info("SQLite open %s", self.path)

    def close(self) -> None:
        self.conn.close()
        self._log.info("SQLite closed %s", self.path)

    def applied(self) -> set[str]:
        rows = self.conn.execute("SELECT filename FROM schema_migrations").fetchall()
        return {r[0] for r in rows}

    def apply_sql(self, sql: str) -> None:
        self.conn.executescript(sql)

    def run_migrations(self, migrations_dir: Path = MIGRATIONS_DIR) -> list[str]:
        applied = self.applied()
        to_apply = [p for p in sorted(migrations_dir.glob("*.sql")) if p.name not in applied]
        for p in to_apply:
            sql = p.read_text(encoding="utf-8")
            self.apply_sql(sql)
            self.conn.execute(
                "INSERT INTO schema_migrations(filename, applied_at) VALUES(?, ?)",
                (p.name, datetime.now(timezone.utc).isoformat()),
            )
            self._log.info("Applied migration %s", p.name)
        return [p.name for p in to_apply]

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """BEGIN IMMEDIATE ... COMMIT; nested calls join the outer transaction."""
        with self.lock:
            outer = self._depth == 0
            if outer:
                self.conn.execute("BEGIN IMMEDIATE;")
            self._depth += 1
            try:
                yield self.conn
            except BaseException:
                self._depth -= 1
                if outer:
                    self.conn.execute("ROLLBACK;")
                    self._log.warning("Transaction rolled back")
                raise
            else:
                self._depth -= 1
                if outer:
                    self.conn.execute("COMMIT;")

    @contextmanager
    def read(self) -> Iterator[sqlite3.Connection]:
        """Hold the store lock so reads never observe a half-applied cascade."""
        with self.lock:
            yield self.conn

    # Convenience cursor
    def cursor(self) -> sqlite3.Cursor:
        return self.conn.cursor()
