# Rev 0.2.0
from __future__ import annotations
import sqlite3
from contextlib import nullcontext
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union


class SQLiteRepository:
    """Shared connection handling for the ledger repositories.

    Accepts either a raw ``sqlite3.Connection`` or a wrapper exposing ``.conn``
    (``repositories.db.Database``). Reads go through the wrapper's
    ``read()`` lock when it has one. Repositories never commit: the store owns
    transaction boundaries.
    """

    table: str = ""
    columns: Sequence[str] = ()

    def __init__(self, db_or_conn: Union[sqlite3.Connection, Any]):
        self._db_or_conn = db_or_conn

    def _conn(self) -> sqlite3.Connection:
        if isinstance(self._db_or_conn, sqlite3.Connection):
            return self._db_or_conn
        if hasattr(self._db_or_conn, "conn") and isinstance(self._db_or_conn.conn, sqlite3.Connection):
            return self._db_or_conn.conn
        raise RuntimeError(f"{type(self).__name__}: unable to obtain sqlite3.Connection (.conn expected).")

    def _reading(self):
        read = getattr(self._db_or_conn, "read", None)
        return read() if read is not None else nullcontext()

    def _fetch_all(self, sql: str, params: Iterable[Any] = ()) -> List[Dict[str, Any]]:
        with self._reading():
            cur = self._conn().execute(sql, tuple(params))
            cols = [d[0] for d in cur.description]
            rows = cur.fetchall()
        return [{cols[i]: row[i] for i in range(len(cols))} for row in rows]

    def _fetch_one(self, sql: str, params: Iterable[Any] = ()) -> Optional[Dict[str, Any]]:
        rows = self._fetch_all(sql, params)
        return rows[0] if rows else None

    def _select(self) -> str:
        return f"SELECT {', '.join(self.columns)} FROM {self.table}"

    def _insert(self, values: Dict[str, Any]) -> None:
        cols = [c for c in self.columns if c in values]
        placeholders = ", ".join(["?"] * len(cols))
        self._conn().execute(
            f"INSERT INTO {self.table}({', '.join(cols)}) VALUES ({placeholders})",
            tuple(values[c] for c in cols),
        )

    def _update(self, row_id: str, values: Dict[str, Any]) -> bool:
        cols = [c for c in self.columns if c in values and c != "id"]
        if not cols:
            return False
        sets = ", ".join(f"{c} = ?" for c in cols)
        cur = self._conn().execute(
            f"UPDATE {self.table} SET {sets} WHERE id = ?",
            (*[values[c] for c in cols], row_id),
        )
        return cur.rowcount > 0

    def count(self) -> int:
        with self._reading():
            row = self._conn().execute(f"SELECT COUNT(1) FROM {self.table}").fetchone()
        return int(row[0]) if row and row[0] is not None else 0

    def delete_all(self) -> int:
        cur = self._conn().execute(f"DELETE FROM {self.table}")
        return cur.rowcount
