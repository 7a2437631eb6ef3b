# Rev 0.2.0
# deliverZ – SQLiteClientRepository
from __future__ import annotations
from typing import List, Optional

from deliverz.models.entities import Client
from .base import SQLiteRepository


class SQLiteClientRepository(SQLiteRepository):
    """Clients table. Email is unique (case-insensitive) and used as login key."""

    table = "clients"
    columns = (
        "id", "business_name", "owner_name", "email", "phone", "plan",
        "msa_file", "assets_file", "created_at", "created_by",
    )

    def insert(self, client: Client) -> None:
        self._insert(client.to_dict())

    def save(self, client: Client) -> bool:
        return self._update(client.id, client.to_dict())

    def get(self, client_id: str) -> Optional[Client]:
        row = self._fetch_one(f"{self._select()} WHERE id = ?", (client_id,))
        return Client.from_dict(row) if row else None

    def get_by_email(self, email: str) -> Optional[Client]:
        row = self._fetch_one(f"{self._select()} WHERE email = ? COLLATE NOCASE", (email.strip(),))
        return Client.from_dict(row) if row else None

    def list_all(self) -> List[Client]:
        rows = self._fetch_all(f"{self._select()} ORDER BY created_at, rowid")
        return [Client.from_dict(r) for r in rows]
