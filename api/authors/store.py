"""
Record store contract for authors, plus an in-memory implementation.

Rows travel as plain dicts with keys: id, name, email, created_at.
The in-memory store backs the test suite and local experiments; Postgres
lives in `pg_store.py`.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Protocol
from uuid import uuid4

from core.errors import DuplicateKeyError
from core.search import FilterClause, OrderBy, SortDirection


class RecordStore(Protocol):
    async def count(self, where: FilterClause | None = None) -> int:
        ...

    async def find_many(
        self,
        where: FilterClause | None,
        order_by: OrderBy,
        skip: int,
        take: int,
    ) -> list[dict[str, Any]]:
        ...

    async def find_unique(
        self,
        *,
        id: str | None = None,
        email: str | None = None,
    ) -> dict[str, Any] | None:
        ...

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        ...

    async def update(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        ...

    async def delete(self, id: str) -> dict[str, Any] | None:
        ...


def _unique_key(id: str | None, email: str | None) -> tuple[str, str]:
    if (id is None) == (email is None):
        raise ValueError("find_unique expects exactly one of id or email.")
    if id is not None:
        return "id", id
    return "email", str(email)


def _matches(row: dict[str, Any], where: FilterClause | None) -> bool:
    if where is None:
        return True
    # lower(), not casefold(): ILIKE does not expand "ß" to "ss".
    needle = where.contains.lower()
    return any(needle in str(row.get(field) or "").lower() for field in where.fields)


def _collation_key(value: Any) -> Any:
    """
    Approximate en_US collation for text: case-insensitive first, lowercase before uppercase on ties.
    """
    if isinstance(value, str):
        return value.lower(), value.swapcase()
    return value


class InMemoryAuthorStore:
    def __init__(self) -> None:
        self._rows: dict[str, dict[str, Any]] = {}

    def _email_taken(self, email: str, *, exclude_id: str | None = None) -> bool:
        return any(
            row["email"] == email and row_id != exclude_id
            for row_id, row in self._rows.items()
        )

    async def count(self, where: FilterClause | None = None) -> int:
        return sum(1 for row in self._rows.values() if _matches(row, where))

    async def find_many(
        self,
        where: FilterClause | None,
        order_by: OrderBy,
        skip: int,
        take: int,
    ) -> list[dict[str, Any]]:
        rows = [row for row in self._rows.values() if _matches(row, where)]
        # id breaks ties so pages never overlap.
        rows.sort(
            key=lambda row: (_collation_key(row[order_by.field]), row["id"]),
            reverse=order_by.direction is SortDirection.DESC,
        )
        start = max(skip, 0)
        return [dict(row) for row in rows[start : start + max(take, 0)]]

    async def find_unique(
        self,
        *,
        id: str | None = None,
        email: str | None = None,
    ) -> dict[str, Any] | None:
        key, value = _unique_key(id, email)
        for row in self._rows.values():
            if row[key] == value:
                return dict(row)
        return None

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        email = str(data["email"])
        if self._email_taken(email):
            raise DuplicateKeyError(f"Unique constraint failed on email: {email}")

        row = {
            "id": str(uuid4()),
            "name": str(data["name"]),
            "email": email,
            "created_at": data.get("created_at") or datetime.now(timezone.utc),
        }
        self._rows[row["id"]] = row
        return dict(row)

    async def update(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        row = self._rows.get(id)
        if row is None:
            return None

        email = data.get("email", row["email"])
        if self._email_taken(email, exclude_id=id):
            raise DuplicateKeyError(f"Unique constraint failed on email: {email}")

        row["name"] = data.get("name", row["name"])
        row["email"] = email
        return dict(row)

    async def delete(self, id: str) -> dict[str, Any] | None:
        row = self._rows.pop(id, None)
        return dict(row) if row is not None else None
