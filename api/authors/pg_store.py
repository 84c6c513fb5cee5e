"""
Author persistence in Postgres (raw SQL).

Expected table:

    authors(id uuid primary key default gen_random_uuid(),
            name text not null,
            email text not null unique,
            created_at timestamptz not null default now())

Column and direction names are never taken from callers verbatim: both
are looked up in fixed maps before being spliced into SQL.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

import asyncpg

from core import db
from core.errors import DuplicateKeyError
from core.search import FilterClause, OrderBy, SortDirection

_SELECT_COLUMNS = "id::text AS id, name, email, created_at"

_COLUMNS = {
    "id": "id",
    "name": "name",
    "email": "email",
    "created_at": "created_at",
}

_DIRECTIONS = {
    SortDirection.ASC: "ASC",
    SortDirection.DESC: "DESC",
}


def _column(field: str) -> str:
    try:
        return _COLUMNS[field]
    except KeyError:
        raise ValueError(f"Unknown author column: {field}") from None


def _parse_uuid(value: str) -> UUID | None:
    """
    A malformed id can never match a uuid column; treat it as "no row".
    """
    try:
        return UUID(str(value))
    except ValueError:
        return None


def like_pattern(text: str) -> str:
    """
    Escape LIKE wildcards so `text` matches literally, then wrap for substring search.
    """
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def where_sql(where: FilterClause | None, *, first_param: int = 1) -> tuple[str, list[Any]]:
    """
    Build a WHERE fragment and its args. Fields are OR-ed, one shared pattern param.
    """
    if where is None or not where.fields:
        return "", []
    placeholder = f"${first_param}"
    conditions = " OR ".join(f"{_column(field)} ILIKE {placeholder}" for field in where.fields)
    return f"WHERE ({conditions})", [like_pattern(where.contains)]


def order_sql(order_by: OrderBy) -> str:
    direction = _DIRECTIONS[order_by.direction]
    column = _column(order_by.field)
    if column == "id":
        return f"ORDER BY id {direction}"
    # id as tie-breaker keeps pages stable.
    return f"ORDER BY {column} {direction}, id {direction}"


async def _write_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run an INSERT/UPDATE ... RETURNING, reporting unique violations as DuplicateKeyError.
    """
    try:
        return await db.fetch_one(sql, *args)
    except asyncpg.UniqueViolationError as exc:
        raise DuplicateKeyError(str(exc)) from exc


class PostgresAuthorStore:
    async def count(self, where: FilterClause | None = None) -> int:
        clause, args = where_sql(where)
        value = await db.fetch_val(f"SELECT count(*) FROM authors {clause}", *args)
        return int(value or 0)

    async def find_many(
        self,
        where: FilterClause | None,
        order_by: OrderBy,
        skip: int,
        take: int,
    ) -> list[dict[str, Any]]:
        clause, args = where_sql(where)
        limit_param = len(args) + 1
        offset_param = len(args) + 2
        return await db.fetch_all(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM authors
            {clause}
            {order_sql(order_by)}
            LIMIT ${limit_param}
            OFFSET ${offset_param}
            """,
            *args,
            max(take, 0),
            max(skip, 0),
        )

    async def find_unique(
        self,
        *,
        id: str | None = None,
        email: str | None = None,
    ) -> dict[str, Any] | None:
        if (id is None) == (email is None):
            raise ValueError("find_unique expects exactly one of id or email.")

        if id is not None:
            author_id = _parse_uuid(id)
            if author_id is None:
                return None
            return await db.fetch_one(
                f"""
                SELECT {_SELECT_COLUMNS}
                FROM authors
                WHERE id = $1
                """,
                author_id,
            )

        return await db.fetch_one(
            f"""
            SELECT {_SELECT_COLUMNS}
            FROM authors
            WHERE email = $1
            """,
            email,
        )

    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        created_at: datetime | None = data.get("created_at")
        row = await _write_one(
            f"""
            INSERT INTO authors (name, email, created_at)
            VALUES ($1, $2, COALESCE($3::timestamptz, now()))
            RETURNING {_SELECT_COLUMNS}
            """,
            data["name"],
            data["email"],
            created_at,
        )
        if row is None:
            raise RuntimeError("Failed to create author.")
        return row

    async def update(self, id: str, data: dict[str, Any]) -> dict[str, Any] | None:
        author_id = _parse_uuid(id)
        if author_id is None:
            return None
        return await _write_one(
            f"""
            UPDATE authors
            SET name = COALESCE($2, name),
                email = COALESCE($3, email)
            WHERE id = $1
            RETURNING {_SELECT_COLUMNS}
            """,
            author_id,
            data.get("name"),
            data.get("email"),
        )

    async def delete(self, id: str) -> dict[str, Any] | None:
        author_id = _parse_uuid(id)
        if author_id is None:
            return None
        return await db.fetch_one(
            f"""
            DELETE FROM authors
            WHERE id = $1
            RETURNING {_SELECT_COLUMNS}
            """,
            author_id,
        )
