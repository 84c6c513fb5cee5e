"""
Tests for the Postgres author store.

The `core.db` helpers are replaced with AsyncMocks; assertions are made on
the SQL fragments and positional args that would reach asyncpg.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import UUID

import asyncpg
import pytest

from authors import pg_store
from authors.pg_store import PostgresAuthorStore, like_pattern, order_sql, where_sql
from core.errors import DuplicateKeyError
from core.search import FilterClause, OrderBy, SortDirection

AUTHOR_ID = "75714d4e-50e8-46dc-8182-d6f5ce99359a"


@pytest.fixture
def mock_db(monkeypatch):
    """Replace the query helpers used by the store."""
    mocks = {
        "fetch_one": AsyncMock(return_value=None),
        "fetch_all": AsyncMock(return_value=[]),
        "fetch_val": AsyncMock(return_value=0),
    }
    for name, mock in mocks.items():
        monkeypatch.setattr(pg_store.db, name, mock)
    return mocks


@pytest.fixture
def pg():
    return PostgresAuthorStore()


def _sql(mock):
    return " ".join(mock.call_args.args[0].split())


class TestSqlFragments:
    """Test SQL fragment builders."""

    def test_like_pattern_escapes_wildcards(self):
        """Test LIKE wildcards and backslashes match literally."""
        assert like_pattern("50%_off\\") == "%50\\%\\_off\\\\%"

    def test_where_sql_without_clause(self):
        assert where_sql(None) == ("", [])

    def test_where_sql_ors_fields_with_one_param(self):
        clause, args = where_sql(FilterClause(contains="Ann", fields=("name", "email")))
        assert clause == "WHERE (name ILIKE $1 OR email ILIKE $1)"
        assert args == ["%Ann%"]

    def test_where_sql_rejects_unknown_columns(self):
        with pytest.raises(ValueError):
            where_sql(FilterClause(contains="x", fields=("password",)))

    def test_order_sql_adds_id_tie_breaker(self):
        assert order_sql(OrderBy("name", SortDirection.ASC)) == "ORDER BY name ASC, id ASC"
        assert (
            order_sql(OrderBy("created_at", SortDirection.DESC))
            == "ORDER BY created_at DESC, id DESC"
        )

    def test_order_sql_rejects_unknown_columns(self):
        with pytest.raises(ValueError):
            order_sql(OrderBy("name; DROP TABLE authors", SortDirection.ASC))


class TestPostgresAuthorStore:
    """Test store operations against mocked query helpers."""

    @pytest.mark.asyncio
    async def test_count_with_filter(self, pg, mock_db):
        mock_db["fetch_val"].return_value = 4

        total = await pg.count(FilterClause(contains="ann", fields=("name", "email")))

        assert total == 4
        assert _sql(mock_db["fetch_val"]) == (
            "SELECT count(*) FROM authors WHERE (name ILIKE $1 OR email ILIKE $1)"
        )
        assert mock_db["fetch_val"].call_args.args[1:] == ("%ann%",)

    @pytest.mark.asyncio
    async def test_count_without_filter(self, pg, mock_db):
        mock_db["fetch_val"].return_value = None

        assert await pg.count() == 0
        assert _sql(mock_db["fetch_val"]) == "SELECT count(*) FROM authors"

    @pytest.mark.asyncio
    async def test_find_many_places_limit_after_filter_args(self, pg, mock_db):
        """Test LIMIT/OFFSET placeholders follow the filter param."""
        await pg.find_many(
            FilterClause(contains="ann", fields=("name", "email")),
            OrderBy("email", SortDirection.DESC),
            skip=20,
            take=10,
        )

        sql = _sql(mock_db["fetch_all"])
        assert "ORDER BY email DESC, id DESC" in sql
        assert sql.endswith("LIMIT $2 OFFSET $3")
        assert mock_db["fetch_all"].call_args.args[1:] == ("%ann%", 10, 20)

    @pytest.mark.asyncio
    async def test_find_many_clamps_negative_skip(self, pg, mock_db):
        await pg.find_many(None, OrderBy("name"), skip=-15, take=15)

        sql = _sql(mock_db["fetch_all"])
        assert "WHERE" not in sql
        assert sql.endswith("LIMIT $1 OFFSET $2")
        assert mock_db["fetch_all"].call_args.args[1:] == (15, 0)

    @pytest.mark.asyncio
    async def test_find_unique_by_id(self, pg, mock_db):
        await pg.find_unique(id=AUTHOR_ID)

        assert "WHERE id = $1" in _sql(mock_db["fetch_one"])
        assert mock_db["fetch_one"].call_args.args[1] == UUID(AUTHOR_ID)

    @pytest.mark.asyncio
    async def test_find_unique_by_email(self, pg, mock_db):
        await pg.find_unique(email="ada@example.com")

        assert "WHERE email = $1" in _sql(mock_db["fetch_one"])
        assert mock_db["fetch_one"].call_args.args[1] == "ada@example.com"

    @pytest.mark.asyncio
    async def test_malformed_id_never_queries(self, pg, mock_db):
        """Test non-UUID ids short-circuit to "no row"."""
        assert await pg.find_unique(id="not-a-uuid") is None
        assert await pg.update("not-a-uuid", {"name": "x"}) is None
        assert await pg.delete("not-a-uuid") is None
        mock_db["fetch_one"].assert_not_called()

    @pytest.mark.asyncio
    async def test_find_unique_requires_one_key(self, pg, mock_db):
        with pytest.raises(ValueError):
            await pg.find_unique()
        with pytest.raises(ValueError):
            await pg.find_unique(id=AUTHOR_ID, email="ada@example.com")

    @pytest.mark.asyncio
    async def test_create_returns_row(self, pg, mock_db):
        row = {
            "id": AUTHOR_ID,
            "name": "Ada",
            "email": "ada@example.com",
            "created_at": datetime.now(timezone.utc),
        }
        mock_db["fetch_one"].return_value = row

        result = await pg.create({"name": "Ada", "email": "ada@example.com"})

        assert result == row
        assert "INSERT INTO authors (name, email, created_at)" in _sql(mock_db["fetch_one"])
        assert mock_db["fetch_one"].call_args.args[1:] == ("Ada", "ada@example.com", None)

    @pytest.mark.asyncio
    async def test_create_without_row_raises(self, pg, mock_db):
        with pytest.raises(RuntimeError):
            await pg.create({"name": "Ada", "email": "ada@example.com"})

    @pytest.mark.asyncio
    async def test_update_writes_only_writable_fields(self, pg, mock_db):
        await pg.update(AUTHOR_ID, {"name": "Ada", "email": "ada@example.com"})

        sql = _sql(mock_db["fetch_one"])
        assert sql.startswith("UPDATE authors SET name = COALESCE($2, name), email = COALESCE($3, email)")
        assert mock_db["fetch_one"].call_args.args[1:] == (
            UUID(AUTHOR_ID),
            "Ada",
            "ada@example.com",
        )

    @pytest.mark.asyncio
    async def test_delete_returns_none_when_nothing_deleted(self, pg, mock_db):
        assert await pg.delete(AUTHOR_ID) is None
        assert _sql(mock_db["fetch_one"]).startswith("DELETE FROM authors WHERE id = $1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["create", "update"])
    async def test_unique_violation_becomes_duplicate_key_error(self, pg, mock_db, operation):
        """Test a taken email surfaces as the shared store error."""
        mock_db["fetch_one"].side_effect = asyncpg.UniqueViolationError("authors_email_key")
        data = {"name": "Ada", "email": "ada@example.com"}

        with pytest.raises(DuplicateKeyError) as exc_info:
            if operation == "create":
                await pg.create(data)
            else:
                await pg.update(AUTHOR_ID, data)

        assert isinstance(exc_info.value.__cause__, asyncpg.UniqueViolationError)
