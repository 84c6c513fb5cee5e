"""
Author repository: CRUD with existence checks, and paginated search.

The repository owns query composition only. Persistence is delegated to
a `RecordStore` bound at construction (Postgres in the app, in-memory in
tests). Store errors (unique violations, connectivity) pass through as-is.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar

from core.errors import NotFoundError
from core.search import (
    OrderBy,
    SearchParams,
    SortDirection,
    build_filter,
    last_page,
    resolve_order,
    resolve_paging,
    skip_for,
)

from .schemas import Author, AuthorSearchResult, CreateAuthorRequest
from .store import RecordStore

logger = logging.getLogger(__name__)


class AuthorsRepository:
    sortable_fields: ClassVar[tuple[str, ...]] = ("name", "email", "created_at")
    searchable_fields: ClassVar[tuple[str, ...]] = ("name", "email")
    default_order: ClassVar[OrderBy] = OrderBy(field="created_at", direction=SortDirection.DESC)

    def __init__(self, store: RecordStore) -> None:
        self.store = store

    @staticmethod
    def _not_found(id: str) -> NotFoundError:
        return NotFoundError(f"Author not found using id: {id}")

    async def get(self, id: str) -> Author:
        row = await self.store.find_unique(id=id)
        if row is None:
            raise self._not_found(id)
        return Author(**row)

    async def create(self, data: CreateAuthorRequest | dict[str, Any]) -> Author:
        if isinstance(data, CreateAuthorRequest):
            data = data.model_dump()
        row = await self.store.create({"name": data["name"], "email": data["email"]})
        return Author(**row)

    async def find_by_id(self, id: str) -> Author:
        return await self.get(id)

    async def find_by_email(self, email: str) -> Author | None:
        row = await self.store.find_unique(email=email)
        return Author(**row) if row is not None else None

    async def update(self, author: Author) -> Author:
        await self.get(author.id)
        row = await self.store.update(author.id, {"name": author.name, "email": author.email})
        if row is None:
            # Removed between the existence check and the write.
            raise self._not_found(author.id)
        return Author(**row)

    async def delete(self, id: str) -> Author:
        author = await self.get(id)
        row = await self.store.delete(id)
        if row is None:
            raise self._not_found(id)
        return author

    async def search(self, params: SearchParams) -> AuthorSearchResult:
        page, per_page = resolve_paging(params.page, params.per_page)
        order_by = resolve_order(
            params.sort,
            params.sort_dir,
            sortable=self.sortable_fields,
            fallback=self.default_order,
        )
        where = build_filter(params.filter, self.searchable_fields)
        skip = skip_for(page, per_page)

        logger.debug(
            "author_search order=%s:%s skip=%s take=%s filtered=%s",
            order_by.field,
            order_by.direction.value,
            skip,
            per_page,
            where is not None,
        )

        total = await self.store.count(where)
        rows = await self.store.find_many(where, order_by, skip, per_page)

        return AuthorSearchResult(
            items=[Author(**row) for row in rows],
            total=total,
            current_page=page,
            per_page=per_page,
            last_page=last_page(total, per_page),
        )
