"""
Author API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from core.search import SearchParams, SortDirection

from . import schemas, service
from .pg_store import PostgresAuthorStore
from .repository import AuthorsRepository

router = APIRouter()


def get_repository() -> AuthorsRepository:
    return AuthorsRepository(PostgresAuthorStore())


@router.get("/authors")
async def search_authors(
    page: int = Query(1, ge=1),
    per_page: int = Query(15, ge=1, le=100),
    filter: str | None = Query(default=None, max_length=200),
    sort: str | None = Query(default=None, max_length=50),
    sort_dir: SortDirection | None = None,
    repository: AuthorsRepository = Depends(get_repository),
) -> schemas.AuthorSearchResult:
    params = SearchParams(
        page=page,
        per_page=per_page,
        filter=filter,
        sort=sort,
        sort_dir=sort_dir.value if sort_dir is not None else None,
    )
    return await service.search_authors(repository, params)


@router.post("/authors", status_code=status.HTTP_201_CREATED)
async def create_author(
    request: schemas.CreateAuthorRequest,
    repository: AuthorsRepository = Depends(get_repository),
) -> schemas.Author:
    return await service.create_author(repository, request)


@router.get("/authors/{author_id}")
async def get_author(
    author_id: str,
    repository: AuthorsRepository = Depends(get_repository),
) -> schemas.Author:
    return await service.get_author(repository, author_id)


@router.put("/authors/{author_id}")
async def update_author(
    author_id: str,
    request: schemas.UpdateAuthorRequest,
    repository: AuthorsRepository = Depends(get_repository),
) -> schemas.Author:
    return await service.update_author(repository, author_id, request)


@router.delete("/authors/{author_id}")
async def delete_author(
    author_id: str,
    repository: AuthorsRepository = Depends(get_repository),
) -> schemas.Author:
    return await service.delete_author(repository, author_id)
