"""
Author business logic for the HTTP layer.

Domain errors from the repository are mapped to HTTP errors here, so the
router stays a thin translation of query/body params.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from fastapi import HTTPException, status

from core.errors import ConflictError, DuplicateKeyError, NotFoundError
from core.search import SearchParams

from .repository import AuthorsRepository
from .schemas import Author, AuthorSearchResult, CreateAuthorRequest, UpdateAuthorRequest

logger = logging.getLogger(__name__)


@contextmanager
def _http_errors() -> Iterator[None]:
    try:
        yield
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except DuplicateKeyError as exc:
        # Lost a race with a concurrent insert of the same email.
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered.",
        ) from exc


async def _ensure_email_available(
    repository: AuthorsRepository,
    email: str,
    *,
    author_id: str | None = None,
) -> None:
    existing = await repository.find_by_email(email)
    if existing is not None and existing.id != author_id:
        raise ConflictError("Email is already registered.")


async def create_author(repository: AuthorsRepository, payload: CreateAuthorRequest) -> Author:
    with _http_errors():
        await _ensure_email_available(repository, payload.email)
        author = await repository.create(payload)
    logger.info("author_created id=%s", author.id)
    return author


async def get_author(repository: AuthorsRepository, author_id: str) -> Author:
    with _http_errors():
        return await repository.find_by_id(author_id)


async def update_author(
    repository: AuthorsRepository,
    author_id: str,
    payload: UpdateAuthorRequest,
) -> Author:
    with _http_errors():
        current = await repository.find_by_id(author_id)
        if payload.email != current.email:
            await _ensure_email_available(repository, payload.email, author_id=author_id)
        author = await repository.update(
            current.model_copy(update={"name": payload.name, "email": payload.email})
        )
    logger.info("author_updated id=%s", author.id)
    return author


async def delete_author(repository: AuthorsRepository, author_id: str) -> Author:
    with _http_errors():
        author = await repository.delete(author_id)
    logger.info("author_deleted id=%s", author.id)
    return author


async def search_authors(repository: AuthorsRepository, params: SearchParams) -> AuthorSearchResult:
    return await repository.search(params)
