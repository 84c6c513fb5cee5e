"""
Author schemas (entity + request/response models).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from core.search import SearchResult


class Author(BaseModel):
    id: str
    name: str
    email: str
    created_at: datetime


class CreateAuthorRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320)


class UpdateAuthorRequest(CreateAuthorRequest):
    """
    Full replacement of the writable fields; `id` comes from the path.
    """


AuthorSearchResult = SearchResult[Author]
