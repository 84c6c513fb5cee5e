"""
Shared fixtures: an in-memory store, a repository bound to it, and a
seeding helper that controls `created_at` so ordering is deterministic.
"""

from datetime import datetime, timedelta, timezone

import pytest

from authors.repository import AuthorsRepository
from authors.store import InMemoryAuthorStore

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def author_data(**overrides):
    """Build author input data with sensible defaults."""
    data = {"name": "Ada Lovelace", "email": "ada@example.com"}
    data.update(overrides)
    return data


@pytest.fixture
def store():
    """Create an empty in-memory author store."""
    return InMemoryAuthorStore()


@pytest.fixture
def repository(store):
    """Create a repository bound to the in-memory store."""
    return AuthorsRepository(store)


@pytest.fixture
def seed(store):
    """
    Insert rows straight into the store, one millisecond apart.

    Row i gets email `author{i}@a.com` unless the row overrides it.
    Returns the stored rows in insertion order.
    """

    async def _seed(rows):
        created = []
        for index, row in enumerate(rows):
            data = {
                "email": f"author{index}@a.com",
                "created_at": BASE_TIME + timedelta(milliseconds=index),
                **row,
            }
            created.append(await store.create(data))
        return created

    return _seed
