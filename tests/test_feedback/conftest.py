"""Shared fixtures for feedback tests."""

from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from src.feedback.repository import (
    FeedbackEntryRepository,
    FeedbackSourceRepository,
    FeedbackTagRepository,
)
from src.feedback.schemas import FeedbackEntry, FeedbackSource, FeedbackTag
from src.feedback.service import FeedbackService

CREATED = datetime(2026, 2, 5, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_database():
    """Mock Database with async fetch methods."""
    db = AsyncMock()
    db.fetchrow = AsyncMock(return_value=None)
    db.fetch = AsyncMock(return_value=[])
    db.fetchval = AsyncMock()
    db.execute = AsyncMock(return_value="CREATE TABLE")
    return db


@pytest.fixture
def source_row() -> dict:
    """A dict mimicking an asyncpg Record for a feedback source."""
    return {
        "id": "src-1",
        "user_id": "user-a",
        "name": "Website feedback",
        "source_type": "survey",
        "description": "Footer widget on the marketing site",
        "created_at": CREATED,
        "updated_at": CREATED,
    }


@pytest.fixture
def entry_row() -> dict:
    """A dict mimicking an asyncpg Record for a feedback entry."""
    return {
        "id": "entry-1",
        "source_id": "src-1",
        "user_id": "user-a",
        "channel": "web",
        "author": "jane@example.com",
        "rating": 5.0,
        "raw_text": "Great app!",
        "created_at": CREATED,
    }


@pytest.fixture
def tag_row() -> dict:
    """A dict mimicking an asyncpg Record for a feedback tag."""
    return {
        "id": "tag-1",
        "feedback_id": "entry-1",
        "tag": "ux",
        "sentiment": "positive",
        "importance": 2.0,
        "created_at": CREATED,
    }


# ── In-memory repositories ──────────────────────────────────────


class InMemoryStore:
    """Tables shared by the fake repositories, keyed by id in insertion order."""

    def __init__(self) -> None:
        self.sources: dict[str, FeedbackSource] = {}
        self.entries: dict[str, FeedbackEntry] = {}
        self.tags: dict[str, FeedbackTag] = {}


class FakeSourceRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def create(self, source: FeedbackSource) -> FeedbackSource:
        self._store.sources[source.id] = replace(source)
        return replace(source)

    async def get_owned(self, source_id, user_id):
        source = self._store.sources.get(source_id)
        if source is None or source.user_id != user_id:
            return None
        return replace(source)

    async def update(self, source_id, user_id, *, name=None, source_type=None,
                     description=None, updated_at):
        source = self._store.sources.get(source_id)
        if source is None or source.user_id != user_id:
            return None
        if name is not None:
            source.name = name
        if source_type is not None:
            source.source_type = source_type
        if description is not None:
            source.description = description
        source.updated_at = updated_at
        return replace(source)

    async def list_by_user(self, user_id):
        return [replace(s) for s in self._store.sources.values() if s.user_id == user_id]


class FakeEntryRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self._store = store

    async def create(self, entry: FeedbackEntry) -> FeedbackEntry:
        self._store.entries[entry.id] = replace(entry)
        return replace(entry)

    async def get_owned(self, entry_id, user_id):
        entry = self._store.entries.get(entry_id)
        if entry is None or entry.user_id != user_id:
            return None
        return replace(entry)

    async def list_by_user(self, user_id, source_id=None):
        return [
            replace(e)
            for e in self._store.entries.values()
            if e.user_id == user_id and (source_id is None or e.source_id == source_id)
        ]

    async def list_ids_by_user(self, user_id):
        return [e.id for e in self._store.entries.values() if e.user_id == user_id]


class FakeTagRepository:
    """Records every call so tests can assert the tag table was not touched."""

    def __init__(self, store: InMemoryStore) -> None:
        self._store = store
        self.calls: list[str] = []

    async def create(self, tag: FeedbackTag) -> FeedbackTag:
        self.calls.append("create")
        self._store.tags[tag.id] = replace(tag)
        return replace(tag)

    async def list_by_entry(self, feedback_id):
        self.calls.append("list_by_entry")
        return [replace(t) for t in self._store.tags.values() if t.feedback_id == feedback_id]

    async def list_by_entries(self, feedback_ids):
        self.calls.append("list_by_entries")
        wanted = set(feedback_ids)
        return [replace(t) for t in self._store.tags.values() if t.feedback_id in wanted]


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def fake_tags(store) -> FakeTagRepository:
    return FakeTagRepository(store)


@pytest.fixture
def service(store, fake_tags) -> FeedbackService:
    """FeedbackService over in-memory repositories."""
    return FeedbackService(
        FakeSourceRepository(store),
        FakeEntryRepository(store),
        fake_tags,
    )


@pytest.fixture
def mock_repos():
    """AsyncMock repositories for asserting storage was never reached."""
    return (
        AsyncMock(spec=FeedbackSourceRepository),
        AsyncMock(spec=FeedbackEntryRepository),
        AsyncMock(spec=FeedbackTagRepository),
    )


@pytest.fixture
def mocked_service(mock_repos) -> FeedbackService:
    sources, entries, tags = mock_repos
    return FeedbackService(sources, entries, tags)
