"""Shared fixtures for API tests."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from src.api.app import create_app
from src.api.auth import get_current_user
from src.api.dependencies import get_database, get_feedback_service
from src.feedback.schemas import FeedbackEntry, FeedbackSource, FeedbackTag
from src.feedback.service import FeedbackService

CREATED = datetime(2026, 2, 5, 10, 0, 0, tzinfo=timezone.utc)


def _make_source(source_id: str = "src-1", **kwargs) -> FeedbackSource:
    """Helper to create a FeedbackSource with sensible defaults."""
    return FeedbackSource(
        id=source_id,
        user_id=kwargs.pop("user_id", "user-a"),
        name=kwargs.pop("name", "Website feedback"),
        source_type=kwargs.pop("source_type", "survey"),
        description=kwargs.pop("description", None),
        created_at=kwargs.pop("created_at", CREATED),
        **kwargs,
    )


def _make_entry(entry_id: str = "entry-1", **kwargs) -> FeedbackEntry:
    """Helper to create a FeedbackEntry with sensible defaults."""
    return FeedbackEntry(
        id=entry_id,
        source_id=kwargs.pop("source_id", "src-1"),
        user_id=kwargs.pop("user_id", "user-a"),
        channel=kwargs.pop("channel", "web"),
        author=kwargs.pop("author", None),
        rating=kwargs.pop("rating", 4.5),
        raw_text=kwargs.pop("raw_text", "Checkout is confusing"),
        created_at=kwargs.pop("created_at", CREATED),
    )


def _make_tag(tag_id: str = "tag-1", **kwargs) -> FeedbackTag:
    """Helper to create a FeedbackTag with sensible defaults."""
    return FeedbackTag(
        id=tag_id,
        feedback_id=kwargs.pop("feedback_id", "entry-1"),
        tag=kwargs.pop("tag", "ux"),
        sentiment=kwargs.pop("sentiment", "negative"),
        importance=kwargs.pop("importance", 2.0),
        created_at=kwargs.pop("created_at", CREATED),
    )


@pytest.fixture
def mock_service():
    """Mock FeedbackService."""
    service = AsyncMock(spec=FeedbackService)
    service.create_source = AsyncMock(return_value=_make_source())
    service.update_source = AsyncMock(return_value=_make_source())
    service.list_sources = AsyncMock(return_value=([], 0))
    service.create_entry = AsyncMock(return_value=_make_entry())
    service.list_entries = AsyncMock(return_value=([], 0))
    service.add_tag = AsyncMock(return_value=_make_tag())
    service.list_tags = AsyncMock(return_value=([], 0))
    return service


@pytest.fixture
def mock_db():
    """Mock Database for /health."""
    db = AsyncMock()
    db.health_check = AsyncMock(return_value=True)
    return db


@pytest.fixture
def client(mock_service, mock_db):
    """FastAPI TestClient authenticated as user-a."""
    app = create_app()

    app.dependency_overrides[get_current_user] = lambda: "user-a"
    app.dependency_overrides[get_feedback_service] = lambda: mock_service
    app.dependency_overrides[get_database] = lambda: mock_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def anon_client(mock_service, mock_db):
    """TestClient with real identity resolution (development mode by default)."""
    app = create_app()

    app.dependency_overrides[get_feedback_service] = lambda: mock_service
    app.dependency_overrides[get_database] = lambda: mock_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
