"""Feedback service: the seven ownership-scoped operations.

Every operation follows the same order:

1. authentication gate (``require_user``)
2. input validation
3. ownership guard, when a parent source or entry is referenced
4. a single read or write against storage
"""

import logging
from numbers import Real

from src.feedback.config import FeedbackConfig
from src.feedback.errors import FeedbackValidationError, NotFoundError
from src.feedback.guard import OwnershipGuard, require_user
from src.feedback.repository import (
    FeedbackEntryRepository,
    FeedbackSourceRepository,
    FeedbackTagRepository,
)
from src.feedback.schemas import FeedbackEntry, FeedbackSource, FeedbackTag, utcnow
from src.storage.database import Database

logger = logging.getLogger(__name__)


def _required_text(field_name: str, value: str | None, max_length: int) -> str:
    if not isinstance(value, str) or not value:
        raise FeedbackValidationError(f"{field_name} must be a non-empty string.")
    if len(value) > max_length:
        raise FeedbackValidationError(
            f"{field_name} must be at most {max_length} characters."
        )
    return value


def _optional_text(field_name: str, value: str | None, max_length: int) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise FeedbackValidationError(f"{field_name} must be a string.")
    if len(value) > max_length:
        raise FeedbackValidationError(
            f"{field_name} must be at most {max_length} characters."
        )
    return value


def _optional_number(field_name: str, value: float | None) -> float | None:
    if value is None:
        return None
    # bool is a Real subclass but never a meaningful score
    if isinstance(value, bool) or not isinstance(value, Real):
        raise FeedbackValidationError(f"{field_name} must be a number.")
    return float(value)


class FeedbackService:
    """Ownership-scoped CRUD over feedback sources, entries, and tags.

    Usage:
        service = FeedbackService.from_database(db)
        source = await service.create_source(user_id, name="App Store reviews")
        entry = await service.create_entry(user_id, source.id, raw_text="Love it")
        await service.add_tag(user_id, entry.id, tag="ux", sentiment="positive")
    """

    def __init__(
        self,
        sources: FeedbackSourceRepository,
        entries: FeedbackEntryRepository,
        tags: FeedbackTagRepository,
        config: FeedbackConfig | None = None,
    ) -> None:
        self._config = config or FeedbackConfig()
        self._sources = sources
        self._entries = entries
        self._tags = tags
        self._guard = OwnershipGuard(sources, entries)

    @classmethod
    def from_database(
        cls,
        database: Database,
        config: FeedbackConfig | None = None,
    ) -> "FeedbackService":
        """Build a service with repositories bound to ``database``."""
        return cls(
            FeedbackSourceRepository(database),
            FeedbackEntryRepository(database),
            FeedbackTagRepository(database),
            config=config,
        )

    # ── Sources ─────────────────────────────────────────────────

    async def create_source(
        self,
        user_id: str | None,
        name: str,
        source_type: str | None = None,
        description: str | None = None,
    ) -> FeedbackSource:
        """Create a source owned by the caller."""
        user_id = require_user(user_id)
        cfg = self._config
        source = FeedbackSource(
            user_id=user_id,
            name=_required_text("name", name, cfg.max_name_length),
            source_type=_optional_text("sourceType", source_type, cfg.max_field_length),
            description=_optional_text("description", description, cfg.max_field_length),
        )

        created = await self._sources.create(source)
        logger.info("Created feedback source %s for %s", created.id, user_id)
        return created

    async def update_source(
        self,
        user_id: str | None,
        source_id: str,
        name: str | None = None,
        source_type: str | None = None,
        description: str | None = None,
    ) -> FeedbackSource:
        """Partially update a source the caller owns.

        At least one of name, source_type, description must be given;
        this is checked before any storage access.
        """
        user_id = require_user(user_id)
        cfg = self._config
        _required_text("id", source_id, cfg.max_field_length)
        if name is None and source_type is None and description is None:
            raise FeedbackValidationError(
                "At least one field must be provided to update."
            )
        if name is not None:
            _required_text("name", name, cfg.max_name_length)
        _optional_text("sourceType", source_type, cfg.max_field_length)
        _optional_text("description", description, cfg.max_field_length)

        await self._guard.owned_source(source_id, user_id)

        updated = await self._sources.update(
            source_id,
            user_id,
            name=name,
            source_type=source_type,
            description=description,
            updated_at=utcnow(),
        )
        if updated is None:
            raise NotFoundError("Feedback source not found.")

        logger.info("Updated feedback source %s", source_id)
        return updated

    async def list_sources(
        self, user_id: str | None
    ) -> tuple[list[FeedbackSource], int]:
        """All sources owned by the caller. Returns (sources, total)."""
        user_id = require_user(user_id)
        sources = await self._sources.list_by_user(user_id)
        return sources, len(sources)

    # ── Entries ─────────────────────────────────────────────────

    async def create_entry(
        self,
        user_id: str | None,
        source_id: str,
        raw_text: str,
        channel: str | None = None,
        author: str | None = None,
        rating: float | None = None,
    ) -> FeedbackEntry:
        """Record a feedback entry under a source the caller owns."""
        user_id = require_user(user_id)
        cfg = self._config
        _required_text("sourceId", source_id, cfg.max_field_length)
        raw_text = _required_text("rawText", raw_text, cfg.max_text_length)
        channel = _optional_text("channel", channel, cfg.max_field_length)
        author = _optional_text("author", author, cfg.max_field_length)
        rating = _optional_number("rating", rating)

        await self._guard.owned_source(source_id, user_id)

        # user_id is copied from the caller, which the guard just matched
        # against the source owner
        entry = FeedbackEntry(
            source_id=source_id,
            user_id=user_id,
            channel=channel,
            author=author,
            rating=rating,
            raw_text=raw_text,
        )
        created = await self._entries.create(entry)
        logger.info("Created feedback entry %s in source %s", created.id, source_id)
        return created

    async def list_entries(
        self,
        user_id: str | None,
        source_id: str | None = None,
    ) -> tuple[list[FeedbackEntry], int]:
        """Entries owned by the caller, optionally within one source."""
        user_id = require_user(user_id)
        if source_id:
            await self._guard.owned_source(source_id, user_id)
        else:
            source_id = None

        entries = await self._entries.list_by_user(user_id, source_id=source_id)
        return entries, len(entries)

    # ── Tags ────────────────────────────────────────────────────

    async def add_tag(
        self,
        user_id: str | None,
        feedback_id: str,
        tag: str,
        sentiment: str | None = None,
        importance: float | None = None,
    ) -> FeedbackTag:
        """Attach a tag to an entry the caller owns."""
        user_id = require_user(user_id)
        cfg = self._config
        _required_text("feedbackId", feedback_id, cfg.max_field_length)
        tag = _required_text("tag", tag, cfg.max_tag_length)
        sentiment = _optional_text("sentiment", sentiment, cfg.max_field_length)
        importance = _optional_number("importance", importance)

        await self._guard.owned_entry(feedback_id, user_id)

        created = await self._tags.create(
            FeedbackTag(
                feedback_id=feedback_id,
                tag=tag,
                sentiment=sentiment,
                importance=importance,
            )
        )
        logger.info("Tagged feedback entry %s with %r", feedback_id, created.tag)
        return created

    async def list_tags(
        self,
        user_id: str | None,
        feedback_id: str | None = None,
    ) -> tuple[list[FeedbackTag], int]:
        """Tags on the caller's entries, optionally for a single entry.

        Without ``feedback_id`` the caller's entry ids are resolved first;
        when there are none the tag table is never queried.
        """
        user_id = require_user(user_id)

        if feedback_id:
            await self._guard.owned_entry(feedback_id, user_id)
            tags = await self._tags.list_by_entry(feedback_id)
            return tags, len(tags)

        entry_ids = await self._entries.list_ids_by_user(user_id)
        if not entry_ids:
            return [], 0

        tags = await self._tags.list_by_entries(entry_ids)
        return tags, len(tags)
