"""Feedback repositories for the sources, entries, and tags tables.

Every write is a single ``INSERT ... RETURNING *`` or
``UPDATE ... RETURNING *`` statement. Ownership lookups filter on both
id and user_id so a record owned by someone else reads as missing.
"""

import logging
from typing import Any

from src.feedback.schemas import FeedbackEntry, FeedbackSource, FeedbackTag
from src.storage.database import Database

logger = logging.getLogger(__name__)

_CREATE_SOURCES_SQL = """
CREATE TABLE IF NOT EXISTS feedback_sources (
    id          TEXT PRIMARY KEY,
    user_id     TEXT NOT NULL,
    name        TEXT NOT NULL,
    source_type TEXT,
    description TEXT,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_feedback_sources_user
    ON feedback_sources(user_id);
"""

_CREATE_ENTRIES_SQL = """
CREATE TABLE IF NOT EXISTS feedback_entries (
    id         TEXT PRIMARY KEY,
    source_id  TEXT NOT NULL REFERENCES feedback_sources(id),
    user_id    TEXT NOT NULL,
    channel    TEXT,
    author     TEXT,
    rating     DOUBLE PRECISION,
    raw_text   TEXT NOT NULL,
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_feedback_entries_user
    ON feedback_entries(user_id);
CREATE INDEX IF NOT EXISTS idx_feedback_entries_user_source
    ON feedback_entries(user_id, source_id);
"""

_CREATE_TAGS_SQL = """
CREATE TABLE IF NOT EXISTS feedback_tags (
    id          TEXT PRIMARY KEY,
    feedback_id TEXT NOT NULL REFERENCES feedback_entries(id),
    tag         TEXT NOT NULL,
    sentiment   TEXT,
    importance  DOUBLE PRECISION,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
);

CREATE INDEX IF NOT EXISTS idx_feedback_tags_feedback
    ON feedback_tags(feedback_id);
"""


def _row_to_source(row: Any) -> FeedbackSource:
    """Convert an asyncpg Record to a FeedbackSource."""
    return FeedbackSource(
        id=row["id"],
        user_id=row["user_id"],
        name=row["name"],
        source_type=row.get("source_type"),
        description=row.get("description"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _row_to_entry(row: Any) -> FeedbackEntry:
    """Convert an asyncpg Record to a FeedbackEntry."""
    return FeedbackEntry(
        id=row["id"],
        source_id=row["source_id"],
        user_id=row["user_id"],
        channel=row.get("channel"),
        author=row.get("author"),
        rating=row.get("rating"),
        raw_text=row["raw_text"],
        created_at=row["created_at"],
    )


def _row_to_tag(row: Any) -> FeedbackTag:
    """Convert an asyncpg Record to a FeedbackTag."""
    return FeedbackTag(
        id=row["id"],
        feedback_id=row["feedback_id"],
        tag=row["tag"],
        sentiment=row.get("sentiment"),
        importance=row.get("importance"),
        created_at=row["created_at"],
    )


class FeedbackSourceRepository:
    """CRUD operations for the feedback_sources table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the feedback_sources table and indexes (idempotent)."""
        await self._db.execute(_CREATE_SOURCES_SQL)
        logger.info("feedback_sources table ensured")

    async def create(self, source: FeedbackSource) -> FeedbackSource:
        """Insert a new source and return the stored row."""
        sql = """
            INSERT INTO feedback_sources (
                id, user_id, name, source_type, description,
                created_at, updated_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            source.id,
            source.user_id,
            source.name,
            source.source_type,
            source.description,
            source.created_at,
            source.updated_at,
        )
        return _row_to_source(row)

    async def get_owned(self, source_id: str, user_id: str) -> FeedbackSource | None:
        """Fetch a source only if it belongs to ``user_id``."""
        row = await self._db.fetchrow(
            "SELECT * FROM feedback_sources WHERE id = $1 AND user_id = $2",
            source_id,
            user_id,
        )
        return _row_to_source(row) if row else None

    async def update(
        self,
        source_id: str,
        user_id: str,
        *,
        name: str | None = None,
        source_type: str | None = None,
        description: str | None = None,
        updated_at: Any,
    ) -> FeedbackSource | None:
        """Apply the non-None fields and stamp updated_at.

        Returns the updated source, or None if no row owned by
        ``user_id`` matched.
        """
        sql = """
            UPDATE feedback_sources SET
                name = COALESCE($3, name),
                source_type = COALESCE($4, source_type),
                description = COALESCE($5, description),
                updated_at = $6
            WHERE id = $1 AND user_id = $2
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql, source_id, user_id, name, source_type, description, updated_at
        )
        return _row_to_source(row) if row else None

    async def list_by_user(self, user_id: str) -> list[FeedbackSource]:
        """All sources owned by ``user_id``, oldest first."""
        rows = await self._db.fetch(
            "SELECT * FROM feedback_sources WHERE user_id = $1 ORDER BY created_at",
            user_id,
        )
        return [_row_to_source(r) for r in rows]


class FeedbackEntryRepository:
    """CRUD operations for the feedback_entries table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the feedback_entries table and indexes (idempotent)."""
        await self._db.execute(_CREATE_ENTRIES_SQL)
        logger.info("feedback_entries table ensured")

    async def create(self, entry: FeedbackEntry) -> FeedbackEntry:
        """Insert a new entry and return the stored row."""
        sql = """
            INSERT INTO feedback_entries (
                id, source_id, user_id, channel, author,
                rating, raw_text, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            entry.id,
            entry.source_id,
            entry.user_id,
            entry.channel,
            entry.author,
            entry.rating,
            entry.raw_text,
            entry.created_at,
        )
        return _row_to_entry(row)

    async def get_owned(self, entry_id: str, user_id: str) -> FeedbackEntry | None:
        """Fetch an entry only if it belongs to ``user_id``."""
        row = await self._db.fetchrow(
            "SELECT * FROM feedback_entries WHERE id = $1 AND user_id = $2",
            entry_id,
            user_id,
        )
        return _row_to_entry(row) if row else None

    async def list_by_user(
        self,
        user_id: str,
        source_id: str | None = None,
    ) -> list[FeedbackEntry]:
        """Entries owned by ``user_id``, optionally narrowed to one source."""
        conditions = ["user_id = $1"]
        params: list[Any] = [user_id]

        if source_id is not None:
            conditions.append("source_id = $2")
            params.append(source_id)

        sql = f"""
            SELECT * FROM feedback_entries
            WHERE {" AND ".join(conditions)}
            ORDER BY created_at
        """
        rows = await self._db.fetch(sql, *params)
        return [_row_to_entry(r) for r in rows]

    async def list_ids_by_user(self, user_id: str) -> list[str]:
        """Ids of every entry owned by ``user_id``."""
        rows = await self._db.fetch(
            "SELECT id FROM feedback_entries WHERE user_id = $1",
            user_id,
        )
        return [r["id"] for r in rows]


class FeedbackTagRepository:
    """CRUD operations for the feedback_tags table."""

    def __init__(self, database: Database) -> None:
        self._db = database

    async def create_table(self) -> None:
        """Create the feedback_tags table and indexes (idempotent)."""
        await self._db.execute(_CREATE_TAGS_SQL)
        logger.info("feedback_tags table ensured")

    async def create(self, tag: FeedbackTag) -> FeedbackTag:
        """Insert a new tag and return the stored row."""
        sql = """
            INSERT INTO feedback_tags (
                id, feedback_id, tag, sentiment, importance, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6)
            RETURNING *
        """
        row = await self._db.fetchrow(
            sql,
            tag.id,
            tag.feedback_id,
            tag.tag,
            tag.sentiment,
            tag.importance,
            tag.created_at,
        )
        return _row_to_tag(row)

    async def list_by_entry(self, feedback_id: str) -> list[FeedbackTag]:
        """Tags attached to a single entry."""
        rows = await self._db.fetch(
            "SELECT * FROM feedback_tags WHERE feedback_id = $1 ORDER BY created_at",
            feedback_id,
        )
        return [_row_to_tag(r) for r in rows]

    async def list_by_entries(self, feedback_ids: list[str]) -> list[FeedbackTag]:
        """Tags attached to any of ``feedback_ids``.

        An empty id list returns [] without touching the database.
        """
        if not feedback_ids:
            return []
        rows = await self._db.fetch(
            """
            SELECT * FROM feedback_tags
            WHERE feedback_id = ANY($1::text[])
            ORDER BY created_at
            """,
            feedback_ids,
        )
        return [_row_to_tag(r) for r in rows]


async def create_feedback_tables(database: Database) -> None:
    """Create all feedback tables in dependency order."""
    await FeedbackSourceRepository(database).create_table()
    await FeedbackEntryRepository(database).create_table()
    await FeedbackTagRepository(database).create_table()
