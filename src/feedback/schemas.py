"""Schema definitions for feedback sources, entries, and tags.

Each dataclass maps 1:1 to its table. Ownership flows
Source -> Entry -> Tag: entries carry a denormalized copy of the
source owner's ``user_id``; tags are owned through their entry.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def new_id() -> str:
    """Generate a globally unique record id."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class FeedbackSource:
    """A named collection bucket for feedback (survey, app store, inbox).

    Attributes:
        user_id: Owner of the source and, transitively, its entries and tags.
        name: Display name, e.g. "Website feedback form".
        source_type: Optional kind such as survey, email, nps, review.
        description: Optional free-text description.
        id: UUID4 string.
        created_at: Creation time (UTC).
        updated_at: Last modification time; equals created_at until updated.
    """

    user_id: str
    name: str
    source_type: str | None = None
    description: str | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        if not self.user_id:
            raise ValueError("Source user_id must be non-empty")
        if not self.name:
            raise ValueError("Source name must be non-empty")
        if self.updated_at is None:
            self.updated_at = self.created_at


@dataclass
class FeedbackEntry:
    """One piece of raw customer feedback tied to a source.

    Attributes:
        source_id: Parent source id.
        user_id: Copy of the parent source's owner.
        raw_text: Original feedback text.
        channel: Optional channel (email, web, play-store).
        author: Optional customer name or identifier.
        rating: Optional numeric score (stars, NPS).
        id: UUID4 string.
        created_at: Creation time (UTC).
    """

    source_id: str
    user_id: str
    raw_text: str
    channel: str | None = None
    author: str | None = None
    rating: float | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.source_id:
            raise ValueError("Entry source_id must be non-empty")
        if not self.user_id:
            raise ValueError("Entry user_id must be non-empty")
        if not self.raw_text:
            raise ValueError("Entry raw_text must be non-empty")


@dataclass
class FeedbackTag:
    """A classification label attached to an entry.

    Attributes:
        feedback_id: Parent entry id.
        tag: Label such as pricing, support, performance.
        sentiment: Optional sentiment (positive, neutral, negative).
        importance: Optional numeric weight.
        id: UUID4 string.
        created_at: Creation time (UTC).
    """

    feedback_id: str
    tag: str
    sentiment: str | None = None
    importance: float | None = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def __post_init__(self) -> None:
        if not self.feedback_id:
            raise ValueError("Tag feedback_id must be non-empty")
        if not self.tag:
            raise ValueError("Tag label must be non-empty")
