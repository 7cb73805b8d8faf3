"""Authentication and ownership checks shared by every feedback operation."""

import logging

from src.feedback.errors import NotFoundError, UnauthorizedError
from src.feedback.repository import FeedbackEntryRepository, FeedbackSourceRepository
from src.feedback.schemas import FeedbackEntry, FeedbackSource

logger = logging.getLogger(__name__)


def require_user(user_id: str | None) -> str:
    """Return the caller identity or raise UnauthorizedError."""
    if not user_id:
        raise UnauthorizedError("You must be signed in to perform this action.")
    return user_id


class OwnershipGuard:
    """Resolve a source or entry on behalf of its owner.

    A record that does not exist and a record owned by someone else
    both raise NotFoundError.
    """

    def __init__(
        self,
        sources: FeedbackSourceRepository,
        entries: FeedbackEntryRepository,
    ) -> None:
        self._sources = sources
        self._entries = entries

    async def owned_source(self, source_id: str, user_id: str) -> FeedbackSource:
        source = await self._sources.get_owned(source_id, user_id)
        if source is None:
            logger.debug("Source %s not visible to %s", source_id, user_id)
            raise NotFoundError("Feedback source not found.")
        return source

    async def owned_entry(self, entry_id: str, user_id: str) -> FeedbackEntry:
        entry = await self._entries.get_owned(entry_id, user_id)
        if entry is None:
            logger.debug("Entry %s not visible to %s", entry_id, user_id)
            raise NotFoundError("Feedback entry not found.")
        return entry
