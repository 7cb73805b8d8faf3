"""Customer feedback: sources, entries, and tags scoped to their owner.

Components:
- FeedbackSource / FeedbackEntry / FeedbackTag: Dataclasses mapping to the feedback tables
- FeedbackConfig: Pydantic settings for field-length limits
- Feedback*Repository: Single-statement persistence per table
- OwnershipGuard / require_user: Authentication and ownership checks
- FeedbackService: The seven ownership-scoped operations
- FeedbackError and subclasses: Typed errors with machine-readable codes
"""

from src.feedback.config import FeedbackConfig
from src.feedback.errors import (
    FeedbackError,
    FeedbackValidationError,
    NotFoundError,
    UnauthorizedError,
)
from src.feedback.guard import OwnershipGuard, require_user
from src.feedback.repository import (
    FeedbackEntryRepository,
    FeedbackSourceRepository,
    FeedbackTagRepository,
    create_feedback_tables,
)
from src.feedback.schemas import FeedbackEntry, FeedbackSource, FeedbackTag
from src.feedback.service import FeedbackService

__all__ = [
    "FeedbackConfig",
    "FeedbackEntry",
    "FeedbackEntryRepository",
    "FeedbackError",
    "FeedbackService",
    "FeedbackSource",
    "FeedbackSourceRepository",
    "FeedbackTag",
    "FeedbackTagRepository",
    "FeedbackValidationError",
    "NotFoundError",
    "OwnershipGuard",
    "UnauthorizedError",
    "create_feedback_tables",
    "require_user",
]
