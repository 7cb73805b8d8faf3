"""
Dependency injection for FastAPI endpoints.
"""

from fastapi import Depends

from src.feedback.config import FeedbackConfig
from src.feedback.service import FeedbackService
from src.storage.database import Database

# Global instances (created on first request; the pool connects on first query)
_database: Database | None = None
_feedback_config: FeedbackConfig | None = None


async def get_database() -> Database:
    """Get the shared Database.

    No connection is opened here, so request validation runs before any
    storage access. The pool is created by the first query.
    """
    global _database

    if _database is None:
        _database = Database()

    return _database


async def get_feedback_service(
    database: Database = Depends(get_database),
) -> FeedbackService:
    """Build a FeedbackService bound to the shared connection pool."""
    global _feedback_config

    if _feedback_config is None:
        _feedback_config = FeedbackConfig()

    return FeedbackService.from_database(database, config=_feedback_config)


async def cleanup_dependencies() -> None:
    """Clean up global dependencies on shutdown."""
    global _database, _feedback_config

    _feedback_config = None

    if _database is not None:
        await _database.close()
        _database = None
