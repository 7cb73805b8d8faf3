"""Storage layer: asyncpg connection pool shared by the feedback repositories."""

from src.storage.database import Database

__all__ = ["Database"]
