"""
FastAPI feedback service.

Exposes the ownership-scoped feedback operations:
- /sources - create, update, list feedback sources
- /entries - create, list feedback entries
- /tags - add, list feedback tags
- /health - Service health check
"""

from src.api.app import create_app

__all__ = ["create_app"]
