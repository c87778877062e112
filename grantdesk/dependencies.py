"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import random

from grantdesk.config import get_settings
from grantdesk.db import DbClient, InMemoryDbClient, PostgresDbClient
from grantdesk.qualification import RandomSource

_db_client: DbClient | None = None
_random_source: RandomSource | None = None


def get_db_client() -> DbClient:
    """
    Return a singleton DB client so in-memory state persists across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.database_url:
        _db_client = InMemoryDbClient()
    else:
        _db_client = PostgresDbClient(settings.database_url)
    return _db_client


def get_random_source() -> RandomSource:
    """
    Random source for the qualification draw. Override in tests for
    reproducible outcomes.
    """
    global _random_source
    if _random_source is None:
        _random_source = random.Random()
    return _random_source
