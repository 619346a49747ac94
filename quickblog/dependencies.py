"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

from quickblog.config import get_settings
from quickblog.db import BlogRepository
from quickblog.text import PostLimits
from quickblog.store import InMemoryKeyValueStore, KeyValueStore, RedisKeyValueStore

_store: KeyValueStore | None = None
_repository: BlogRepository | None = None


def get_store() -> KeyValueStore:
    """
    Return a singleton store so in-memory data persists across requests.
    """
    global _store
    if _store:
        return _store

    settings = get_settings()
    if settings.use_in_memory_backends or not settings.redis_url:
        _store = InMemoryKeyValueStore()
    else:
        _store = RedisKeyValueStore(url=settings.redis_url)
    return _store


def get_repository() -> BlogRepository:
    global _repository
    if _repository:
        return _repository

    settings = get_settings()
    _repository = BlogRepository(
        get_store(),
        limits=PostLimits(
            min_words=settings.min_words,
            max_words=settings.max_words,
            max_tags=settings.max_tags,
        ),
        bcrypt_rounds=settings.bcrypt_rounds,
    )
    return _repository
